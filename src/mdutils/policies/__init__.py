"""Replacement policies: decide the new destination for each located link."""

from mdutils.policies.local_links import LocalLinkPolicy
from mdutils.policies.moves import MoveList, MoveRewritePolicy, normalize_path
from mdutils.policies.regex_table import RegexTable

__all__ = [
    "LocalLinkPolicy",
    "MoveList",
    "MoveRewritePolicy",
    "RegexTable",
    "normalize_path",
]
