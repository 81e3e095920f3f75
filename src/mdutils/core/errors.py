"""Error hierarchy for mdutils."""

from __future__ import annotations


class MdutilsError(Exception):
    """Base exception for all mdutils errors."""

    pass


class ConfigError(MdutilsError):
    """Configuration loading or validation error."""

    pass


class ParseError(MdutilsError):
    """A located link construct is inconsistent with its kind."""

    pass


class PolicyError(MdutilsError):
    """A replacement policy failed while deciding a link's new destination."""

    pass


class SummaryError(MdutilsError):
    """The directory tree cannot be turned into a summary (e.g. two index files)."""

    pass


class MoveError(MdutilsError):
    """Invalid move request (missing source, destination not a directory)."""

    pass


class DriftError(MdutilsError):
    """The on-disk summary differs from the freshly rendered one."""

    def __init__(self, message: str, diff: list[str]) -> None:
        super().__init__(message)
        self.diff = diff
