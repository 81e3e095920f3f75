"""Port interfaces for mdutils."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ReplacementPolicy(ABC):
    """Port for deciding the new destination of a located link.

    Policies are callables so that a plain function can be used in their
    place wherever a decision function is accepted.
    """

    @abstractmethod
    def decide(self, link: str) -> str | None:
        """Decide what a link destination should become.

        Args:
            link: The destination with surrounding whitespace trimmed.

        Returns:
            The replacement destination, or None to leave the link untouched.

        Raises:
            PolicyError: If the decision cannot be made.
        """

    def __call__(self, link: str) -> str | None:
        return self.decide(link)
