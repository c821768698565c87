"""Base types shared by pull request head filters."""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass
class FilterResult:
    """Result of evaluating one head against a filter.

    Attributes:
        excluded: Whether the head should be dropped from discovery.
        reason: Message logged for the exclusion (None if not excluded).
        filter_name: Name of the filter that produced this result.
    """

    excluded: bool
    reason: str | None = None
    filter_name: str = ""


@runtime_checkable
class FilterCapability(Protocol):
    """Decides whether a single extracted value is acceptable.

    Implementations must accept every value, including None, when
    can_filter() is False.
    """

    def can_filter(self) -> bool:
        """Return True if this capability is configured to reject anything."""
        ...

    def accepted(self, value: Any) -> bool:
        """Return True if the value passes."""
        ...
