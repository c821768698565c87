"""Phrase matching with whole-word semantics."""

import re
from collections.abc import Iterable

PHRASE_SEPARATORS = re.compile(r"[,;]")

# Phrase must be surrounded by non-word characters or the string edges.
WORD_BOUNDARY_TEMPLATE = r"(^|.*[^\w]){phrase}([^\w].*|$)"


class PhraseMatcher:
    """Matches strings against a set of compiled patterns.

    Patterns are OR-combined and each must match the whole value. An empty
    pattern set cannot filter and accepts every value, None included.
    """

    def __init__(self, patterns: Iterable[re.Pattern[str]] = ()) -> None:
        self._patterns: tuple[re.Pattern[str], ...] = tuple(patterns)

    @classmethod
    def from_phrases(cls, phrases: str | None, case_sensitive: bool = False) -> "PhraseMatcher":
        """Build a matcher from a comma or semicolon separated phrase list.

        Each phrase is escaped and anchored to word boundaries, so "t" does
        not match inside "test".

        Args:
            phrases: Raw phrase string, e.g. "WIP; do not merge".
            case_sensitive: Compile without re.IGNORECASE when True.

        Returns:
            PhraseMatcher over the non-blank phrases.
        """
        flags = 0 if case_sensitive else re.IGNORECASE
        return cls(
            re.compile(WORD_BOUNDARY_TEMPLATE.format(phrase=re.escape(phrase)), flags)
            for phrase in split_phrases(phrases)
        )

    @classmethod
    def from_pattern(
        cls,
        pattern: str | re.Pattern[str] | None,
        case_sensitive: bool = True,
    ) -> "PhraseMatcher":
        """Build a matcher around a single caller-supplied pattern.

        The pattern is used verbatim: no escaping and no boundary wrapping.

        Raises:
            re.error: If a string pattern does not compile.
        """
        if pattern is None:
            return cls()
        if isinstance(pattern, re.Pattern):
            return cls([pattern])
        flags = 0 if case_sensitive else re.IGNORECASE
        return cls([re.compile(pattern, flags)])

    @property
    def patterns(self) -> tuple[re.Pattern[str], ...]:
        return self._patterns

    def can_filter(self) -> bool:
        return bool(self._patterns)

    def accepted(self, value: str | None) -> bool:
        """Check a value against the pattern set.

        Args:
            value: String to test, or None when the field is absent.

        Returns:
            True if the matcher is inert or any pattern fully matches.
        """
        if not self.can_filter():
            return True

        if value is None:
            return False

        return any(pattern.fullmatch(value) for pattern in self._patterns)

    def __repr__(self) -> str:
        return f"PhraseMatcher({[p.pattern for p in self._patterns]!r})"


def split_phrases(phrases: str | None) -> list[str]:
    """Split raw phrase input into trimmed, non-blank tokens."""
    if not phrases:
        return []
    return [token.strip() for token in PHRASE_SEPARATORS.split(phrases) if token.strip()]
