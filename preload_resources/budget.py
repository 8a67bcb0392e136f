"""Header size accounting for preload emission."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from preload_resources.config import DEFAULT_MAX_HEADER_SIZE

HeaderPair = tuple[bytes | str, bytes | str]

# Separator between serialised header lines, and the trailing CRLF.
_LINE_SEPARATOR = b"  "
_TERMINATOR_SIZE = 2


def _as_bytes(value: bytes | str) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("latin-1", errors="replace")


def serialise_headers(headers: Iterable[HeaderPair]) -> list[bytes]:
    return [_as_bytes(name) + b": " + _as_bytes(value) for name, value in headers]


@dataclass(slots=True)
class HeaderBudget:
    """Ceiling on the total size of the outgoing header block."""

    max_bytes: int = DEFAULT_MAX_HEADER_SIZE

    def header_size(
        self, headers: Iterable[HeaderPair], pending: HeaderPair | None = None
    ) -> int:
        lines = serialise_headers(headers)
        if pending is not None:
            lines.extend(serialise_headers((pending,)))
        return len(_LINE_SEPARATOR.join(lines)) + _TERMINATOR_SIZE

    def is_allowed(
        self, headers: Iterable[HeaderPair], pending: HeaderPair | None = None
    ) -> bool:
        """Return whether the header block fits the budget.

        Always measured from the live header list so headers added by other
        middleware or an earlier pass are counted. ``pending`` is a header
        about to be appended and is included in the measurement.
        """

        return self.header_size(headers, pending) <= self.max_bytes


__all__ = ["HeaderBudget", "HeaderPair", "serialise_headers"]
