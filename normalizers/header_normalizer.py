"""Header name resolution tolerant to whitespace differences."""

import re
from typing import Dict, List, Optional, Sequence

from models import Row


def normalize_header(value) -> str:
    """
    Strip every whitespace character from a header.

    Comparison stays case-sensitive.

    Examples:
        >>> normalize_header(" 상품 주문번호 ")
        '상품주문번호'
    """
    text = "" if value is None else str(value)
    return re.sub(r"\s+", "", text)


class HeaderResolver:
    """Map logical column names to the header text a sheet actually uses."""

    def __init__(self, headers: Sequence):
        """
        Build the lookup table for one dataset.

        Args:
            headers: Header row as read from the sheet (any cell values)
        """
        self.headers: List[str] = ["" if h is None else str(h) for h in headers]
        self._normalized: List[str] = [normalize_header(h) for h in self.headers]
        self._lookup: Dict[str, str] = {}
        for norm, header in zip(self._normalized, self.headers):
            # last one wins, same as a plain dict built from the row
            self._lookup[norm] = header

    def resolve(self, wanted: str) -> str:
        """Actual header matching `wanted`, or `wanted` itself when absent."""
        return self._lookup.get(normalize_header(wanted), wanted)

    def has(self, wanted: str) -> bool:
        return normalize_header(wanted) in self._lookup

    def find_index(self, target: str) -> Optional[int]:
        """
        Position of the column for `target`.

        Exact (normalized) match is preferred; otherwise the first header
        containing `target` is used.

        Returns:
            Column index, or None if nothing matches
        """
        t = normalize_header(target)
        if not t:
            return None
        for i, norm in enumerate(self._normalized):
            if norm == t:
                return i
        for i, norm in enumerate(self._normalized):
            if t in norm:
                return i
        return None


def resolve_header(headers: Sequence, wanted: str) -> str:
    return HeaderResolver(headers).resolve(wanted)


def has_header(headers: Sequence, wanted: str) -> bool:
    return HeaderResolver(headers).has(wanted)


def ensure_all_headers(headers: Sequence[str], rows: List[Row]) -> List[Row]:
    """
    Make the row set rectangular: every header key present on every row.

    Missing cells are filled with "". Rows are updated in place and also
    returned for chaining.
    """
    for row in rows:
        for h in headers:
            if h not in row:
                row[h] = ""
    return rows
