"""Canonical order key extraction."""

from typing import Sequence

from config import ORIGINAL_FALLBACK_KEY_COL, ORIGINAL_KEY_COL
from models import Row
from normalizers.header_normalizer import HeaderResolver
from utils.helpers import to_text


class OrderKeyExtractor:
    """
    Derive one order key per row.

    The primary column wins; the fallback column is used only when the
    primary cell is blank. "" means the row has no usable key.
    """

    def __init__(self, primary_header: str = ORIGINAL_KEY_COL,
                 fallback_header: str = ORIGINAL_FALLBACK_KEY_COL):
        self.primary_header = primary_header
        self.fallback_header = fallback_header

    @classmethod
    def for_headers(cls, headers: Sequence) -> "OrderKeyExtractor":
        """Resolve the configured key columns against a sheet's headers."""
        resolver = headers if isinstance(headers, HeaderResolver) else HeaderResolver(headers)
        return cls(
            resolver.resolve(ORIGINAL_KEY_COL),
            resolver.resolve(ORIGINAL_FALLBACK_KEY_COL),
        )

    def extract(self, row: Row) -> str:
        primary = to_text(row.get(self.primary_header)).strip()
        if primary:
            return primary
        return to_text(row.get(self.fallback_header)).strip()

    __call__ = extract
