"""Regroup original rows into CJ portal upload rows, one group per item."""

import logging
from typing import Dict, List, Sequence

from config import CJ_UPLOAD_HEADERS, CJ_UPLOAD_KEY_COL, ORIGINAL_ITEM_COL
from models import Row
from normalizers.header_normalizer import HeaderResolver, normalize_header
from normalizers.order_normalizer import OrderKeyExtractor
from utils.helpers import to_text


class CjUploadBuilder:
    """
    Build the per-item CJ upload sets.

    Every output row has exactly the CJ_UPLOAD_HEADERS columns. The
    customer order number field always carries the canonical order key,
    so the carrier's reply can be matched back to the original.
    """

    def __init__(self, headers: Sequence[str], rows: List[Row]):
        self.headers = list(headers)
        self.rows = rows
        self.resolver = HeaderResolver(self.headers)
        self.key_extractor = OrderKeyExtractor.for_headers(self.resolver)
        self.item_header = self.resolver.resolve(ORIGINAL_ITEM_COL)
        self.skipped_no_item = 0
        self.skipped_no_key = 0

    def _get(self, row: Row, header: str):
        if not self.resolver.has(header):
            return ""
        value = row.get(self.resolver.resolve(header))
        return "" if value is None else value

    def _to_upload_row(self, row: Row, order_key: str) -> Row:
        out: Row = {}
        key_norm = normalize_header(CJ_UPLOAD_KEY_COL)
        for h in CJ_UPLOAD_HEADERS:
            if normalize_header(h) == key_norm:
                out[h] = order_key
            else:
                out[h] = self._get(row, h)
        return out

    def build_groups(self) -> Dict[str, List[Row]]:
        """
        Group upload rows by item name.

        Rows without an item name or without an order key are left out.

        Returns:
            {item name: [upload row, ...]} in encounter order
        """
        groups: Dict[str, List[Row]] = {}
        self.skipped_no_item = 0
        self.skipped_no_key = 0

        for i, row in enumerate(self.rows):
            item_name = to_text(row.get(self.item_header)).strip()
            if not item_name:
                self.skipped_no_item += 1
                logging.debug(f"[cj-upload] row {i}: blank item name, skipped")
                continue

            order_key = self.key_extractor.extract(row)
            if not order_key:
                # no key -> the reply could never be matched back
                self.skipped_no_key += 1
                logging.debug(f"[cj-upload] row {i} ({item_name}): no order key, skipped")
                continue

            groups.setdefault(item_name, []).append(self._to_upload_row(row, order_key))

        if self.skipped_no_item or self.skipped_no_key:
            logging.info(
                f"[cj-upload] skipped {self.skipped_no_item} rows without item name, "
                f"{self.skipped_no_key} rows without order key"
            )
        return groups


def build_cj_groups(headers: Sequence[str], rows: List[Row]) -> Dict[str, List[Row]]:
    return CjUploadBuilder(headers, rows).build_groups()
