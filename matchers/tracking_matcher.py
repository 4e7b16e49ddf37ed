"""Tracking reconciler: write reply tracking numbers back into the original rows."""

import logging
from collections import Counter
from typing import Dict, List, Mapping, Sequence, Tuple, Union

from config import ALT_TRACKING_COLS, ORIGINAL_TRACKING_COL
from models import DuplicateEntry, ReconciliationResult, Row, TrackingMultiMap, UnmatchedEntry
from normalizers.header_normalizer import HeaderResolver, ensure_all_headers
from normalizers.order_normalizer import OrderKeyExtractor


def tracking_nth_header(base_header: str, n: int) -> str:
    """Name of the n-th tracking column: '운송장번호(2)', '송장번호(3)', ..."""
    return f"{base_header}({n})"


class TrackingReconciler:
    """
    Apply a tracking multimap to the original rows.

    The header list grows by one column per extra tracking number the
    longest reply list needs: base, base(2), ... base(k). Rows are copied,
    never reordered or dropped. When one order key spans several original
    rows, every one of those rows receives the full tracking list.
    """

    def __init__(self, headers: Sequence[str], rows: List[Row]):
        self.headers = list(headers)
        self.rows = rows
        self.resolver = HeaderResolver(self.headers)
        self.key_extractor = OrderKeyExtractor.for_headers(self.resolver)
        self.tracking_header = self.resolver.resolve(self._tracking_base_wanted())

    def _tracking_base_wanted(self) -> str:
        for alt in ALT_TRACKING_COLS:
            if self.resolver.has(alt):
                return alt
        return ORIGINAL_TRACKING_COL

    def find_duplicates(self) -> List[DuplicateEntry]:
        """Order keys that occur on more than one original row."""
        counts = Counter(k for k in (self.key_extractor.extract(r) for r in self.rows) if k)
        return [DuplicateEntry(key, count) for key, count in counts.items() if count > 1]

    def _build_index(self, rows: List[Row]) -> Dict[str, List[int]]:
        index: Dict[str, List[int]] = {}
        for i, row in enumerate(rows):
            key = self.key_extractor.extract(row)
            if key:
                index.setdefault(key, []).append(i)
        return index

    def _extend_headers(self, max_count: int) -> Tuple[List[str], List[str]]:
        """
        Base header plus base(2)..base(max_count).

        Names are resolved against the existing headers so a column that
        already exists (even with different spacing) is reused.
        """
        updated = list(self.headers)
        resolver = self.resolver

        tracking_headers = [self.tracking_header]
        for n in range(2, max_count + 1):
            tracking_headers.append(resolver.resolve(tracking_nth_header(self.tracking_header, n)))

        for h in tracking_headers:
            if not resolver.has(h):
                updated.append(h)
                resolver = HeaderResolver(updated)
        return tracking_headers, updated

    def apply(self, mapping: Union[TrackingMultiMap, Mapping[str, List[str]]]) -> ReconciliationResult:
        """
        Reconcile tracking numbers into a copy of the rows.

        Args:
            mapping: customer order number -> tracking numbers

        Returns:
            ReconciliationResult with updated headers/rows, unmatched
            (order number, tracking) pairs and duplicate order keys
        """
        if not isinstance(mapping, TrackingMultiMap):
            mapping = TrackingMultiMap.from_dict(mapping)

        duplicates = self.find_duplicates()
        updated_rows = [dict(r) for r in self.rows]
        index = self._build_index(updated_rows)

        max_count = max(1, mapping.max_list_length())
        tracking_headers, updated_headers = self._extend_headers(max_count)

        unmatched: List[UnmatchedEntry] = []
        for order_no, tracking_list in mapping.items():
            idxs = index.get(order_no)
            if not idxs:
                unmatched.extend(UnmatchedEntry(order_no, t) for t in tracking_list)
                continue

            for i in idxs:
                row = updated_rows[i]
                for pos, header in enumerate(tracking_headers):
                    if pos < len(tracking_list):
                        row[header] = tracking_list[pos]
                    elif header not in row:
                        row[header] = ""

        ensure_all_headers(updated_headers, updated_rows)

        if duplicates:
            logging.info(f"[tracking] {len(duplicates)} order keys appear on more than one row")
        if unmatched:
            logging.info(f"[tracking] {len(unmatched)} tracking numbers have no matching order")

        return ReconciliationResult(
            updated_headers=updated_headers,
            updated_rows=updated_rows,
            unmatched=unmatched,
            duplicates=duplicates,
            total_reply_count=len(mapping),
        )


def apply_tracking(headers: Sequence[str], rows: List[Row],
                   mapping: Union[TrackingMultiMap, Mapping[str, List[str]]]) -> ReconciliationResult:
    return TrackingReconciler(headers, rows).apply(mapping)
