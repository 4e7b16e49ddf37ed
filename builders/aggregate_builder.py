"""Item aggregation: total boxes per item name, sorted by fruit and weight."""

import logging
import math
import re
from typing import List, Optional, Sequence

import pandas as pd

from config import FRUIT_KEYWORDS, ORIGINAL_BOX_COL, ORIGINAL_ITEM_COL, ORIGINAL_QTY_COL
from models import AggregateRow, Row
from normalizers.header_normalizer import HeaderResolver
from utils.helpers import collation_key, correct_kg, extract_kg, parse_quantity, to_text


# Label text rewrite for the aggregate sheet; a preceding digit or dot
# blocks the match so "2.5kg" and "15kg" stay as they are. Word boundary
# after the unit is ASCII-only, so "5kg가정용" is still rewritten.
_DISPLAY_REWRITES = [
    (re.compile(r"(?<![\d.])5(\s*kg\b)", re.IGNORECASE | re.ASCII), r"4.5\g<1>"),
    (re.compile(r"(?<![\d.])10(\s*kg\b)", re.IGNORECASE | re.ASCII), r"9\g<1>"),
]


def extract_fruit_key(item_name: str) -> str:
    """First configured keyword found in the name, else its first word."""
    for keyword in FRUIT_KEYWORDS:
        if keyword in item_name:
            return keyword
    parts = item_name.split()
    return parts[0] if parts else item_name


def display_item_name(item_name: str) -> str:
    """
    Item name as written to the aggregate workbook.

    Examples:
        >>> display_item_name("감귤 5kg")
        '감귤 4.5kg'
        >>> display_item_name("한라봉 10 KG")
        '한라봉 9 KG'
    """
    for pattern, repl in _DISPLAY_REWRITES:
        item_name = pattern.sub(repl, item_name)
    return item_name


def _row_headers(rows: List[Row]) -> List[str]:
    seen = {}
    for row in rows:
        for k in row.keys():
            seen.setdefault(k, None)
    return list(seen)


def quantity_header(resolver: HeaderResolver) -> Optional[str]:
    """Box quantity column, or the plain quantity column when boxes are absent."""
    if resolver.has(ORIGINAL_BOX_COL):
        return resolver.resolve(ORIGINAL_BOX_COL)
    if resolver.has(ORIGINAL_QTY_COL):
        return resolver.resolve(ORIGINAL_QTY_COL)
    return None


def _sort_key(row: AggregateRow):
    kg = row.kg if row.kg is not None else math.inf
    return (collation_key(row.fruit_key), kg, collation_key(row.item_name))


class ItemAggregateBuilder:
    """Build AggregateRow objects from original order rows."""

    def __init__(self, rows: List[Row], headers: Sequence[str] = None):
        """
        Initialize builder.

        Args:
            rows: Original order rows
            headers: Sheet headers; derived from the row keys when omitted
        """
        self.rows = rows
        self.resolver = HeaderResolver(headers if headers is not None else _row_headers(rows))
        self.item_header = self.resolver.resolve(ORIGINAL_ITEM_COL)
        self.qty_header = quantity_header(self.resolver)
        self.aggregate_rows: List[AggregateRow] = []

    def _to_frame(self) -> pd.DataFrame:
        records = []
        for row in self.rows:
            item_name = to_text(row.get(self.item_header)).strip()
            if not item_name:
                continue
            qty = parse_quantity(row.get(self.qty_header)) if self.qty_header else 0.0
            records.append({"item_name": item_name, "qty": qty})
        return pd.DataFrame(records, columns=["item_name", "qty"])

    def build(self) -> List[AggregateRow]:
        """
        Group by exact item name and sort.

        Order: fruit key, then corrected kg ascending (no weight last),
        then item name.

        Returns:
            Sorted list of AggregateRow
        """
        df = self._to_frame()
        if df.empty:
            self.aggregate_rows = []
            return self.aggregate_rows

        totals = df.groupby("item_name", sort=False)["qty"].sum()

        result = []
        for item_name, total in totals.items():
            total = float(total)
            result.append(AggregateRow(
                item_name=item_name,
                total_box=int(total) if total.is_integer() else total,
                kg=correct_kg(extract_kg(item_name)),
                fruit_key=extract_fruit_key(item_name),
            ))

        result.sort(key=_sort_key)
        logging.info(f"[aggregate] {len(result)} items from {len(df)} rows")
        self.aggregate_rows = result
        return result


def build_aggregate_rows(rows: List[Row], headers: Sequence[str] = None) -> List[AggregateRow]:
    return ItemAggregateBuilder(rows, headers).build()


def total_quantity(headers: Sequence[str], rows: List[Row]) -> float:
    """Sum of the quantity column over every row (0 when no such column)."""
    qty_header = quantity_header(HeaderResolver(headers))
    if qty_header is None:
        return 0
    total = sum(parse_quantity(row.get(qty_header)) for row in rows)
    return int(total) if float(total).is_integer() else total
