"""
Aggregate Exporter Module
=========================

Writes the item aggregation workbook (품목별 집계).
"""

import logging
from pathlib import Path
from typing import List

from builders.aggregate_builder import display_item_name
from config import AGGREGATE_FILE_SUFFIX, AGGREGATE_HEADERS, AGGREGATE_SHEET_NAME
from models import AggregateRow
from utils.helpers import make_dated_file_name

from .base_exporter import SheetWriter, write_workbook


class AggregateExporter:
    """
    Item aggregation exporter.

    Columns:
    - 품목명: item name with the 5kg -> 4.5kg / 10kg -> 9kg label rewrite
    - 총 박스수량: summed box quantity
    """

    def __init__(self, aggregate_rows: List[AggregateRow]):
        self.aggregate_rows = aggregate_rows

    def _sheet(self) -> SheetWriter:
        item_col, box_col = AGGREGATE_HEADERS
        rows = [
            {item_col: display_item_name(r.item_name), box_col: r.total_box}
            for r in self.aggregate_rows
        ]
        return SheetWriter(
            AGGREGATE_HEADERS,
            rows,
            AGGREGATE_SHEET_NAME,
            widths={item_col: 70, box_col: 16},
        )

    def to_bytes(self) -> bytes:
        return write_workbook([self._sheet()])

    def export(self, output_dir: Path) -> Path:
        output_file = Path(output_dir) / make_dated_file_name(AGGREGATE_FILE_SUFFIX)
        write_workbook([self._sheet()], output_file)
        logging.info(f"[aggregate] {len(self.aggregate_rows)} items written")
        print(f"📁 Item aggregate saved to {output_file}")
        return output_file
