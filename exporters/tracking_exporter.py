"""
Tracking Exporter Module
========================

Handles the two stage-4 downloads:
- the original export with tracking numbers filled in
- the unmatched reply list (미매칭)
"""

import logging
from pathlib import Path
from typing import List

from config import (
    DEFAULT_SHEET_NAME,
    FINAL_FILE_SUFFIX,
    TRACKING_HIGHLIGHT_COLOR,
    TRACKING_LABEL_PREFIXES,
    UNMATCHED_FILE_SUFFIX,
    UNMATCHED_HEADERS,
    UNMATCHED_SHEET_NAME,
)
from models import Row, UnmatchedEntry
from normalizers.header_normalizer import normalize_header
from utils.helpers import make_dated_file_name, to_text

from .base_exporter import SheetWriter, write_workbook


def is_tracking_header(header: str) -> bool:
    """True for '운송장번호', '송장번호', '운송장번호(2)', ..."""
    normalized = normalize_header(header)
    return any(normalized.startswith(normalize_header(p)) for p in TRACKING_LABEL_PREFIXES)


class TrackingExporter:
    """
    Final workbook exporter.

    Output layout:
    - every header of the job, in order, values as text
    - bold header, thin black border over the whole table
    - tracking columns filled light yellow
    """

    def __init__(self, headers: List[str], rows: List[Row]):
        self.headers = list(headers)
        self.rows = rows

    def _final_sheet(self) -> SheetWriter:
        text_rows = [{h: to_text(r.get(h)) for h in self.headers} for r in self.rows]
        return SheetWriter(
            self.headers,
            text_rows,
            DEFAULT_SHEET_NAME,
            widths={h: (22 if len(h) > 10 else 16) for h in self.headers},
            bordered=True,
            highlight_columns=[h for h in self.headers if is_tracking_header(h)],
            highlight_color=TRACKING_HIGHLIGHT_COLOR,
        )

    def to_bytes(self) -> bytes:
        return write_workbook([self._final_sheet()])

    def export(self, output_dir: Path) -> Path:
        output_file = Path(output_dir) / make_dated_file_name(FINAL_FILE_SUFFIX)
        write_workbook([self._final_sheet()], output_file)
        logging.info(f"[final] {len(self.rows)} rows, {len(self.headers)} columns written")
        print(f"📁 Final workbook saved to {output_file}")
        return output_file


class UnmatchedExporter:
    """Unmatched report: 고객주문번호 / 운송장번호, one row per entry."""

    def __init__(self, unmatched: List[UnmatchedEntry]):
        self.unmatched = unmatched

    def _sheet(self) -> SheetWriter:
        key_col, trk_col = UNMATCHED_HEADERS
        rows = [{key_col: u.customer_order_no, trk_col: u.tracking} for u in self.unmatched]
        return SheetWriter(
            UNMATCHED_HEADERS,
            rows,
            UNMATCHED_SHEET_NAME,
            widths={key_col: 24, trk_col: 20},
        )

    def to_bytes(self) -> bytes:
        return write_workbook([self._sheet()])

    def export(self, output_dir: Path) -> Path:
        output_file = Path(output_dir) / make_dated_file_name(UNMATCHED_FILE_SUFFIX)
        write_workbook([self._sheet()], output_file)
        print(f"📁 Unmatched list saved to {output_file}")
        return output_file
