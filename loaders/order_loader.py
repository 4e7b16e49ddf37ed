"""Workbook loader for the original order export and CJ reply files."""

import io
import logging
from pathlib import Path
from typing import Any, List, Tuple, Union

import pandas as pd

from config import ORIGINAL_FALLBACK_KEY_COL, ORIGINAL_ITEM_COL, ORIGINAL_KEY_COL
from exceptions import UnreadableFileError, WorksheetNotFoundError
from models import ReplySource, Row
from normalizers.header_normalizer import HeaderResolver
from utils.helpers import is_blank

Source = Union[str, Path, bytes, io.IOBase]


class OrderSheetLoader:
    """Read the first worksheet of an .xlsx file into headers and rows."""

    def __init__(self, source: Source, file_name: str = None):
        """
        Initialize loader.

        Args:
            source: Path to the workbook, or its raw bytes / file object
            file_name: Display name; defaults to the path's file name
        """
        self.source = source
        if file_name is None:
            file_name = Path(source).name if isinstance(source, (str, Path)) else "<upload>"
        self.file_name = file_name

    def _open(self):
        src = self.source
        if isinstance(src, bytes):
            src = io.BytesIO(src)
        try:
            return pd.ExcelFile(src, engine="openpyxl")
        except FileNotFoundError:
            raise
        except Exception as e:
            raise UnreadableFileError(f"[{self.file_name}] 엑셀 파일을 읽을 수 없습니다: {e}") from e

    def read_grid(self) -> List[List[Any]]:
        """
        Raw cell values of the first worksheet.

        Empty cells become None; rows with no value at all are dropped.

        Raises:
            WorksheetNotFoundError: If the workbook has no worksheet
            UnreadableFileError: If the file is not a readable workbook
        """
        with self._open() as xls:
            if not xls.sheet_names:
                raise WorksheetNotFoundError(f"[{self.file_name}] 엑셀 시트를 찾을 수 없습니다.")
            # text like "NA" / "N/A" / "NULL" is data, not a missing value
            df = xls.parse(xls.sheet_names[0], header=None, dtype=object,
                           keep_default_na=False, na_filter=False)

        df = df.astype(object).where(pd.notna(df), None)
        grid = []
        for values in df.itertuples(index=False, name=None):
            cells = [None if c == "" else c for c in values]
            if all(is_blank(c) for c in cells):
                continue
            grid.append(cells)
        return grid

    def read_table(self) -> Tuple[List[str], List[Row]]:
        """
        First row as headers, the rest as {header: value} rows.

        Returns:
            (headers, rows)
        """
        grid = self.read_grid()
        if not grid:
            logging.warning(f"[{self.file_name}] Sheet is empty.")
            return [], []

        headers = ["" if is_blank(h) else str(h).strip() for h in grid[0]]
        rows: List[Row] = []
        for cells in grid[1:]:
            row: Row = {}
            for i, h in enumerate(headers):
                value = cells[i] if i < len(cells) else None
                row[h] = "" if value is None else value
            rows.append(row)

        logging.info(f"[{self.file_name}] {len(rows)} rows, {len(headers)} columns")
        return headers, rows

    def read_reply(self) -> ReplySource:
        return ReplySource(self.file_name, self.read_grid())


def check_original_columns(headers: List[str], file_name: str = "") -> bool:
    """
    Presence check for the columns the pipeline relies on.

    Missing columns are logged, not raised: rows simply drop out of the
    stages that need them.

    Returns:
        True if the item column and at least one key column exist
    """
    resolver = HeaderResolver(headers)
    ok = True
    if not resolver.has(ORIGINAL_ITEM_COL):
        logging.warning(f"[{file_name}] Missing item column '{ORIGINAL_ITEM_COL}'.")
        ok = False
    if not (resolver.has(ORIGINAL_KEY_COL) or resolver.has(ORIGINAL_FALLBACK_KEY_COL)):
        logging.warning(
            f"[{file_name}] Missing order key columns "
            f"'{ORIGINAL_KEY_COL}' / '{ORIGINAL_FALLBACK_KEY_COL}'."
        )
        ok = False
    return ok
