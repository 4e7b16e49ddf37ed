"""CJ reply merger: collect tracking numbers per customer order number."""

import logging
from typing import List, Optional, Sequence, Tuple

from config import CJ_REPLY_KEY_COL, CJ_REPLY_TRACKING_COL, REPLY_HEADER_SCAN_ROWS
from exceptions import ReplyCollisionError
from models import ReplyMergeResult, ReplySource, SkippedFile
from normalizers.header_normalizer import HeaderResolver
from utils.helpers import to_text


class CjReplyMatcher:
    """
    Merge CJ reply sheets into one multimap.

    This is the collect phase only: nothing is written to the job here.
    Files are processed independently; a malformed file is skipped and the
    rest of the batch still merges. Collisions across files are reported
    through ReplyMergeResult.collisions() for the caller to act on.
    """

    def __init__(self, sources: Sequence[ReplySource],
                 key_col: str = CJ_REPLY_KEY_COL,
                 tracking_col: str = CJ_REPLY_TRACKING_COL,
                 scan_rows: int = REPLY_HEADER_SCAN_ROWS):
        self.sources = list(sources)
        self.key_col = key_col
        self.tracking_col = tracking_col
        self.scan_rows = max(1, int(scan_rows))

    def _locate_columns(self, grid: List[list]) -> Optional[Tuple[int, int, int]]:
        """
        Find the header row and the key/tracking column positions.

        Returns:
            (header row index, key column, tracking column) or None
        """
        for r, cells in enumerate(grid[: self.scan_rows]):
            resolver = HeaderResolver([to_text(c) for c in cells])
            key_idx = resolver.find_index(self.key_col)
            trk_idx = resolver.find_index(self.tracking_col)
            if key_idx is not None and trk_idx is not None and key_idx != trk_idx:
                return r, key_idx, trk_idx
        return None

    @staticmethod
    def _cell(cells: list, idx: int) -> str:
        if idx >= len(cells):
            return ""
        return to_text(cells[idx]).strip()

    def _merge_one(self, source: ReplySource, result: ReplyMergeResult) -> None:
        fname = source.file_name
        located = self._locate_columns(source.grid)
        if located is None:
            reason = (
                f"'{self.key_col}' / '{self.tracking_col}' columns not found "
                f"in the first {self.scan_rows} rows"
            )
            logging.warning(f"[{fname}] reply file skipped: {reason}")
            result.skipped.append(SkippedFile(fname, reason))
            return

        header_row, key_idx, trk_idx = located
        accepted = 0
        skipped_rows = 0
        for r, cells in enumerate(source.grid[header_row + 1:], start=header_row + 2):
            order_no = self._cell(cells, key_idx)
            tracking = self._cell(cells, trk_idx)
            if not order_no or not tracking:
                skipped_rows += 1
                logging.debug(f"[{fname}] row {r}: blank order number or tracking, skipped")
                continue

            result.mapping.add(order_no, tracking)
            result.order_file_map.setdefault(order_no, set()).add(fname)
            accepted += 1

        logging.info(f"[{fname}] {accepted} tracking rows read, {skipped_rows} blank rows skipped")

    def merge(self) -> ReplyMergeResult:
        result = ReplyMergeResult()
        for source in self.sources:
            self._merge_one(source, result)
        return result


def merge_replies(sources: Sequence[ReplySource]) -> ReplyMergeResult:
    return CjReplyMatcher(sources).merge()


def find_collisions(result: ReplyMergeResult) -> List[Tuple[str, List[str]]]:
    return result.collisions()


def ensure_no_collisions(result: ReplyMergeResult) -> None:
    """
    Reject the batch when one order number came back in several files.

    Raises:
        ReplyCollisionError: If any order number has two or more source files
    """
    collisions = result.collisions()
    if collisions:
        logging.error(f"[reply] {len(collisions)} order numbers appear in more than one reply file")
        raise ReplyCollisionError(collisions)
