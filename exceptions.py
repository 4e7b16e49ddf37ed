"""Errors that abort a pipeline action."""

from typing import List, Tuple

from config import COLLISION_REPORT_LIMIT


class WorksheetNotFoundError(ValueError):
    """Uploaded workbook has no worksheet."""


class UnreadableFileError(ValueError):
    """File could not be parsed as a workbook."""


class JobNotFoundError(ValueError):
    """A stage needs an original upload but no job is saved."""


class DuplicateUploadError(ValueError):
    """Every selected reply file was already merged into the job."""

    def __init__(self, file_names: List[str]):
        self.file_names = list(file_names)
        super().__init__(f"이미 업로드한 회신 파일입니다: {', '.join(self.file_names)}")


class ReplyCollisionError(ValueError):
    """
    The same customer order number appears in two or more reply files.

    Raised before anything is merged; the whole batch is rejected.

    Attributes:
        collisions: List of (order key, file names) pairs
    """

    def __init__(self, collisions: List[Tuple[str, List[str]]]):
        self.collisions = list(collisions)
        lines = [
            f"- {order_no} : {', '.join(files)}"
            for order_no, files in self.collisions[:COLLISION_REPORT_LIMIT]
        ]
        super().__init__(
            "CJ 회신 파일 오류: 서로 다른 파일에 같은 고객주문번호가 있습니다.\n\n"
            + "\n".join(lines)
        )
