"""Single-record job store (pickle on local disk)."""

import logging
import os
import pickle
from pathlib import Path
from typing import Optional

from config import JOB_STORE_PATH
from models import JobState


class JobStore:
    """
    Holds at most one JobState.

    save() replaces the whole record in one step (temp file + rename), so a
    reader sees either the old job or the new one, never a mix.
    """

    def __init__(self, path: Path = JOB_STORE_PATH):
        self.path = Path(path)

    def save(self, job: JobState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "wb") as f:
            pickle.dump(job.to_dict(), f)
        os.replace(tmp, self.path)
        logging.debug(f"[job] saved {job.original_file_name} ({len(job.original_rows)} rows)")

    def load(self) -> Optional[JobState]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (pickle.UnpicklingError, EOFError) as e:
            logging.warning(f"[job] Failed to read {self.path}: {e}; ignoring.")
            return None
        return JobState.from_dict(data)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logging.debug(f"[job] cleared {self.path}")
