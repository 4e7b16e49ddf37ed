from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

Row = Dict[str, Any]


class AggregateRow:
    def __init__(self, item_name: str = "", total_box: float = 0, kg: Optional[float] = None,
                 fruit_key: str = ""):
        self.item_name = item_name
        self.total_box = total_box
        self.kg = kg
        self.fruit_key = fruit_key

    def __repr__(self):
        return (f"AggregateRow(item_name={self.item_name!r}, total_box={self.total_box!r}, "
                f"kg={self.kg!r}, fruit_key={self.fruit_key!r})")


class UnmatchedEntry:
    def __init__(self, customer_order_no: str = "", tracking: str = ""):
        self.customer_order_no = customer_order_no
        self.tracking = tracking

    def __eq__(self, other):
        if not isinstance(other, UnmatchedEntry):
            return NotImplemented
        return (self.customer_order_no, self.tracking) == (other.customer_order_no, other.tracking)

    def __repr__(self):
        return f"UnmatchedEntry({self.customer_order_no!r}, {self.tracking!r})"


class DuplicateEntry:
    def __init__(self, key: str = "", count: int = 0):
        self.key = key
        self.count = count

    def __eq__(self, other):
        if not isinstance(other, DuplicateEntry):
            return NotImplemented
        return (self.key, self.count) == (other.key, other.count)

    def __repr__(self):
        return f"DuplicateEntry({self.key!r}, {self.count!r})"


class SkippedFile:
    def __init__(self, file_name: str = "", reason: str = ""):
        self.file_name = file_name
        self.reason = reason

    def __repr__(self):
        return f"SkippedFile({self.file_name!r}, {self.reason!r})"


class ReplySource:
    """Raw cell grid of one CJ reply workbook (first worksheet)."""

    def __init__(self, file_name: str, grid: List[List[Any]]):
        self.file_name = file_name
        self.grid = grid


class TrackingMultiMap:
    """
    Append-only mapping: customer order number -> tracking numbers.

    Values are only ever appended, so one order can collect several
    tracking numbers across rows and files. List order is encounter order.
    """

    def __init__(self):
        self._data: Dict[str, List[str]] = {}

    @classmethod
    def from_dict(cls, data: Dict[str, List[str]]) -> "TrackingMultiMap":
        mm = cls()
        for key, values in data.items():
            for v in values:
                mm.add(key, v)
        return mm

    def add(self, key: str, tracking: str) -> None:
        self._data.setdefault(key, []).append(tracking)

    def get(self, key: str) -> List[str]:
        return list(self._data.get(key, []))

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for key, values in self._data.items():
            yield key, list(values)

    def max_list_length(self) -> int:
        return max((len(v) for v in self._data.values()), default=0)

    def to_dict(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self._data.items()}

    def __contains__(self, key) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class ReplyMergeResult:
    def __init__(self, mapping: TrackingMultiMap = None,
                 order_file_map: Dict[str, Set[str]] = None,
                 skipped: List[SkippedFile] = None):
        self.mapping = mapping if mapping is not None else TrackingMultiMap()
        self.order_file_map: Dict[str, Set[str]] = order_file_map or {}
        self.skipped: List[SkippedFile] = skipped or []

    def collisions(self) -> List[Tuple[str, List[str]]]:
        """Keys answered by two or more different files, with their file names."""
        return [
            (order_no, sorted(files))
            for order_no, files in self.order_file_map.items()
            if len(files) >= 2
        ]


class ReconciliationResult:
    def __init__(self, updated_headers: List[str], updated_rows: List[Row],
                 unmatched: List[UnmatchedEntry], duplicates: List[DuplicateEntry],
                 total_reply_count: int = 0):
        self.updated_headers = updated_headers
        self.updated_rows = updated_rows
        self.unmatched = unmatched
        self.duplicates = duplicates
        self.total_reply_count = total_reply_count

    @property
    def matched_count(self) -> int:
        unmatched_keys = {u.customer_order_no for u in self.unmatched}
        return self.total_reply_count - len(unmatched_keys)


class FileFingerprint:
    """Identity of an uploaded file: name + size + last-modified time."""

    def __init__(self, name: str, size: int, last_modified: float):
        self.name = name
        self.size = size
        self.last_modified = last_modified

    @classmethod
    def from_path(cls, path: Path) -> "FileFingerprint":
        path = Path(path)
        st = path.stat()
        return cls(path.name, st.st_size, st.st_mtime)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "size": self.size, "last_modified": self.last_modified}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileFingerprint":
        return cls(data["name"], data["size"], data["last_modified"])

    def __eq__(self, other):
        if not isinstance(other, FileFingerprint):
            return NotImplemented
        return (self.name, self.size, self.last_modified) == (other.name, other.size, other.last_modified)

    def __hash__(self):
        return hash((self.name, self.size, self.last_modified))

    def __repr__(self):
        return f"FileFingerprint({self.name!r}, {self.size!r}, {self.last_modified!r})"


class JobState:
    """
    Snapshot of the current job.

    A stage never patches a JobState in place; it builds a new one with
    replace() and hands it to the job store.
    """

    def __init__(self, created_at: str = "", original_file_name: str = "",
                 original_headers: List[str] = None, original_rows: List[Row] = None,
                 uploaded_reply_files: List[FileFingerprint] = None):
        self.created_at = created_at or datetime.now().isoformat()
        self.original_file_name = original_file_name
        self.original_headers: List[str] = list(original_headers or [])
        self.original_rows: List[Row] = list(original_rows or [])
        self.uploaded_reply_files: List[FileFingerprint] = list(uploaded_reply_files or [])

    def replace(self, **changes) -> "JobState":
        fields = {
            "created_at": self.created_at,
            "original_file_name": self.original_file_name,
            "original_headers": self.original_headers,
            "original_rows": self.original_rows,
            "uploaded_reply_files": self.uploaded_reply_files,
        }
        fields.update(changes)
        return JobState(**fields)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created_at": self.created_at,
            "original_file_name": self.original_file_name,
            "original_headers": list(self.original_headers),
            "original_rows": [dict(r) for r in self.original_rows],
            "uploaded_reply_files": [fp.to_dict() for fp in self.uploaded_reply_files],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobState":
        return cls(
            created_at=data.get("created_at", ""),
            original_file_name=data.get("original_file_name", ""),
            original_headers=data.get("original_headers", []),
            original_rows=data.get("original_rows", []),
            uploaded_reply_files=[
                FileFingerprint.from_dict(d) for d in data.get("uploaded_reply_files", [])
            ],
        )
