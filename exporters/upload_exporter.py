"""
CJ Upload Exporter Module
=========================

Builds one CJ portal upload workbook per item and bundles them in a zip.

The CJ portal only accepts its own 15-column layout, so every workbook
uses CJ_UPLOAD_HEADERS in that exact order.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Optional

from config import CJ_UPLOAD_HEADERS, CJ_UPLOAD_ZIP_SUFFIX, DEFAULT_SHEET_NAME
from models import Row
from utils.helpers import make_dated_file_name, sanitize_file_name, to_text

from .base_exporter import SheetWriter, write_workbook


ProgressCallback = Callable[[int, int], None]


class CjUploadExporter:
    """
    Per-item CJ upload exporter.

    Generates:
    - <item name>.xlsx for every item group, inside
    - <yyyy-mm-dd>_한섬누리_CJ제출용_품목별엑셀.zip
    """

    def __init__(self, groups: Dict[str, List[Row]]):
        """
        Args:
            groups: {item name: [CJ upload row, ...]} from CjUploadBuilder
        """
        self.groups = groups

    @staticmethod
    def build_workbook(rows: List[Row]) -> bytes:
        """One CJ upload workbook, cell values as text."""
        text_rows = [{h: to_text(r.get(h)) for h in CJ_UPLOAD_HEADERS} for r in rows]
        widths = {h: (18 if len(h) > 8 else 14) for h in CJ_UPLOAD_HEADERS}
        sheet = SheetWriter(CJ_UPLOAD_HEADERS, text_rows, DEFAULT_SHEET_NAME, widths=widths)
        return write_workbook([sheet])

    def entry_names(self) -> Dict[str, str]:
        """
        Zip entry name per item.

        Items whose sanitized names collide get ' (2)', ' (3)', ... so no
        entry overwrites another.
        """
        names: Dict[str, str] = {}
        used = set()
        for item_name in self.groups:
            stem = sanitize_file_name(item_name) or "item"
            candidate = f"{stem}.xlsx"
            n = 2
            while candidate in used:
                candidate = f"{stem} ({n}).xlsx"
                n += 1
            used.add(candidate)
            names[item_name] = candidate
        return names

    def to_zip_bytes(self, on_progress: Optional[ProgressCallback] = None) -> bytes:
        buffer = io.BytesIO()
        names = self.entry_names()
        total = len(self.groups)

        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for done, (item_name, rows) in enumerate(self.groups.items(), start=1):
                zf.writestr(names[item_name], self.build_workbook(rows))
                if on_progress is not None:
                    on_progress(done, total)

        return buffer.getvalue()

    def export(self, output_dir: Path, on_progress: Optional[ProgressCallback] = None) -> Path:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / make_dated_file_name(CJ_UPLOAD_ZIP_SUFFIX)
        output_file.write_bytes(self.to_zip_bytes(on_progress))

        row_count = sum(len(rows) for rows in self.groups.values())
        logging.info(f"[cj-upload] {len(self.groups)} item files, {row_count} rows")
        print(f"📁 CJ upload zip saved to {output_file}")
        return output_file
