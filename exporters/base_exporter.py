"""
Base Exporter Module
====================

Contains SheetWriter, the shared worksheet writer used by every exporter.

This module handles:
- Writing a header + rows table through the xlsxwriter workbook behind pd.ExcelWriter
- Strings always written as text (no formulas, no hyperlinks)
- Bold header row
- Thin black border over the whole table (optional)
- Highlight fill for selected columns (optional)
- Column widths

No autofilter is ever added to a sheet.
"""

import io
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

# cell text is written as-is, never as a formula or hyperlink
XLSX_OPTIONS = {"strings_to_formulas": False, "strings_to_urls": False}


class SheetWriter:
    """
    Write one table into one worksheet.

    Attributes:
        headers: Column order of the sheet
        rows: List of {header: value} rows; missing keys are written blank
        sheet_name: Target worksheet name
        widths: Column widths by header (default width otherwise)
        bordered: Draw a thin border around every cell of the table
        highlight_columns: Headers whose cells (header included) get a fill
        highlight_color: Fill color for highlighted columns
    """

    DEFAULT_WIDTH = 16

    def __init__(
        self,
        headers: Sequence[str],
        rows: Iterable[Dict[str, Any]],
        sheet_name: str = "Sheet1",
        *,
        widths: Dict[str, float] = None,
        bordered: bool = False,
        highlight_columns: Iterable[str] = (),
        highlight_color: str = "#FFFF00",
    ):
        self.headers = list(headers)
        self.rows = list(rows)
        self.sheet_name = sheet_name
        self.widths = widths or {}
        self.bordered = bordered
        self.highlight_columns = set(highlight_columns)
        self.highlight_color = highlight_color

    def _formats(self, workbook) -> Dict[str, Any]:
        base = {"valign": "vcenter"}
        if self.bordered:
            base.update({"border": 1, "border_color": "#000000"})
        fill = {"bg_color": self.highlight_color, "pattern": 1}
        return {
            "header": workbook.add_format({**base, "bold": True}),
            "header_hl": workbook.add_format({**base, **fill, "bold": True}),
            "cell": workbook.add_format(base),
            "cell_hl": workbook.add_format({**base, **fill}),
        }

    def write(self, writer: pd.ExcelWriter) -> None:
        """Write the table into an open xlsxwriter-backed ExcelWriter."""
        worksheet = writer.book.add_worksheet(self.sheet_name)
        fmt = self._formats(writer.book)

        for c, header in enumerate(self.headers):
            hl = header in self.highlight_columns
            worksheet.write_string(0, c, str(header), fmt["header_hl"] if hl else fmt["header"])
            worksheet.set_column(c, c, self.widths.get(header, self.DEFAULT_WIDTH))

            cell_fmt = fmt["cell_hl"] if hl else fmt["cell"]
            for r, row in enumerate(self.rows, start=1):
                value = row.get(header, "")
                if value is None or value == "" or (isinstance(value, float) and pd.isna(value)):
                    worksheet.write_blank(r, c, None, cell_fmt)
                elif isinstance(value, str):
                    # "=..." and "http..." stay plain text
                    worksheet.write_string(r, c, value, cell_fmt)
                else:
                    worksheet.write(r, c, value, cell_fmt)


def write_workbook(writers: List[SheetWriter], target: Optional[Union[str, Path]] = None) -> Union[Path, bytes]:
    """
    Write one or more sheets into a workbook.

    Args:
        writers: SheetWriter per worksheet, in sheet order
        target: Output path; when omitted the workbook is returned as bytes

    Returns:
        The output Path, or the .xlsx bytes
    """
    if target is None:
        dest = io.BytesIO()
    else:
        dest = Path(target)
        dest.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(dest, engine="xlsxwriter", engine_kwargs={"options": XLSX_OPTIONS}) as writer:
        for sw in writers:
            sw.write(writer)

    return dest.getvalue() if target is None else dest
