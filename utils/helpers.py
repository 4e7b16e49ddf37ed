"""Helper utility functions for the shipping pipeline."""

import re
import unicodedata
from datetime import date, datetime
from typing import Optional

import numpy as np
import pandas as pd

from config import KG_CORRECTIONS


_KG_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*kg", re.IGNORECASE)
_FILE_HOSTILE_CHARS = re.compile(r'[\\/:*?"<>|]')


def is_blank(val) -> bool:
    """
    Check if value is considered empty.

    Returns True if value is:
    - NaN / None
    - Empty string ""
    - String containing only whitespace

    Args:
        val: Value to check (any type)

    Returns:
        True if value is considered empty, False otherwise
    """
    if val is None:
        return True
    if isinstance(val, float) and np.isnan(val):
        return True
    if isinstance(val, str) and val.strip() == "":
        return True
    return False


def format_datetime(d) -> str:
    """Format a date/datetime as 'yyyy-mm-dd hh:mm:ss'."""
    if not isinstance(d, datetime):
        d = datetime(d.year, d.month, d.day)
    return d.strftime("%Y-%m-%d %H:%M:%S")


def to_text(v) -> str:
    """
    Coerce a cell value to display text.

    - None / NaN / NaT -> ""
    - date, datetime, pd.Timestamp -> 'yyyy-mm-dd hh:mm:ss'
    - rich values ({"text": ...} or {"result": ...}) -> inner value, coerced
    - whole floats drop the trailing '.0' (12345.0 -> '12345')
    - anything else -> str(v)

    Examples:
        >>> to_text(None)
        ''
        >>> to_text({"text": "A1"})
        'A1'
        >>> to_text(datetime(2025, 1, 15, 9, 5, 0))
        '2025-01-15 09:05:00'
    """
    if v is None or v is pd.NaT:
        return ""
    if isinstance(v, (datetime, date)):
        return format_datetime(v)
    if isinstance(v, dict):
        if "text" in v:
            return to_text(v["text"])
        if "result" in v:
            return to_text(v["result"])
    if isinstance(v, (float, np.floating)):
        if np.isnan(v):
            return ""
        if np.isfinite(v) and float(v).is_integer():
            return str(int(v))
        return str(float(v))
    if isinstance(v, np.integer):
        return str(int(v))
    return str(v)


def parse_quantity(v) -> float:
    """
    Parse a quantity cell; thousands separators are ignored.

    Blank, unparseable and non-finite values count as 0.

    Examples:
        >>> parse_quantity("1,200")
        1200.0
        >>> parse_quantity("")
        0.0
    """
    raw = to_text(v).strip().replace(",", "")
    if not raw:
        return 0.0
    num = pd.to_numeric(raw, errors="coerce")
    if pd.isna(num) or not np.isfinite(num):
        return 0.0
    return float(num)


def extract_kg(item_name: str) -> Optional[float]:
    """
    Extract '<number> kg' from an item name.

    Examples:
        >>> extract_kg("감귤 2.5kg")
        2.5
        >>> extract_kg("감귤 로얄과")
    """
    match = _KG_PATTERN.search(str(item_name))
    return float(match.group(1)) if match else None


def correct_kg(kg: Optional[float]) -> Optional[float]:
    """Map a nominal label weight to the net weight (5 -> 4.5, 10 -> 9)."""
    if kg is None:
        return None
    return KG_CORRECTIONS.get(kg, kg)


def collation_key(s: str) -> str:
    """
    Sort key for names: NFC-normalized and case-folded.

    Close to a Korean locale comparison for Hangul-only names, since
    precomposed syllables are in dictionary order by code point. Names
    mixing Latin and Hangul can order differently from a full locale
    collation (Latin sorts before Hangul here).
    """
    return unicodedata.normalize("NFC", str(s)).casefold()


def sanitize_file_name(name: str) -> str:
    """
    Make an item name safe to use as a file name.

    Examples:
        >>> sanitize_file_name('감귤 5kg / "특"')
        '감귤 5kg _ _특_'
    """
    name = _FILE_HOSTILE_CHARS.sub("_", str(name))
    return re.sub(r"\s+", " ", name).strip()


def today_str() -> str:
    return date.today().strftime("%Y-%m-%d")


def make_dated_file_name(suffix: str) -> str:
    """'<yyyy-mm-dd>_<suffix>' using the local date."""
    return f"{today_str()}_{suffix}"
