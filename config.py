"""Configuration constants for the Hansom Nuri shipping pipeline."""

import os
from pathlib import Path
from typing import Dict, List, Tuple

# ============================================================================
# ORIGINAL ORDER EXPORT COLUMNS
# ============================================================================

# Order key: product order number first, shopping-mall order number when blank
ORIGINAL_KEY_COL: str = "상품주문번호"
ORIGINAL_FALLBACK_KEY_COL: str = "★쇼핑몰 주문번호★"

ORIGINAL_ITEM_COL: str = "품목명"
ORIGINAL_BOX_COL: str = "박스수량"
ORIGINAL_QTY_COL: str = "수량"  # used only when the box column is missing

# Tracking column written back into the original export
ORIGINAL_TRACKING_COL: str = "운송장번호"

# Synonyms for the tracking column; if present in the original, the synonym
# becomes the base column and extra columns follow its name ("송장번호(2)")
ALT_TRACKING_COLS: Tuple[str, ...] = ("송장번호",)

# Any header starting with one of these (whitespace removed) is highlighted
TRACKING_LABEL_PREFIXES: Tuple[str, ...] = (ORIGINAL_TRACKING_COL,) + ALT_TRACKING_COLS

# ============================================================================
# CJ CARRIER PORTAL
# ============================================================================

# Upload layout required by the CJ portal, column order matters
CJ_UPLOAD_HEADERS: List[str] = [
    "보내는분성명",
    "보내는분전화번호",
    "보내는분우편번호",
    "보내는분주소",
    "품목명",
    "박스수량",
    "받는분성명",
    "받는분전화번호",
    "받는분우편번호",
    "받는분주소",
    "배송메세지",
    "고객주문번호",
    "거래처주문번호",
    "운송장번호",
    "어드민플러스주문번호",
]

# Field always overwritten with the canonical order key
CJ_UPLOAD_KEY_COL: str = "고객주문번호"

# Reply workbook columns
CJ_REPLY_KEY_COL: str = "고객주문번호"
CJ_REPLY_TRACKING_COL: str = "운송장번호"

# How many leading rows of a reply sheet are searched for the header row
REPLY_HEADER_SCAN_ROWS: int = 10

# ============================================================================
# AGGREGATION
# ============================================================================

# Checked in order; first keyword contained in the item name wins
FRUIT_KEYWORDS: List[str] = [
    "천혜향",
    "한라봉",
    "레드향",
    "감귤",
    "황금향",
    "카라향",
    "청견",
    "세토카",
    "데코폰",
]

# Nominal pack weight on the label -> actual net weight
KG_CORRECTIONS: Dict[float, float] = {
    5: 4.5,
    10: 9,
}

# ============================================================================
# OUTPUT FILES
# ============================================================================

AGGREGATE_FILE_SUFFIX: str = "한섬누리_품목별_집계.xlsx"
CJ_UPLOAD_ZIP_SUFFIX: str = "한섬누리_CJ제출용_품목별엑셀.zip"
FINAL_FILE_SUFFIX: str = "한섬누리_운송장번호_반영완료.xlsx"
UNMATCHED_FILE_SUFFIX: str = "한섬누리_미매칭_주문목록.xlsx"

AGGREGATE_SHEET_NAME: str = "품목별 집계"
AGGREGATE_HEADERS: List[str] = ["품목명", "총 박스수량"]
DEFAULT_SHEET_NAME: str = "Sheet1"
UNMATCHED_SHEET_NAME: str = "미매칭"
UNMATCHED_HEADERS: List[str] = ["고객주문번호", "운송장번호"]

# Light yellow fill for tracking columns
TRACKING_HIGHLIGHT_COLOR: str = "#FFF59D"

# Cross-file collision lines shown in the error message
COLLISION_REPORT_LIMIT: int = 5

# ============================================================================
# PATHS
# ============================================================================

BASE_PATH: Path = Path(__file__).resolve().parent

OUTPUT_DIR: Path = Path(os.environ.get("HANSOM_OUTPUT_DIR", BASE_PATH / "output"))

# Single-record job snapshot
JOB_STORE_PATH: Path = Path(
    os.environ.get("HANSOM_JOB_STORE", BASE_PATH / "output" / "job_state.pkl")
)

# ============================================================================
# DEBUG FLAGS
# ============================================================================

# Enable debug logging and output
FLAG_DEBUG: bool = False
