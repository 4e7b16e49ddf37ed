import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from openpyxl import Workbook


def write_xlsx(path, rows):
    """Write a list of rows (first row = headers) to the first sheet."""
    wb = Workbook()
    ws = wb.active
    for r in rows:
        ws.append(r)
    wb.save(path)
    return path


@pytest.fixture
def make_xlsx(tmp_path):
    def _make(name, rows):
        return write_xlsx(tmp_path / name, rows)
    return _make


@pytest.fixture
def original_headers():
    return ["상품주문번호", "★쇼핑몰 주문번호★", "품목명", "박스수량", "받는분성명", "받는분주소"]


@pytest.fixture
def original_rows():
    return [
        {"상품주문번호": "A1", "★쇼핑몰 주문번호★": "", "품목명": "감귤 5kg", "박스수량": "10",
         "받는분성명": "김철수", "받는분주소": "서울"},
        {"상품주문번호": "A1", "★쇼핑몰 주문번호★": "", "품목명": "감귤 5kg", "박스수량": "5",
         "받는분성명": "김철수", "받는분주소": "서울"},
        {"상품주문번호": "", "★쇼핑몰 주문번호★": "M9", "품목명": "한라봉 3kg", "박스수량": "2",
         "받는분성명": "이영희", "받는분주소": "부산"},
        {"상품주문번호": "", "★쇼핑몰 주문번호★": "", "품목명": "천혜향 2kg", "박스수량": "1",
         "받는분성명": "박민수", "받는분주소": "대구"},
    ]
