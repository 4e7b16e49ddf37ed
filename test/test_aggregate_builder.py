import pytest

from builders.aggregate_builder import (
    build_aggregate_rows,
    display_item_name,
    extract_fruit_key,
    total_quantity,
)


def _rows(*pairs, item_col="품목명", qty_col="박스수량"):
    return [{item_col: item, qty_col: qty} for item, qty in pairs]


def test_single_item_scenario():
    rows = [
        {"상품주문번호": "A1", "품목명": "Mandarin 5kg", "박스수량": "10"},
        {"상품주문번호": "A1", "품목명": "Mandarin 5kg", "박스수량": "5"},
    ]
    result = build_aggregate_rows(rows)
    assert len(result) == 1
    assert result[0].item_name == "Mandarin 5kg"
    assert result[0].total_box == 15
    assert result[0].kg == 4.5


def test_total_is_preserved_and_blank_items_excluded():
    rows = _rows(
        ("감귤 5kg", "3"),
        ("감귤 10kg", "1,000"),
        ("", "99"),
        ("   ", "7"),
        ("한라봉 3kg", ""),
        ("한라봉 3kg", "abc"),
        ("감귤 5kg", 2),
    )
    result = build_aggregate_rows(rows)
    assert sum(r.total_box for r in result) == 3 + 1000 + 2
    names = [r.item_name for r in result]
    assert len(names) == len(set(names))
    assert {r.item_name: r.total_box for r in result}["한라봉 3kg"] == 0


def test_grouping_is_exact_string_equality():
    result = build_aggregate_rows(_rows(("감귤 5kg", 1), ("감귤 5 kg", 1), ("  감귤 5kg ", 1)))
    by_name = {r.item_name: r.total_box for r in result}
    # trimmed before grouping, but no other normalization
    assert by_name == {"감귤 5kg": 2, "감귤 5 kg": 1}


@pytest.mark.parametrize("name, kg", [
    ("감귤 5kg", 4.5),
    ("감귤 5 KG", 4.5),
    ("감귤 10kg", 9),
    ("감귤 7kg", 7),
    ("감귤 2.5kg", 2.5),
    ("감귤 가정용", None),
])
def test_weight_correction(name, kg):
    (row,) = build_aggregate_rows(_rows((name, 1)))
    assert row.kg == kg


def test_sort_by_fruit_then_weight_then_name():
    rows = _rows(
        ("한라봉 가정용", 1),
        ("한라봉 5kg", 1),
        ("감귤 10kg 로얄", 1),
        ("감귤 3kg", 1),
        ("한라봉 3kg", 1),
        ("감귤 10kg 가정", 1),
    )
    result = build_aggregate_rows(rows)
    assert [r.item_name for r in result] == [
        "감귤 3kg",
        "감귤 10kg 가정",
        "감귤 10kg 로얄",
        "한라봉 3kg",
        "한라봉 5kg",
        "한라봉 가정용",  # no weight -> last in its group
    ]


def test_fruit_key():
    assert extract_fruit_key("제주 천혜향 3kg") == "천혜향"
    assert extract_fruit_key("Apple box 5kg") == "Apple"


def test_quantity_falls_back_to_plain_quantity_column():
    rows = _rows(("감귤 3kg", "4"), ("감귤 3kg", "6"), qty_col="수량")
    (row,) = build_aggregate_rows(rows, headers=["품목명", "수량"])
    assert row.total_box == 10


def test_headers_resolved_with_spacing():
    rows = [{"품 목 명": "감귤 3kg", "박스 수량": "2"}]
    (row,) = build_aggregate_rows(rows, headers=["품 목 명", "박스 수량"])
    assert row.item_name == "감귤 3kg"
    assert row.total_box == 2


def test_empty_input():
    assert build_aggregate_rows([]) == []


def test_display_item_name_rewrites_only_whole_weights():
    assert display_item_name("감귤 5kg") == "감귤 4.5kg"
    assert display_item_name("감귤 10 kg") == "감귤 9 kg"
    assert display_item_name("감귤 2.5kg") == "감귤 2.5kg"
    assert display_item_name("감귤 15kg") == "감귤 15kg"
    assert display_item_name("감귤 3kg") == "감귤 3kg"
    assert display_item_name("감귤 5kg가정용") == "감귤 4.5kg가정용"
    assert display_item_name("사과 10KG특품") == "사과 9KG특품"


def test_display_matches_weight_correction_when_text_follows_unit():
    (row,) = build_aggregate_rows(_rows(("감귤 5kg가정용", 1)))
    assert row.kg == 4.5
    assert display_item_name(row.item_name) == "감귤 4.5kg가정용"


def test_display_does_not_change_aggregate_data():
    (row,) = build_aggregate_rows(_rows(("감귤 5kg", 1)))
    display_item_name(row.item_name)
    assert row.item_name == "감귤 5kg"


def test_total_quantity():
    rows = _rows(("a", "1,000"), ("b", "2"), ("", "3"))
    assert total_quantity(["품목명", "박스수량"], rows) == 1005
    assert total_quantity(["품목명"], rows) == 0
