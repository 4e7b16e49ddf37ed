import pytest

from exceptions import ReplyCollisionError
from matchers.reply_matcher import CjReplyMatcher, ensure_no_collisions, find_collisions, merge_replies
from models import ReplySource, TrackingMultiMap


def _src(name, rows, headers=("고객주문번호", "운송장번호")):
    return ReplySource(name, [list(headers)] + [list(r) for r in rows])


# ---------- multimap ----------
def test_multimap_is_append_only():
    mm = TrackingMultiMap()
    mm.add("A1", "111")
    mm.add("A1", "222")
    mm.add("B1", "333")
    assert mm.get("A1") == ["111", "222"]
    mm.get("A1").append("mutated")
    assert mm.get("A1") == ["111", "222"]
    assert mm.max_list_length() == 2
    assert len(mm) == 2
    assert "B1" in mm and "C1" not in mm


# ---------- merge ----------
def test_multiple_tracking_in_one_file_are_appended():
    result = merge_replies([_src("r1.xlsx", [("A1", "111"), ("A1", "222"), ("B1", "333")])])
    assert result.mapping.get("A1") == ["111", "222"]
    assert result.mapping.get("B1") == ["333"]
    assert result.order_file_map["A1"] == {"r1.xlsx"}
    assert result.collisions() == []


def test_blank_key_or_tracking_rows_are_skipped():
    result = merge_replies([_src("r1.xlsx", [("A1", ""), ("", "999"), (" B1 ", " 333 "), (None, None)])])
    assert result.mapping.to_dict() == {"B1": ["333"]}


def test_cross_file_collision_detected():
    result = merge_replies([
        _src("r1.xlsx", [("A1", "111")]),
        _src("r2.xlsx", [("A1", "222"), ("B1", "333")]),
    ])
    assert result.order_file_map["A1"] == {"r1.xlsx", "r2.xlsx"}
    assert find_collisions(result) == [("A1", ["r1.xlsx", "r2.xlsx"])]
    with pytest.raises(ReplyCollisionError) as exc:
        ensure_no_collisions(result)
    assert "A1" in str(exc.value)
    assert exc.value.collisions == [("A1", ["r1.xlsx", "r2.xlsx"])]


def test_collision_message_lists_at_most_five():
    files = [_src(f"r{i}.xlsx", [(f"K{k}", f"{i}{k}") for k in range(7)]) for i in range(2)]
    with pytest.raises(ReplyCollisionError) as exc:
        ensure_no_collisions(merge_replies(files))
    assert len(exc.value.collisions) == 7
    assert str(exc.value).count("\n- ") == 5


def test_file_missing_columns_is_skipped_not_fatal():
    result = merge_replies([
        _src("bad.xlsx", [("A1", "111")], headers=("주문", "번호")),
        _src("good.xlsx", [("B1", "333")]),
    ])
    assert [s.file_name for s in result.skipped] == ["bad.xlsx"]
    assert result.mapping.to_dict() == {"B1": ["333"]}


def test_header_row_located_below_title_and_by_substring():
    grid = [
        ["CJ대한통운 회신", None, None],
        ["받는분", "고객 주문번호(CJ)", "운송장 번호"],
        ["홍길동", "A1", 123456789012],
    ]
    result = merge_replies([ReplySource("r.xlsx", grid)])
    assert result.mapping.get("A1") == ["123456789012"]


def test_exact_header_preferred_over_substring():
    grid = [
        ["원고객주문번호", "고객주문번호", "운송장번호"],
        ["X", "A1", "111"],
    ]
    result = merge_replies([ReplySource("r.xlsx", grid)])
    assert result.mapping.to_dict() == {"A1": ["111"]}


def test_short_rows_do_not_fail():
    grid = [["고객주문번호", "기타", "운송장번호"], ["A1"]]
    result = CjReplyMatcher([ReplySource("r.xlsx", grid)]).merge()
    assert len(result.mapping) == 0
