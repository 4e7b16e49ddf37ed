from matchers.tracking_matcher import TrackingReconciler, apply_tracking, tracking_nth_header
from models import DuplicateEntry, TrackingMultiMap, UnmatchedEntry

HEADERS = ["상품주문번호", "★쇼핑몰 주문번호★", "품목명"]


def _row(key="", fallback="", item="감귤 3kg"):
    return {"상품주문번호": key, "★쇼핑몰 주문번호★": fallback, "품목명": item}


def _tracking_cols(headers):
    return [h for h in headers if h.startswith("운송장번호") or h.startswith("송장번호")]


def test_two_tracking_numbers_scenario():
    rows = [_row("A1"), _row("B1")]
    result = apply_tracking(HEADERS, rows, {"A1": ["111", "222"]})

    assert result.updated_headers == HEADERS + ["운송장번호", "운송장번호(2)"]
    a1, b1 = result.updated_rows
    assert a1["운송장번호"] == "111"
    assert a1["운송장번호(2)"] == "222"
    assert b1["운송장번호"] == ""
    assert b1["운송장번호(2)"] == ""
    assert result.unmatched == []


def test_header_count_matches_longest_list_and_rows_are_rectangular():
    rows = [_row("A1"), _row("B1"), _row("C1")]
    mapping = TrackingMultiMap.from_dict({"A1": ["1"], "B1": ["2", "3", "4"], "Z9": ["5", "6"]})
    result = apply_tracking(HEADERS, rows, mapping)

    cols = _tracking_cols(result.updated_headers)
    assert cols == ["운송장번호", "운송장번호(2)", "운송장번호(3)"]
    for r in result.updated_rows:
        assert set(r.keys()) == set(result.updated_headers)
    assert result.updated_rows[0]["운송장번호(3)"] == ""
    assert [result.updated_rows[1][c] for c in cols] == ["2", "3", "4"]


def test_unmatched_lists_every_tracking_value_once():
    result = apply_tracking(HEADERS, [_row("A1")], {"Z9": ["5", "6"], "A1": ["1"]})
    assert result.unmatched == [UnmatchedEntry("Z9", "5"), UnmatchedEntry("Z9", "6")]
    assert result.total_reply_count == 2
    assert result.matched_count == 1


def test_rows_never_reordered_or_dropped_and_input_untouched():
    rows = [_row("C1"), _row(""), _row("A1"), _row("B1")]
    snapshot = [dict(r) for r in rows]
    result = apply_tracking(HEADERS, rows, {"A1": ["1"], "B1": ["2"]})

    assert len(result.updated_rows) == len(rows)
    assert [r["상품주문번호"] for r in result.updated_rows] == ["C1", "", "A1", "B1"]
    assert rows == snapshot


def test_empty_mapping_still_adds_base_column():
    result = apply_tracking(HEADERS, [_row("A1")], {})
    assert result.updated_headers == HEADERS + ["운송장번호"]
    assert result.updated_rows[0]["운송장번호"] == ""


def test_duplicate_report():
    rows = [_row("A1"), _row("A1"), _row("B1"), _row("", "M1"), _row("", "M1"), _row("", "M1"), _row("")]
    result = apply_tracking(HEADERS, rows, {})
    assert result.duplicates == [DuplicateEntry("A1", 2), DuplicateEntry("M1", 3)]


def test_duplicate_key_rows_each_receive_full_list():
    rows = [_row("A1", item="x"), _row("A1", item="y")]
    result = apply_tracking(HEADERS, rows, {"A1": ["111", "222"]})
    for r in result.updated_rows:
        assert r["운송장번호"] == "111"
        assert r["운송장번호(2)"] == "222"
    assert result.duplicates == [DuplicateEntry("A1", 2)]


def test_fallback_key_matches_reply():
    result = apply_tracking(HEADERS, [_row("", "M1")], {"M1": ["777"]})
    assert result.updated_rows[0]["운송장번호"] == "777"


def test_alternate_tracking_column_is_used():
    headers = HEADERS + ["송장 번호"]
    rows = [dict(_row("A1"), **{"송장 번호": ""})]
    result = apply_tracking(headers, rows, {"A1": ["1", "2"]})
    assert result.updated_headers == headers + ["송장 번호(2)"]
    assert result.updated_rows[0]["송장 번호"] == "1"
    assert result.updated_rows[0]["송장 번호(2)"] == "2"
    assert "운송장번호" not in result.updated_headers


def test_existing_extra_column_is_not_duplicated():
    headers = HEADERS + ["운송장번호", "운송장번호 (2)"]
    rows = [dict(_row("A1"), **{"운송장번호": "", "운송장번호 (2)": ""})]
    result = apply_tracking(headers, rows, {"A1": ["1", "2"]})
    assert result.updated_headers == headers
    assert result.updated_rows[0]["운송장번호 (2)"] == "2"


def test_second_merge_keeps_earlier_extra_values():
    first = apply_tracking(HEADERS, [_row("A1"), _row("B1")], {"A1": ["1", "2"]})
    second = apply_tracking(first.updated_headers, first.updated_rows, {"B1": ["9"]})
    a1, b1 = second.updated_rows
    assert (a1["운송장번호"], a1["운송장번호(2)"]) == ("1", "2")
    assert (b1["운송장번호"], b1["운송장번호(2)"]) == ("9", "")


def test_tracking_nth_header():
    assert tracking_nth_header("운송장번호", 2) == "운송장번호(2)"
    assert TrackingReconciler(["송장번호"], []).tracking_header == "송장번호"
