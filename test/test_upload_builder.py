from builders.upload_builder import CjUploadBuilder, build_cj_groups
from config import CJ_UPLOAD_HEADERS, CJ_UPLOAD_KEY_COL
from normalizers.order_normalizer import OrderKeyExtractor


def test_cj_upload_schema_is_fixed():
    assert len(CJ_UPLOAD_HEADERS) == 15
    assert len(set(CJ_UPLOAD_HEADERS)) == 15
    assert CJ_UPLOAD_KEY_COL in CJ_UPLOAD_HEADERS


def test_groups_by_item_and_skips_unusable_rows(original_headers, original_rows):
    rows = original_rows + [{"상품주문번호": "Z1", "품목명": "  "}]
    builder = CjUploadBuilder(original_headers, rows)
    groups = builder.build_groups()

    assert list(groups) == ["감귤 5kg", "한라봉 3kg"]
    assert len(groups["감귤 5kg"]) == 2
    # 천혜향 row has no key at all, Z1 has no item name
    assert builder.skipped_no_key == 1
    assert builder.skipped_no_item == 1


def test_rows_have_exact_schema_and_injected_key(original_headers, original_rows):
    groups = build_cj_groups(original_headers, original_rows)
    for rows in groups.values():
        for r in rows:
            assert list(r.keys()) == CJ_UPLOAD_HEADERS

    (row,) = groups["한라봉 3kg"]
    assert row[CJ_UPLOAD_KEY_COL] == "M9"  # fallback key
    assert row["받는분성명"] == "이영희"
    assert row["품목명"] == "한라봉 3kg"
    assert row["보내는분성명"] == ""  # absent in the original


def test_injected_key_overrides_source_column():
    headers = ["상품주문번호", "고객주문번호", "품목명"]
    rows = [{"상품주문번호": "P-1", "고객주문번호": "WRONG", "품목명": "감귤 3kg"}]
    (row,) = build_cj_groups(headers, rows)["감귤 3kg"]
    assert row[CJ_UPLOAD_KEY_COL] == "P-1"


def test_injected_key_round_trips_with_extractor(original_headers, original_rows):
    extractor = OrderKeyExtractor.for_headers(original_headers)
    expected = [extractor.extract(r) for r in original_rows if extractor.extract(r)]
    groups = build_cj_groups(original_headers, original_rows)
    injected = [r[CJ_UPLOAD_KEY_COL] for rows in groups.values() for r in rows]
    assert sorted(injected) == sorted(expected)


def test_fields_pulled_through_spaced_headers():
    headers = ["상품주문번호", "품목명", "받는분 성명", "박스 수량"]
    rows = [{"상품주문번호": 101, "품목명": "감귤 3kg", "받는분 성명": "최", "박스 수량": 3}]
    (row,) = build_cj_groups(headers, rows)["감귤 3kg"]
    assert row["받는분성명"] == "최"
    assert row["박스수량"] == 3
    assert row[CJ_UPLOAD_KEY_COL] == "101"


def test_encounter_order_within_group():
    headers = ["상품주문번호", "품목명"]
    rows = [{"상품주문번호": k, "품목명": "감귤"} for k in ["C", "A", "B"]]
    groups = build_cj_groups(headers, rows)
    assert [r[CJ_UPLOAD_KEY_COL] for r in groups["감귤"]] == ["C", "A", "B"]
