from nightingale_cms.identity.normalizer import (
    build_people_index,
    find_person_by_id,
    id_variants,
    normalize_id,
    numeric_form,
)


def test_normalize_id_forms():
    assert normalize_id("5") == "5"
    assert normalize_id(5) == "5"
    assert normalize_id(5.0) == "5"
    assert normalize_id("  p-1 ") == "p-1"
    assert normalize_id("\u200b12") == "12"


def test_normalize_id_empty_inputs_never_raise():
    assert normalize_id(None) == ""
    assert normalize_id("") == ""
    assert normalize_id("   ") == ""
    assert normalize_id(True) == ""


def test_numeric_form():
    assert numeric_form("7") == "7"
    assert numeric_form("7.0") == "7"
    assert numeric_form("A7") is None
    assert numeric_form("") is None


def test_id_variants_cover_padding_and_numeric():
    assert id_variants("5") == ["5", "05"]
    assert id_variants("005") == ["005", "5", "05"]
    assert id_variants("0") == ["0", "00"]
    assert id_variants(None) == []


def test_index_registers_all_variants():
    jane = {"id": "5", "name": "Jane"}
    index = build_people_index([jane])
    assert index["5"] is jane
    assert index["05"] is jane


def test_index_first_writer_wins_on_collision():
    first = {"id": "05", "name": "First"}
    second = {"id": "5", "name": "Second"}
    index = build_people_index([first, second])

    # both claim "5" and "05"; the earlier record keeps them
    assert index["05"] is first
    assert index["5"] is first
    assert second not in index.values()


def test_index_later_duplicate_still_reachable_by_distinct_variant():
    first = {"id": "5"}
    second = {"id": "005"}
    index = build_people_index([first, second])

    assert index["5"] is first
    assert index["005"] is second


def test_index_skips_malformed_input():
    assert build_people_index(None) == {}
    assert build_people_index("people") == {}
    assert build_people_index([]) == {}

    index = build_people_index([None, {"name": "no id"}, {"id": ""}, {"id": "7"}])
    assert set(index) == {"7", "07"}


def test_find_person_by_id_flexible_matching():
    people = [{"id": "01"}, {"id": 20}, {"id": "abc"}]
    assert find_person_by_id(people, "1") is people[0]
    assert find_person_by_id(people, "20") is people[1]
    assert find_person_by_id(people, "020") is people[1]
    assert find_person_by_id(people, "abc") is people[2]
    assert find_person_by_id(people, "zzz") is None
    assert find_person_by_id([], "1") is None
    assert find_person_by_id(people, None) is None
