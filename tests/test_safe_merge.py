from nightingale_cms.merge import safe_merge


def test_omitted_collection_is_preserved():
    assert safe_merge({"people": [1, 2]}, {}) == {"people": [1, 2]}


def test_explicit_empty_list_clears():
    assert safe_merge({"people": [1, 2]}, {"people": []}) == {"people": []}


def test_none_does_not_wipe_collection():
    prev = {"cases": ["c"], "organizations": ["o"]}
    merged = safe_merge(prev, {"cases": None, "organizations": None})
    assert merged["cases"] is prev["cases"]
    assert merged["organizations"] is prev["organizations"]


def test_other_keys_are_shallow_merged():
    prev = {"people": [1], "metadata": {"a": 1}, "settings": {"x": 1}}
    merged = safe_merge(prev, {"metadata": {"b": 2}})
    assert merged == {"people": [1], "metadata": {"b": 2}, "settings": {"x": 1}}


def test_falsy_previous_collection_is_not_restored():
    assert safe_merge({"people": []}, {"people": None}) == {"people": None}


def test_missing_prev_or_partial():
    assert safe_merge(None, {"people": [1]}) == {"people": [1]}
    assert safe_merge(None, None) == {}

    prev = {"people": [1]}
    merged = safe_merge(prev, None)
    assert merged == prev
    assert merged is not prev
