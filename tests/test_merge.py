from formwire import UNSET, ReplaceValue, merge_options


def test_scalar_overrides_and_sequence_concatenates():
    assert merge_options({"class": "a", "tags": [1]}, {"class": "b", "tags": [2]}) == {
        "class": "b",
        "tags": [1, 2],
    }


def test_nested_mappings_merge_per_key():
    result = merge_options(
        {"options": {"class": "form-group", "data": {"a": 1}}},
        {"options": {"data": {"b": 2}}},
        {"options": {"class": "row"}},
    )
    assert result == {"options": {"class": "row", "data": {"a": 1, "b": 2}}}


def test_tuples_concatenate_into_lists():
    assert merge_options({"tags": (1,)}, {"tags": [2, 3]}) == {"tags": [1, 2, 3]}


def test_mismatched_types_take_later_value():
    assert merge_options({"tags": [1]}, {"tags": "x"}) == {"tags": "x"}
    assert merge_options({"opts": "x"}, {"opts": {"a": 1}}) == {"opts": {"a": 1}}


def test_replace_and_unset_markers():
    result = merge_options(
        {"tags": [1], "options": {"a": 1}, "hint": "x"},
        {"tags": ReplaceValue([2]), "options": ReplaceValue({"b": 2}), "hint": UNSET},
    )
    assert result == {"tags": [2], "options": {"b": 2}}


def test_sources_are_not_mutated():
    first = {"options": {"a": 1}, "tags": [1]}
    second = {"options": {"b": 2}, "tags": [2]}
    result = merge_options(first, second)
    result["options"]["c"] = 3
    result["tags"].append(9)
    assert first == {"options": {"a": 1}, "tags": [1]}
    assert second == {"options": {"b": 2}, "tags": [2]}


def test_empty_sources():
    assert merge_options() == {}
    assert merge_options({}, None, {"a": 1}) == {"a": 1}
