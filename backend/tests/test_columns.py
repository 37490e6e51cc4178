from vizgen.insights.columns import header_lookup, is_header_duplicate, resolve_columns


def test_direct_strategy_uses_keys_and_drops_blank_rows() -> None:
    records = [{"a": 1, "b": 2}, {"a": None, "b": None}, {"a": 3, "b": 4}]
    resolution = resolve_columns(records, ["a", "b"])

    assert resolution is not None
    assert resolution.strategy == "direct"
    assert resolution.keys == {"a": "a", "b": "b"}
    assert resolution.rows == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]


def test_direct_strategy_skips_header_duplicate_row() -> None:
    records = [{"a": "a", "b": "b"}, {"a": 1, "b": 2}]
    resolution = resolve_columns(records, ["a"])

    assert resolution is not None
    assert resolution.strategy == "direct"
    assert resolution.rows == [{"a": 1, "b": 2}]


def test_header_strategy_maps_names_to_keys() -> None:
    records = [
        {"__EMPTY": "name", "__EMPTY_1": "score"},
        {"__EMPTY": "ann", "__EMPTY_1": 3},
        {"__EMPTY": None, "__EMPTY_1": None},
    ]
    resolution = resolve_columns(records, ["score", "name"])

    assert resolution is not None
    assert resolution.strategy == "header"
    assert resolution.keys == {"score": "__EMPTY_1", "name": "__EMPTY"}
    assert resolution.rows == [{"__EMPTY": "ann", "__EMPTY_1": 3}]


def test_unresolvable_names_return_none() -> None:
    records = [{"A": "name", "B": "score"}, {"A": "ann", "B": 3}]

    assert resolve_columns(records, ["missing"]) is None
    assert resolve_columns([], ["name"]) is None
    assert resolve_columns(records, []) is None


def test_numeric_first_row_is_not_a_header() -> None:
    assert header_lookup({"A": 1, "B": "score"}) is None
    assert header_lookup({"A": None}) is None
    assert header_lookup({"A": " name ", "B": None}) == {"name": "A"}


def test_header_duplicate_detection() -> None:
    assert is_header_duplicate({"a": "a", "b": "b"})
    assert not is_header_duplicate({"a": "a", "b": 2})
    assert not is_header_duplicate({})
