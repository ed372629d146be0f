import pytest

from merkproof.query_item import QueryItem, QueryItemKind


def parts(item):
    return (item.kind, item.start, item.end)


def b(*values):
    return bytes(values)


def test_query_item_cmp():
    assert QueryItem.key(b(10)) < QueryItem.key(b(20))
    assert QueryItem.key(b(10)) == QueryItem.key(b(10))
    assert QueryItem.key(b(20)) > QueryItem.key(b(10))

    assert QueryItem.key(b(10)) < QueryItem.range(b(20), b(30))
    assert QueryItem.key(b(10)) == QueryItem.range(b(10), b(20))
    assert QueryItem.key(b(15)) == QueryItem.range(b(10), b(20))
    assert QueryItem.key(b(20)) > QueryItem.range(b(10), b(20))
    assert QueryItem.key(b(20)) == QueryItem.range_inclusive(b(10), b(20))
    assert QueryItem.key(b(30)) > QueryItem.range(b(10), b(20))

    assert QueryItem.range(b(10), b(20)) < QueryItem.range(b(30), b(40))
    assert QueryItem.range(b(10), b(20)) < QueryItem.range(b(20), b(30))
    assert QueryItem.range_inclusive(b(10), b(20)) == QueryItem.range(b(20), b(30))
    assert QueryItem.range(b(15), b(25)) == QueryItem.range(b(20), b(30))
    assert QueryItem.range(b(20), b(30)) > QueryItem.range(b(10), b(20))


def test_compare_values():
    assert QueryItem.key(b(1)).compare(QueryItem.key(b(2))) == -1
    assert QueryItem.key(b(2)).compare(QueryItem.key(b(2))) == 0
    assert QueryItem.key(b(3)).compare(QueryItem.key(b(2))) == 1


def test_compare_with_bytes():
    item = QueryItem.range(b(10), b(20))
    assert item == b(15)
    assert item > b(5)
    assert item < b(20)
    assert item.compare(b(10)) == 0


def test_unbounded_ordering():
    full = QueryItem.range_full()
    assert full == QueryItem.key(b(0))
    assert full == QueryItem.key(b(255, 255))
    assert QueryItem.range_to(b(5)) < QueryItem.key(b(5))
    assert QueryItem.range_from(b(5)) > QueryItem.key(b(4))
    assert QueryItem.range_from(b(5)) == QueryItem.key(b(9))


def test_query_item_merge():
    merged = QueryItem.range(b(10), b(30)).merge(QueryItem.range(b(15), b(20)))
    assert parts(merged) == (QueryItemKind.RANGE, b(10), b(30))

    merged = QueryItem.range_inclusive(b(10), b(30)).merge(QueryItem.range(b(20), b(30)))
    assert parts(merged) == (QueryItemKind.RANGE_INCLUSIVE, b(10), b(30))

    merged = QueryItem.key(b(5)).merge(QueryItem.range(b(1), b(10)))
    assert parts(merged) == (QueryItemKind.RANGE, b(1), b(10))

    merged = QueryItem.key(b(10)).merge(QueryItem.range_inclusive(b(1), b(10)))
    assert parts(merged) == (QueryItemKind.RANGE_INCLUSIVE, b(1), b(10))


def test_merge_after_and_unbounded_forms():
    merged = QueryItem.range_after(b(5)).merge(QueryItem.key(b(7)))
    assert parts(merged) == (QueryItemKind.RANGE_AFTER, b(5), None)

    merged = QueryItem.key(b(3)).merge(QueryItem.range_after(b(5)))
    assert parts(merged) == (QueryItemKind.RANGE_FROM, b(3), None)

    merged = QueryItem.range_to(b(10)).merge(QueryItem.key(b(15)))
    assert parts(merged) == (QueryItemKind.RANGE_TO_INCLUSIVE, None, b(15))

    merged = QueryItem.range_to(b(10)).merge(QueryItem.range_from(b(5)))
    assert parts(merged) == (QueryItemKind.RANGE_FULL, None, None)

    merged = QueryItem.range_after_to(b(5), b(8)).merge(QueryItem.range_after_to(b(6), b(9)))
    assert parts(merged) == (QueryItemKind.RANGE_AFTER_TO, b(5), b(9))

    merged = QueryItem.range_after_to(b(5), b(8)).merge(QueryItem.key(b(9)))
    assert parts(merged) == (QueryItemKind.RANGE_AFTER_TO_INCLUSIVE, b(5), b(9))


def test_query_item_from_bytes():
    item = QueryItem.key(bytearray([42]))
    assert parts(item) == (QueryItemKind.KEY, b(42), b(42))
    assert item == QueryItem.key(b(42))


def test_bounds():
    item = QueryItem.range(b(0, 0, 0, 0, 0, 0, 5, 5), b(0, 0, 0, 0, 0, 0, 0, 7))
    assert item.lower_bound() == (b(0, 0, 0, 0, 0, 0, 5, 5), False)
    assert item.upper_bound() == (b(0, 0, 0, 0, 0, 0, 0, 7), False)

    assert QueryItem.key(b(1)).lower_bound() == (b(1), False)
    assert QueryItem.key(b(1)).upper_bound() == (b(1), True)
    assert QueryItem.range_full().lower_bound() == (b"", False)
    assert QueryItem.range_full().upper_bound() == (b"", True)
    assert QueryItem.range_after(b(3)).lower_bound() == (b(3), True)
    assert QueryItem.range_after_to_inclusive(b(3), b(4)).upper_bound() == (b(4), True)
    assert QueryItem.range_to_inclusive(b(9)).upper_bound() == (b(9), True)


@pytest.mark.parametrize(
    "item, lower, upper",
    [
        (QueryItem.key(b(1)), False, False),
        (QueryItem.range(b(1), b(2)), False, False),
        (QueryItem.range_inclusive(b(1), b(2)), False, False),
        (QueryItem.range_full(), True, True),
        (QueryItem.range_from(b(1)), False, True),
        (QueryItem.range_to(b(1)), True, False),
        (QueryItem.range_to_inclusive(b(1)), True, False),
        (QueryItem.range_after(b(1)), False, True),
        (QueryItem.range_after_to(b(1), b(2)), False, False),
        (QueryItem.range_after_to_inclusive(b(1), b(2)), False, False),
    ],
)
def test_unboundedness(item, lower, upper):
    assert item.lower_unbounded() is lower
    assert item.upper_unbounded() is upper


def test_contains():
    assert QueryItem.key(b(5)).contains(b(5))
    assert not QueryItem.key(b(5)).contains(b(6))
    assert QueryItem.range(b(5), b(7)).contains(b(5))
    assert QueryItem.range(b(5), b(7)).contains(b(6, 9))
    assert not QueryItem.range(b(5), b(7)).contains(b(7))
    assert QueryItem.range_inclusive(b(5), b(7)).contains(b(7))
    assert not QueryItem.range_after(b(5)).contains(b(5))
    assert QueryItem.range_after(b(5)).contains(b(5, 0))
    assert QueryItem.range_full().contains(b"")
    assert QueryItem.range_to(b(3)).contains(b(0))
    assert not QueryItem.range_to(b(3)).contains(b(3))
    assert QueryItem.range_to_inclusive(b(3)).contains(b(3))
    assert not QueryItem.range_after_to_inclusive(b(3), b(5)).contains(b(3))
    assert QueryItem.range_after_to_inclusive(b(3), b(5)).contains(b(5))


def test_is_range():
    assert QueryItem.key(b(1)).is_range() is False
    assert QueryItem.range(b(1), b(2)).is_range() is True
    assert QueryItem.range_full().is_range() is True


def test_invalid_construction():
    with pytest.raises(ValueError):
        QueryItem(QueryItemKind.RANGE, b(1), None)
    with pytest.raises(ValueError):
        QueryItem(QueryItemKind.RANGE_FULL, b(1), None)
    with pytest.raises(ValueError):
        QueryItem(QueryItemKind.KEY, b(1), b(2))
    with pytest.raises(TypeError):
        QueryItem.key("text")
    with pytest.raises(TypeError):
        QueryItem.range(1, b(2))


def test_repr_names_constructor():
    assert repr(QueryItem.range_inclusive(b(3), b(7))) == (
        "QueryItem.range_inclusive(b'\\x03', b'\\x07')"
    )
    assert repr(QueryItem.key(b(2))) == "QueryItem.key(b'\\x02')"
    assert repr(QueryItem.range_full()) == "QueryItem.range_full()"