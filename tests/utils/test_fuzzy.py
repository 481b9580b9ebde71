import pytest

from formulaterms.utils.fuzzy import format_suggestions, fuzzy_match, levenshtein


@pytest.mark.parametrize(
    "a,b,distance",
    [
        ("", "", 0),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("qty", "quantity", 5),
        ("same", "same", 0),
    ],
)
def test_levenshtein(a, b, distance):
    assert levenshtein(a, b) == distance
    assert levenshtein(b, a) == distance


def test_fuzzy_match():
    assert fuzzy_match("quantty", ["quantity", "price"]) == ["quantity", "price"]
    assert fuzzy_match("qty", ["y", "quantity"]) == ["y", "quantity"]
    assert fuzzy_match("qty", ["quantity", "price"]) == ["price", "quantity"]
    assert fuzzy_match("QUANTITY", ["price", "quantity"])[0] == "quantity"
    assert fuzzy_match("ab", ["xyz", "bb", "ac"]) == ["ac", "bb", "xyz"]
    assert fuzzy_match("ab", ["xyz", "bb", "ac"], limit=2) == ["ac", "bb"]
    assert fuzzy_match("ab", ["xyz", "bb", "ac"], max_distance=1) == ["ac", "bb"]
    assert fuzzy_match("a", []) == []
    assert fuzzy_match("a", ["abcdefghijkl"]) == []
    assert fuzzy_match("a", ["abcdefghijkl"], max_distance=20) == ["abcdefghijkl"]


def test_format_suggestions():
    assert format_suggestions("qty", ["y", "quantity"]) == (
        "There isn't a variable called 'qty' in your data; the nearest names "
        "appear to be: y, quantity"
    )
    assert format_suggestions("qty", []) == (
        "There isn't a variable called 'qty' in your data"
    )
