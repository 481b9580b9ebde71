import pytest

from formulaterms.utils.layered_mapping import LayeredMapping


def test_layered_context():
    layer1 = {"a": 1, "b": 2, "c": 3}
    layer2 = {"a": 2, "d": 4}

    layered = LayeredMapping(layer1, layer2)

    assert layered["a"] == 1
    assert layered["b"] == 2
    assert layered["c"] == 3
    assert layered["d"] == 4
    assert layered.get("e") is None

    with pytest.raises(KeyError):
        layered["e"]

    assert len(layered) == 4
    assert list(layered) == ["a", "b", "c", "d"]

    layered2 = layered.with_layers({"e": 0, "a": 3}, {"h": 1})
    assert set(layered2) == {"a", "b", "c", "d", "e", "h"}
    assert layered2["a"] == 3

    appended = layered.with_layers({"a": 3}, prepend=False)
    assert appended["a"] == 1

    assert layered.with_layers() is layered
    assert layered.with_layers(None) is layered


def test_null_layers_are_ignored():
    layered = LayeredMapping(None, {"a": 1}, None, name="context")
    assert dict(layered) == {"a": 1}
    assert repr(layered) == "<LayeredMapping 'context': 1 layers>"
    assert repr(LayeredMapping()) == "<LayeredMapping: 0 layers>"
