"""Dot-path helpers used by conditions and update_field."""

import pytest

from app.shared.utils.field_path import MISSING, get_path, resolve, set_path, split_path


def test_get_path_distinguishes_missing_from_none() -> None:
    document = {"a": {"b": None}}
    assert get_path(document, "a.b") is None
    assert get_path(document, "a.c") is MISSING
    assert resolve(document, "a.c") is None


def test_get_path_stops_at_non_mapping() -> None:
    assert get_path({"a": "text"}, "a.b") is MISSING
    assert get_path({"a": [1, 2]}, "a.0") is MISSING


def test_set_path_creates_intermediates_and_keeps_siblings() -> None:
    document = {"custom": {"keep": 1}}
    set_path(document, "custom.score", 5)
    set_path(document, "meta.source.channel", "web")
    assert document == {
        "custom": {"keep": 1, "score": 5},
        "meta": {"source": {"channel": "web"}},
    }


def test_set_path_replaces_non_mapping_intermediate() -> None:
    document = {"custom": "legacy"}
    set_path(document, "custom.score", 1)
    assert document == {"custom": {"score": 1}}


@pytest.mark.parametrize("path", ["", "a..b", ".a", "a."])
def test_split_path_rejects_empty_segments(path: str) -> None:
    with pytest.raises(ValueError):
        split_path(path)
