"""Tests for EnvironmentStore write modes and merging."""

from __future__ import annotations

from shipyard.environment import EnvironmentStore, MergePolicy


def test_get_missing_key_returns_empty_string():
    assert EnvironmentStore().get("NOPE") == ""


def test_set_overwrites():
    env = EnvironmentStore()
    env.set("K", "one")
    env.set("K", "two")
    assert env.get("K") == "two"


def test_set_if_absent_then_set_yields_set_value():
    env = EnvironmentStore()
    env.set_if_absent("K", "file")
    env.set("K", "derived")
    assert env.get("K") == "derived"


def test_set_then_set_if_absent_keeps_set_value():
    env = EnvironmentStore()
    env.set("K", "derived")
    assert env.set_if_absent("K", "file") is False
    assert env.get("K") == "derived"


def test_set_if_absent_fills_blank_value():
    env = EnvironmentStore({"K": "   "})
    assert env.set_if_absent("K", "filled") is True
    assert env.get("K") == "filled"


def test_merge_if_absent_reports_written_keys():
    env = EnvironmentStore({"IMAGE": "reg/app:1-3"})
    written = env.merge(
        {"IMAGE": "other", "APP_NAME": "app"}, MergePolicy.IF_ABSENT
    )
    assert written == ["APP_NAME"]
    assert env.get("IMAGE") == "reg/app:1-3"
    assert env.get("APP_NAME") == "app"


def test_merge_overwrite():
    env = EnvironmentStore({"A": "1"})
    env.merge({"A": "2", "B": "3"}, MergePolicy.OVERWRITE)
    assert env.as_dict() == {"A": "2", "B": "3"}


def test_insertion_order_preserved():
    env = EnvironmentStore()
    for key in ("Z", "A", "M"):
        env.set(key, key.lower())
    assert list(env) == ["Z", "A", "M"]
    assert len(env) == 3


def test_none_value_stored_as_empty_string():
    env = EnvironmentStore()
    env.set("K", None)
    assert "K" in env
    assert env.get("K") == ""


def test_as_dict_is_a_copy():
    env = EnvironmentStore({"A": "1"})
    snapshot = env.as_dict()
    snapshot["A"] = "changed"
    assert env.get("A") == "1"
