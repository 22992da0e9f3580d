from types import SimpleNamespace

import pytest

from taskbase.auto_reset import auto_reset


def test_attribute_replaced_and_restored():
    holder = SimpleNamespace(flag="old")
    with auto_reset(holder, "flag", "new") as original:
        assert holder.flag == "new"
        assert original == "old"
    assert holder.flag == "old"


def test_restored_after_exception():
    holder = SimpleNamespace(count=1)
    with pytest.raises(ValueError):
        with auto_reset(holder, "count", 99):
            assert holder.count == 99
            raise ValueError("boom")
    assert holder.count == 1


def test_mapping_item():
    settings = {"mode": "a"}
    with auto_reset(settings, "mode", "b"):
        assert settings["mode"] == "b"
    assert settings == {"mode": "a"}


def test_nested_resets():
    holder = SimpleNamespace(level=0)
    with auto_reset(holder, "level", 1):
        with auto_reset(holder, "level", 2) as inner_original:
            assert inner_original == 1
            assert holder.level == 2
        assert holder.level == 1
    assert holder.level == 0


def test_missing_attribute_raises():
    with pytest.raises(AttributeError):
        with auto_reset(SimpleNamespace(), "absent", 1):
            pass