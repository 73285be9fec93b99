"""Tests for errorkit_xml.protocols -- the Unwrappable capability."""

from __future__ import annotations

from errorkit_xml.protocols import Unwrappable, unwrap_value


def test_is_runtime_checkable():
    assert getattr(Unwrappable, "_is_runtime_protocol", False) is True


# -- Conforming mock class (structural subtyping, NO inheritance) --

class _FakeWrapper:
    def __init__(self, value):
        self.value = value

    def unwrap(self, declared_type):
        return self.value


class _NotAWrapper:
    value = "x"


class TestStructuralSubtyping:
    """Classes implementing ``unwrap`` WITHOUT inheriting pass isinstance."""

    def test_fake_wrapper_isinstance(self):
        assert isinstance(_FakeWrapper(1), Unwrappable)

    def test_missing_method_fails_isinstance(self):
        assert not isinstance(_NotAWrapper(), Unwrappable)


class TestUnwrapValue:
    """Tests for unwrap_value()."""

    def test_wrapper_unwrapped(self):
        assert unwrap_value(_FakeWrapper([1, 2]), list) == [1, 2]

    def test_plain_value_passed_through(self):
        value = _NotAWrapper()
        assert unwrap_value(value, object) is value
