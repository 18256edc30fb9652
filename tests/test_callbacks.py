import pytest

from cubecore.callbacks import (
    IntSliderCallbacks,
    SuppliableIntCallbacks,
    ValidatingIntSliderCallbacks,
)


def _to_str(value):
    return None if value is None else str(value)


def _to_int(value):
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def test_abstract_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        IntSliderCallbacks()


def test_validating_bounds_and_validate():
    cb = ValidatingIntSliderCallbacks(min=2, max=12)
    assert cb.min_inclusive() == 2
    assert cb.max_inclusive() == 12
    assert cb.validate(2) == 2
    assert cb.validate(12) == 12
    assert cb.validate(13) is None
    assert cb.validate(1) is None
    assert cb.validate(None) is None


def test_progress_endpoints():
    cb = ValidatingIntSliderCallbacks(min=2, max=12)
    assert cb.to_slider_progress(2) == 0.0
    assert cb.to_slider_progress(12) == 1.0
    assert cb.to_value(0.0) == 2
    assert cb.to_value(1.0) == 12


def test_progress_is_monotonic():
    cb = ValidatingIntSliderCallbacks(min=-5, max=20)
    progresses = [cb.to_slider_progress(v) for v in range(-5, 21)]
    assert progresses == sorted(progresses)
    values = [cb.to_value(p / 100) for p in range(101)]
    assert values == sorted(values)
    assert all(-5 <= v <= 20 for v in values)


def test_suppliable_clamps_to_supplied_bounds():
    bounds = {"low": 0, "high": 10}
    cb = SuppliableIntCallbacks(lambda: bounds["low"], lambda: bounds["high"])
    assert cb.is_cycling() is True
    assert cb.validate(50) == 10
    assert cb.validate(-50) == 0
    assert cb.validate(4) == 4
    assert cb.validate(None) is None
    bounds["high"] = 32
    assert cb.max_inclusive() == 32
    assert cb.validate(50) == 32


def test_modifier_converts_values():
    base = SuppliableIntCallbacks(lambda: 0, lambda: 10)
    modified = base.with_modifier(_to_str, _to_int)
    assert modified.to_value(1.0) == "10"
    assert modified.to_value(0.0) == "0"
    assert modified.to_slider_progress("10") == base.to_slider_progress(10)
    assert modified.validate("50") == "10"
    assert modified.validate("3") == "3"


def test_modifier_validate_rejects_through_inner():
    base = ValidatingIntSliderCallbacks(min=0, max=10)
    modified = base.with_modifier(_to_str, _to_int)
    assert modified.validate("11") is None
    assert modified.validate("abc") is None


def test_modifier_unconvertible_value_raises():
    base = ValidatingIntSliderCallbacks(min=0, max=10)
    modified = base.with_modifier(_to_str, _to_int)
    with pytest.raises(ValueError):
        modified.to_slider_progress("abc")
    never = base.with_modifier(lambda value: None, _to_int)
    with pytest.raises(ValueError):
        never.to_value(0.5)