import pytest

from models.easing import Easing, easing_by_name, EASINGS_BY_NAME


@pytest.mark.parametrize("fn", list(EASINGS_BY_NAME.values()))
def test_curves_hit_endpoints(fn):
    assert fn(0.0) == pytest.approx(0.0)
    assert fn(1.0) == pytest.approx(1.0)


def test_out_is_cubic():
    assert Easing.Out(0.5) == pytest.approx(0.875)
    assert Easing.In(0.5) == pytest.approx(0.125)
    assert Easing.InOut(0.5) == pytest.approx(0.5)


def test_lookup_by_name_is_case_insensitive():
    assert easing_by_name("OUT") is EASINGS_BY_NAME["out"]


def test_unknown_name_raises():
    with pytest.raises(ValueError, match="Unknown easing"):
        easing_by_name("bounce")
