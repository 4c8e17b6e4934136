import pytest

from models.enums import DeviceMode
from utils.enum_helper import EnumHelper


def test_parses_names_and_values():
    assert EnumHelper.to_enum(DeviceMode, "movie") == DeviceMode.MOVIE
    assert EnumHelper.to_enum(DeviceMode, "RT") == DeviceMode.RT
    assert EnumHelper.to_enum(DeviceMode, DeviceMode.OFF) == DeviceMode.OFF


def test_invalid_value_lists_choices():
    with pytest.raises(ValueError, match="expected one of") as exc:
        EnumHelper.to_enum(DeviceMode, "disco")
    assert "'rt'" in str(exc.value)
    assert "'movie'" in str(exc.value)


def test_from_value_falls_back_to_default():
    assert EnumHelper.from_value(DeviceMode, "disco") is None
    assert EnumHelper.from_value(DeviceMode, 42, DeviceMode.OFF) == DeviceMode.OFF
