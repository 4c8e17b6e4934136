"""Enum conversion utilities"""

from enum import Enum
from typing import TypeVar, Type, Optional, List, Any

E = TypeVar("E", bound=Enum)


class EnumHelper:
    """
    Utility class for working with Enums read from config files and device
    responses:
    - Parse names ("REALTIME", "realtime") or values ("rt") to members
    - List member values for error messages
    """

    @staticmethod
    def to_enum(enum_class: Type[E], value: Any) -> E:
        """
        Convert a member, a member name (case-insensitive) or a member value
        to an enum instance.

        Raises:
            ValueError: no member matches
            TypeError: value is neither str nor a member
        """
        if isinstance(value, enum_class):
            return value
        if isinstance(value, str):
            try:
                return enum_class[value.upper()]
            except KeyError:
                pass
            try:
                return enum_class(value)
            except ValueError:
                raise ValueError(
                    f"Invalid enum value '{value}' for {enum_class.__name__}, "
                    f"expected one of {EnumHelper.list_values(enum_class)}"
                )
        raise TypeError(f"Expected str or {enum_class.__name__}, got {type(value)}")

    @staticmethod
    def from_value(enum_class: Type[E], value: Any, default: Optional[E] = None) -> Optional[E]:
        """Lenient parse: returns `default` instead of raising"""
        try:
            return EnumHelper.to_enum(enum_class, value)
        except (ValueError, TypeError):
            return default

    @staticmethod
    def list_values(enum_class: Type[E]) -> List[Any]:
        return [member.value for member in enum_class]
