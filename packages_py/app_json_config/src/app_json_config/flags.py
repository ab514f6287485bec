"""
Tri-state boolean used by config values that inherit from the defaults.
"""
from enum import IntEnum
from typing import Annotated, Any

from pydantic import BeforeValidator


class ConfigFlag(IntEnum):
    """A boolean config value that can also be left unset.

    A plain bool cannot tell "set to false" apart from "not given", and the
    merge with the default component configs needs that distinction.
    """
    UNSET = 0
    FALSE = 1
    TRUE = 2

    @classmethod
    def from_bool(cls, value: bool) -> "ConfigFlag":
        return cls.TRUE if value else cls.FALSE


def _coerce_flag(value: Any) -> Any:
    # JSON booleans are accepted alongside the 0/1/2 encoding
    if isinstance(value, bool):
        return ConfigFlag.from_bool(value)
    return value


Flag = Annotated[ConfigFlag, BeforeValidator(_coerce_flag)]
