"""Keycode catalog: definitions, parameters and search."""

from .catalog import (
    KeycodeCatalog,
    load_default_catalog,
    load_keycode_catalog,
)
from .models import (
    KeycodeCatalogData,
    KeycodeCategory,
    KeycodeDefinition,
    KeycodeParam,
    ParamType,
)


__all__ = [
    "KeycodeCatalog",
    "KeycodeCatalogData",
    "KeycodeCategory",
    "KeycodeDefinition",
    "KeycodeParam",
    "ParamType",
    "load_default_catalog",
    "load_keycode_catalog",
]
