"""Keycode catalog models."""

from enum import Enum

from pydantic import Field, field_validator

from layerkit.models.base import LayerkitBaseModel


class ParamType(str, Enum):
    """Kind of argument a parametrized keycode expects."""

    KEYCODE = "keycode"
    LAYER = "layer"
    MODIFIER = "modifier"


class KeycodeParam(LayerkitBaseModel):
    """Parameter definition for parametrized keycodes."""

    type: ParamType
    name: str
    description: str | None = None


class KeycodeCategory(LayerkitBaseModel):
    id: str
    name: str
    description: str = ""


class KeycodeDefinition(LayerkitBaseModel):
    """A keycode entry.

    Parametrized keycodes are stored with empty parentheses, e.g. ``LCTL_T()``,
    and list their arguments in ``params``.
    """

    code: str
    name: str
    category: str
    description: str | None = None
    pattern: str | None = None
    aliases: list[str] = Field(default_factory=list)
    params: list[KeycodeParam] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        if not v:
            raise ValueError("Keycode cannot be empty")
        return v

    @property
    def is_parametrized(self) -> bool:
        return bool(self.params)

    @property
    def prefix(self) -> str | None:
        """Macro name of a parametrized keycode, e.g. ``LCTL_T``."""
        if self.code.endswith("()"):
            return self.code[:-2]
        return None


class KeycodeCatalogData(LayerkitBaseModel):
    """On-disk catalog document."""

    version: str = "1"
    categories: list[KeycodeCategory] = Field(default_factory=list)
    keycodes: list[KeycodeDefinition] = Field(default_factory=list)
