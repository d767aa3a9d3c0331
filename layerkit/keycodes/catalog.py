"""Read-only keycode catalog with lookup and search."""

import importlib.resources
import json
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from layerkit.core.errors import KeycodeCatalogError
from layerkit.core.structlog_logger import get_struct_logger

from .models import KeycodeCatalogData, KeycodeCategory, KeycodeDefinition, KeycodeParam


logger = get_struct_logger(__name__)

DEFAULT_CATALOG_PACKAGE = "layerkit.keycodes.data"
DEFAULT_CATALOG_FILE = "keycodes.yaml"

# Search relevance scores
_SCORE_EXACT = 100
_SCORE_PREFIX = 50
_SCORE_CONTAINS = 10
_SCORE_DESCRIPTION = 5


class KeycodeCatalog:
    """Keycode lookup implementing ``KeycodeCatalogProtocol``."""

    def __init__(self, data: KeycodeCatalogData) -> None:
        self._data = data
        self._lookup: dict[str, KeycodeDefinition] = {}
        self._patterns: list[re.Pattern[str]] = []

        for definition in data.keycodes:
            self._lookup.setdefault(definition.code, definition)
            for alias in definition.aliases:
                self._lookup.setdefault(alias, definition)
            if definition.pattern:
                try:
                    self._patterns.append(re.compile(f"^(?:{definition.pattern})$"))
                except re.error as e:
                    raise KeycodeCatalogError(
                        f"Invalid pattern for keycode '{definition.code}': {e}",
                        code=definition.code,
                    ) from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeycodeCatalog":
        try:
            return cls(KeycodeCatalogData.model_validate(data))
        except ValidationError as e:
            raise KeycodeCatalogError(f"Invalid keycode catalog: {e}") from e

    @property
    def categories(self) -> list[KeycodeCategory]:
        return list(self._data.categories)

    @property
    def keycodes(self) -> list[KeycodeDefinition]:
        return list(self._data.keycodes)

    def __len__(self) -> int:
        return len(self._data.keycodes)

    def get(self, keycode: str) -> KeycodeDefinition | None:
        """Get a definition by code or alias."""
        return self._lookup.get(keycode)

    def is_known(self, keycode: str) -> bool:
        """Check if a keycode is defined or matches a definition pattern.

        Parametrized templates such as ``MO()`` are not keycodes on their own;
        they are matched through ``get_params`` with their arguments.
        """
        definition = self._lookup.get(keycode)
        if definition is not None:
            return not definition.params
        return any(pattern.match(keycode) for pattern in self._patterns)

    def get_params(self, macro_name: str) -> list[KeycodeParam] | None:
        """Get parameters of a parametrized keycode.

        Accepts either the bare macro name (``LCTL_T``) or the catalog form
        (``LCTL_T()``).
        """
        code = macro_name if macro_name.endswith("()") else f"{macro_name}()"
        definition = self._lookup.get(code)
        if definition is None or not definition.params:
            return None
        return list(definition.params)

    def get_category_keycodes(self, category_id: str) -> list[KeycodeDefinition]:
        return [kc for kc in self._data.keycodes if kc.category == category_id]

    def search(
        self, query: str, category: str | None = None
    ) -> list[KeycodeDefinition]:
        """Search keycodes by code, name or description.

        Results are ranked exact match first, then prefix, then substring,
        then description match. Ties keep catalog order.
        """
        candidates = self._data.keycodes
        if category is not None:
            candidates = [kc for kc in candidates if kc.category == category]
        if not query:
            return list(candidates)

        needle = query.lower()
        scored: list[tuple[int, KeycodeDefinition]] = []
        for definition in candidates:
            code = definition.code.lower()
            name = definition.name.lower()
            if needle in (code, name):
                scored.append((_SCORE_EXACT, definition))
            elif code.startswith(needle) or name.startswith(needle):
                scored.append((_SCORE_PREFIX, definition))
            elif needle in code or needle in name:
                scored.append((_SCORE_CONTAINS, definition))
            elif definition.description and needle in definition.description.lower():
                scored.append((_SCORE_DESCRIPTION, definition))

        scored.sort(key=lambda item: item[0], reverse=True)
        return [definition for _, definition in scored]


def _parse_catalog_text(text: str, source: str, suffix: str) -> dict[str, Any]:
    try:
        if suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise KeycodeCatalogError(f"Failed to parse keycode catalog {source}: {e}") from e

    if not isinstance(data, dict):
        raise KeycodeCatalogError(
            f"Keycode catalog {source} must contain a mapping, "
            f"got {type(data).__name__}"
        )
    return data


def load_keycode_catalog(path: Path) -> KeycodeCatalog:
    """Load a keycode catalog from a YAML or JSON file.

    Raises:
        KeycodeCatalogError: If the file cannot be read or is invalid
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise KeycodeCatalogError(
            f"Cannot read keycode catalog {path}: {e}", path=str(path)
        ) from e

    catalog = KeycodeCatalog.from_dict(
        _parse_catalog_text(text, str(path), path.suffix.lower())
    )
    logger.debug("keycode_catalog_loaded", path=str(path), keycodes=len(catalog))
    return catalog


@lru_cache(maxsize=1)
def load_default_catalog() -> KeycodeCatalog:
    """Load the catalog bundled with layerkit."""
    resource = importlib.resources.files(DEFAULT_CATALOG_PACKAGE) / DEFAULT_CATALOG_FILE
    catalog = KeycodeCatalog.from_dict(
        _parse_catalog_text(
            resource.read_text(encoding="utf-8"), DEFAULT_CATALOG_FILE, ".yaml"
        )
    )
    logger.debug("default_keycode_catalog_loaded", keycodes=len(catalog))
    return catalog
