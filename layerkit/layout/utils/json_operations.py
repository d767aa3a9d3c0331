"""File operations for layout documents (JSON or YAML by suffix)."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from layerkit.core.errors import LayoutLoadError
from layerkit.layout.models import Layout


YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def _is_yaml(file_path: Path) -> bool:
    return file_path.suffix.lower() in YAML_SUFFIXES


def load_layout_data(file_path: Path) -> dict[str, Any]:
    """Load the raw mapping of a layout document.

    Raises:
        LayoutLoadError: If the file is missing, unreadable or not a mapping
    """
    if not file_path.exists():
        raise LayoutLoadError(f"Layout file not found: {file_path}", path=str(file_path))

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise LayoutLoadError(f"Cannot read layout file {file_path}: {e}") from e

    try:
        data = yaml.safe_load(content) if _is_yaml(file_path) else json.loads(content)
    except json.JSONDecodeError as e:
        raise LayoutLoadError(
            f"Invalid JSON in layout file {file_path}: {e.msg} "
            f"(line {e.lineno}, column {e.colno})"
        ) from e
    except yaml.YAMLError as e:
        raise LayoutLoadError(f"Invalid YAML in layout file {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise LayoutLoadError(
            f"Layout file {file_path} does not contain a mapping", path=str(file_path)
        )
    return data


def load_layout_file(file_path: Path) -> Layout:
    """Load and validate a layout document.

    Args:
        file_path: Path to a ``.json``, ``.yaml`` or ``.yml`` layout file

    Returns:
        Validated Layout instance

    Raises:
        LayoutLoadError: If the file cannot be read or does not match the schema
    """
    data = load_layout_data(file_path)
    try:
        return Layout.model_validate(data)
    except ValidationError as e:
        raise LayoutLoadError(f"Invalid layout data in {file_path}: {e}") from e


def save_layout_file(layout: Layout, file_path: Path) -> None:
    """Save a layout document, choosing the format from the file suffix.

    Raises:
        OSError: If the file cannot be written
    """
    data = layout.model_dump(by_alias=True, exclude_none=True, mode="json")
    if _is_yaml(file_path):
        content = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    else:
        content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    try:
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise OSError(f"Failed to save layout file {file_path}: {e}") from e
