"""Layout utility functions."""

from .json_operations import load_layout_data, load_layout_file, save_layout_file


__all__ = ["load_layout_data", "load_layout_file", "save_layout_file"]
