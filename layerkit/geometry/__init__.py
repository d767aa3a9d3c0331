"""Keyboard geometry: physical key bounds used for position checks."""

from .models import KeyboardGeometry, KeyGeometry, load_geometry_file


__all__ = ["KeyGeometry", "KeyboardGeometry", "load_geometry_file"]
