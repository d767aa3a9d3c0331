"""Models package for layerkit."""

from .base import LayerkitBaseModel


__all__ = ["LayerkitBaseModel"]
