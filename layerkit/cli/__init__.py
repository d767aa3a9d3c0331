"""Command-line interface for layerkit."""

from layerkit.cli.app import app, main


__all__ = ["app", "main"]
