"""Layer management for layouts."""

from .service import (
    LayoutLayerService,
    create_layout_layer_service,
    resolve_layer_selector,
)


__all__ = ["LayoutLayerService", "create_layout_layer_service", "resolve_layer_selector"]
