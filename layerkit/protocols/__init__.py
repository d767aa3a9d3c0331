"""Protocol definitions for layerkit collaborators.

These protocols use Python's typing.Protocol system with the @runtime_checkable
decorator to enable both static type checking and runtime isinstance() checks.
"""

from .catalog_protocols import KeyboardGeometryProtocol, KeycodeCatalogProtocol


__all__ = [
    "KeyboardGeometryProtocol",
    "KeycodeCatalogProtocol",
]
