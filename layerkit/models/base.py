"""Base model for all layerkit Pydantic models.

This module provides a base model class that enforces consistent serialization
behavior across all layerkit models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class LayerkitBaseModel(BaseModel):
    """Base model class for all layerkit Pydantic models.

    This class enforces consistent serialization behavior:
    - by_alias=True: Use field aliases for serialization
    - mode="json": Use JSON-compatible serialization (e.g., datetime -> ISO string)
    """

    model_config = ConfigDict(
        # Ignore unknown fields written by newer editors
        extra="ignore",
        # Strip whitespace from string fields
        str_strip_whitespace=True,
        # Use enum values in serialization
        use_enum_values=True,
        # Validate assignment after model creation
        validate_assignment=True,
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
