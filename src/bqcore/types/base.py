"""Base model class for all driver core models with serialization support."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class DriverBaseModel(BaseModel):
    """Base model for all driver core models with built-in serialization.

    Provides common functionality for all models including:
    - Serialization to dictionary via to_dict()
    - Consistent configuration
    - Proper handling of nested models

    Enum fields keep their enum members so that helpers such as
    ``FilterOperator.is_ordering`` stay available; ``to_dict`` converts
    them to plain values.
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for serialization.

        Recursively converts nested DriverBaseModel instances to dictionaries.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        data = self.model_dump(by_alias=False, exclude_none=True)

        def convert_nested(obj):
            if isinstance(obj, DriverBaseModel):
                return obj.to_dict()
            elif isinstance(obj, dict):
                return {k: convert_nested(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert_nested(item) for item in obj]
            elif hasattr(obj, 'value'):  # Handle enums
                return obj.value
            return obj

        return convert_nested(data)
