"""Base model for Appwrite documents."""

from typing import Any, Dict, Optional
from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field

# Server-side bookkeeping attributes that never leave the API.
SYSTEM_FIELDS = ("$permissions", "$databaseId", "$collectionId", "$sequence", "$tenant")


def without_system_fields(document: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a document without permission and storage attributes (``$id`` and timestamps are kept)."""
    return {key: value for key, value in document.items() if key not in SYSTEM_FIELDS}


class BaseModel(PydanticBaseModel):
    """Base model with the system attributes every Appwrite document carries."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, alias="$id")

    def to_appwrite(self) -> Dict[str, Any]:
        """Convert model to the attribute payload of a document (system fields excluded)."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    @classmethod
    def from_appwrite(cls, data: Dict[str, Any]):
        """Create model instance from an Appwrite document."""
        if not data:
            return None
        return cls.model_validate(data)
