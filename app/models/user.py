"""This file contains the user identity and profile models."""

from datetime import UTC, datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel as PydanticBaseModel, Field

from app.models.base import BaseModel
from app.utils.json_fields import parse_json_field


class UserIdentity(PydanticBaseModel):
    """Account as reported by the identity provider.

    Attributes:
        id: Appwrite account id
        email: Account email
        name: Display name
    """

    id: str
    email: str
    name: str = ""

    @classmethod
    def from_account(cls, account: Dict[str, Any]) -> "UserIdentity":
        return cls(id=account["$id"], email=account.get("email", ""), name=account.get("name", ""))


class UserProfile(BaseModel):
    """Profile document stored in the users collection.

    Attributes:
        account_id: Reference to the Appwrite account (one profile per account)
        email: Copy of the account email at registration
        name: Copy of the account name at registration
        preferences: JSON-encoded preferences object
    """

    account_id: str = Field(..., alias="accountId")
    email: str = ""
    name: str = ""
    preferences: Optional[str] = "{}"
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat(), alias="createdAt")
    updated_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat(), alias="updatedAt")

    def decoded_preferences(self) -> Dict[str, Any]:
        return parse_json_field(self.preferences, dict, "preferences")
