from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .role import Role


class UserIn(BaseModel):
    """Payload accepted when creating or replacing a user."""

    email: str = Field(max_length=255)
    phone_number: str = Field(max_length=50)
    role_id: int = Field(description="Identifier of an existing role")


class User(UserIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: Optional[Role] = Field(
        default=None, description="The resolved role this user holds"
    )
