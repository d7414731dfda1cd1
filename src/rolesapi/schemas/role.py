from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RoleIn(BaseModel):
    """Payload accepted when creating or replacing a role."""

    name: str = Field(max_length=100, description="Unique role name, e.g. Admin")
    description: Optional[str] = Field(
        default=None, max_length=500, description="What the role is for"
    )


class Role(RoleIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
