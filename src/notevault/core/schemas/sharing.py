"""
Note sharing schemas.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class ShareRequest(BaseModel):
    """Grant read access to one account, named by id or by email."""

    user_id: Optional[uuid.UUID] = Field(default=None, description="Account ID to share with")
    email: Optional[EmailStr] = Field(default=None, description="Email of the account to share with")

    @model_validator(mode="after")
    def exactly_one_grantee(self) -> "ShareRequest":
        if (self.user_id is None) == (self.email is None):
            raise ValueError("Provide exactly one of user_id or email")
        return self

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "b@x.com"}}
    )
