"""
Pydantic schemas for user-related responses.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    terms: bool


class AuthResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: UserResponse
    access_token: str
    token_type: str = "bearer"
