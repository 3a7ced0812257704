from pydantic import Field

from .base import CamelModel


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6, max_length=50)


class TokenResponse(CamelModel):
    token: str


class MeResponse(CamelModel):
    user_id: str
    email: str
    name: str
    is_admin: bool


class ChangePasswordRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=320)
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=50)


class MessageResponse(CamelModel):
    message: str
    success: bool = True
