# academy/schemas/auth.py
from pydantic import field_validator

from academy.schemas.base import CamelModel
from academy.schemas.user import UserPublic


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(CamelModel):
    sub: str | None = None


class Credentials(CamelModel):
    phone_number: str
    password: str

    @field_validator("phone_number", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class LoginRequest(Credentials):
    pass


class RegisterRequest(Credentials):
    pass


class AuthResponse(Token):
    user: UserPublic
