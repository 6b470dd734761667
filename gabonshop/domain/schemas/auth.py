"""Pydantic schemas for accounts, sessions and the current user."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RegisterRequest(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    password: str = Field(min_length=6)
    password_confirm: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Le nom complet est obligatoire")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Adresse email invalide")
        return value

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password_confirm is not None and self.password_confirm != self.password:
            raise ValueError("Les mots de passe ne correspondent pas")
        return self


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthSession(BaseModel):
    """What the auth gateway knows about a signed-in account."""
    uid: str
    email: str
    display_name: Optional[str] = None
    token: Optional[str] = None


class CurrentUser(BaseModel):
    """Auth session merged with the profile document."""
    id: str
    uid: str
    name: str = ""
    email: str = ""
    phone: str = ""
    role: str = "user"
    created_at: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserRead(BaseModel):
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    role: str = "user"
    created_at: Optional[int] = None
    whatsapp: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: CurrentUser
