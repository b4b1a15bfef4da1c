from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

PASSWORD_MIN_LENGTH = 6


class UserCreate(BaseModel):
    username: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=1024)

    @field_validator("username")
    @classmethod
    def _username_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username is required")
        return value


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=1024)


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class Profile(User):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    created_at: datetime = Field(alias="createdAt")


class AuthResponse(BaseModel):
    access_token: str = Field(alias="accessToken")
    user: User

    model_config = ConfigDict(populate_by_name=True)


class AccessToken(BaseModel):
    access_token: str = Field(alias="accessToken")

    model_config = ConfigDict(populate_by_name=True)


class Message(BaseModel):
    message: str
