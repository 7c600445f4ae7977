"""Pydantic schemas for users and sessions."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UserCredentialsBody(BaseModel):
    """Body for register and credential update."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., max_length=255)


class LoginBody(BaseModel):
    email: str
    password: str
    expires_in_seconds: int | None = None  # ignored above 3600


class UserOut(BaseModel):
    id: uuid.UUID
    email: str
    is_premium: bool
    created_at: datetime
    updated_at: datetime


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds until access token expires
    user: UserOut


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class WebhookData(BaseModel):
    user_id: str = ""


class WebhookBody(BaseModel):
    event: str
    data: WebhookData = WebhookData()
