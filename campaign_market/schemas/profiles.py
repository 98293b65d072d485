from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class UserRegistration(BaseModel):
    id: str = Field(..., min_length=1, max_length=36)
    full_name: str = Field(..., max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=20)


class AdvertiserRegistration(UserRegistration):
    company_name: str
    business_number: str
    location: str | None = None
    category: str | None = Field(default=None, max_length=50)


class InfluencerRegistration(UserRegistration):
    sns_channel_name: str
    sns_channel_url: str | None = Field(default=None, max_length=255)
    follower_count: int = Field(default=0, ge=0)
