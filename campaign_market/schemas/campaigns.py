from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from campaign_market.schemas.common import Pagination


class CampaignWrite(BaseModel):
    """
    생성/수정 공용 입력. 길이·범위·날짜 순서 검증은 core.validation 한 곳에서 한다.
    """

    title: str
    description: str
    mission: str
    benefits: str
    location: str
    recruitment_count: int
    start_date: date
    end_date: date


class CampaignRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    advertiser_id: str
    title: str
    description: str
    mission: str
    benefits: str
    location: str
    recruitment_count: int
    start_date: date
    end_date: date
    status: str
    early_termination_date: date | None = None
    early_termination_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class CampaignStatusUpdate(BaseModel):
    status: Literal["CLOSED", "TERMINATED_EARLY"]
    reason: str | None = Field(default=None, max_length=500)


class CampaignStatusRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    status: str
    early_termination_date: date | None = None
    early_termination_reason: str | None = None


class CampaignDeleted(BaseModel):
    id: int


class AdvertiserCampaignItem(BaseModel):
    id: int
    title: str
    status: str
    recruitment_count: int
    start_date: date
    end_date: date
    created_at: datetime
    application_count: int


class AdvertiserCampaignList(BaseModel):
    campaigns: list[AdvertiserCampaignItem]
    pagination: Pagination
