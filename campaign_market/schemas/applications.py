from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from campaign_market.core.lifecycle import ApplicationStatus
from campaign_market.schemas.common import PageQuery, Pagination


class ApplicationCreate(BaseModel):
    campaign_id: int = Field(..., ge=1)
    motivation: str
    visit_date: date


class ApplicationRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    campaign_id: int
    influencer_id: str
    motivation: str
    visit_date: date
    status: str
    applied_at: datetime
    updated_at: datetime


class MyApplicationsQuery(PageQuery):
    limit: int = Field(default=20, ge=1, le=100)
    status: ApplicationStatus | None = None
    sort_by: Literal["applied_at", "updated_at"] = "applied_at"
    sort_order: Literal["asc", "desc"] = "desc"


class MyApplicationItem(BaseModel):
    id: int
    campaign_id: int
    campaign_title: str
    company_name: str
    status: str
    visit_date: date
    applied_at: datetime
    updated_at: datetime


class MyApplicationList(BaseModel):
    applications: list[MyApplicationItem]
    pagination: Pagination
