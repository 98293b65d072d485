from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field


class InfluencerDecisionRequest(BaseModel):
    influencer_ids: list[str] = Field(..., min_length=1, max_length=1000)


class DecisionResult(BaseModel):
    campaign_id: int
    updated: int
    campaign_status: str


class ApplicantItem(BaseModel):
    id: int
    influencer_id: str
    influencer_name: str
    sns_channel_name: str
    follower_count: int
    motivation: str
    visit_date: date
    status: str
    applied_at: datetime


class CampaignSummary(BaseModel):
    id: int
    title: str
    status: str
    recruitment_count: int
    selected_count: int


class CampaignApplicants(BaseModel):
    applicants: list[ApplicantItem]
    campaign: CampaignSummary
