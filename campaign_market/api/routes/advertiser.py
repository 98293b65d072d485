from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from campaign_market.api import deps
from campaign_market.api.errors import unwrap
from campaign_market.db.session import get_db
from campaign_market.schemas.campaigns import AdvertiserCampaignList, CampaignRead
from campaign_market.schemas.common import ErrorResponse, PageQuery
from campaign_market.services import campaign_service

router = APIRouter(
    prefix="/advertiser",
    tags=["advertiser"],
    responses={code: {"model": ErrorResponse} for code in (401, 403, 404)},
)


@router.get("/campaigns", response_model=AdvertiserCampaignList)
def list_my_campaigns_endpoint(
    query: Annotated[PageQuery, Query()],
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
):
    return unwrap(campaign_service.list_advertiser_campaigns(db, current_user.id, query))


@router.get("/campaigns/{campaign_id}", response_model=CampaignRead)
def get_my_campaign_endpoint(
    campaign_id: int,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
):
    return unwrap(campaign_service.get_advertiser_campaign(db, current_user.id, campaign_id))
