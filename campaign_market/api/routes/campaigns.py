from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campaign_market.api import deps
from campaign_market.api.errors import unwrap
from campaign_market.db.session import get_db
from campaign_market.schemas.campaigns import (
    CampaignDeleted,
    CampaignRead,
    CampaignStatusRead,
    CampaignStatusUpdate,
    CampaignWrite,
)
from campaign_market.schemas.common import ErrorResponse
from campaign_market.schemas.selection import (
    CampaignApplicants,
    DecisionResult,
    InfluencerDecisionRequest,
)
from campaign_market.services import campaign_service, selection_service
from campaign_market.services.audit_service import log_action

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}

router = APIRouter(prefix="/campaigns", tags=["campaigns"], responses=ERROR_RESPONSES)


@router.post("", response_model=CampaignRead, status_code=status.HTTP_201_CREATED)
def create_campaign_endpoint(
    payload: CampaignWrite,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
    context: deps.RequestContext = Depends(deps.get_request_context),
):
    """
    광고주가 체험단을 등록한다. 등록 직후 상태는 모집중(RECRUITING).
    """
    campaign = unwrap(campaign_service.create_campaign(db, current_user.id, payload))
    _audit(db, current_user, context, "campaign.create", campaign.id)
    return campaign


@router.patch("/{campaign_id}", response_model=CampaignRead)
def update_campaign_endpoint(
    campaign_id: int,
    payload: CampaignWrite,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
    context: deps.RequestContext = Depends(deps.get_request_context),
):
    """
    모집중 상태의 체험단 정보를 수정한다.
    """
    campaign = unwrap(campaign_service.update_campaign(db, current_user.id, campaign_id, payload))
    _audit(db, current_user, context, "campaign.update", campaign_id)
    return campaign


@router.delete("/{campaign_id}", response_model=CampaignDeleted)
def delete_campaign_endpoint(
    campaign_id: int,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
    context: deps.RequestContext = Depends(deps.get_request_context),
):
    """
    체험단과 소속 지원서를 함께 삭제한다.
    """
    deleted = unwrap(campaign_service.delete_campaign(db, current_user.id, campaign_id))
    _audit(db, current_user, context, "campaign.delete", campaign_id)
    return deleted


@router.patch("/{campaign_id}/status", response_model=CampaignStatusRead)
def update_campaign_status_endpoint(
    campaign_id: int,
    payload: CampaignStatusUpdate,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
    context: deps.RequestContext = Depends(deps.get_request_context),
):
    """
    모집종료(CLOSED) 또는 조기종료(TERMINATED_EARLY)로 상태를 변경한다.
    """
    result = unwrap(
        campaign_service.transition_status(
            db, current_user.id, campaign_id, payload.status, payload.reason
        )
    )
    _audit(db, current_user, context, "campaign.status", campaign_id)
    return result


@router.get("/{campaign_id}/applicants", response_model=CampaignApplicants)
def list_applicants_endpoint(
    campaign_id: int,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
):
    return unwrap(selection_service.get_campaign_applicants(db, current_user.id, campaign_id))


@router.post("/{campaign_id}/selection", response_model=DecisionResult)
def select_influencers_endpoint(
    campaign_id: int,
    payload: InfluencerDecisionRequest,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
    context: deps.RequestContext = Depends(deps.get_request_context),
):
    """
    모집종료된 체험단의 지원자를 선정한다. 모집 인원이 채워지면 선정완료로 전환된다.
    """
    result = unwrap(
        selection_service.select_influencers(db, current_user.id, campaign_id, payload.influencer_ids)
    )
    _audit(db, current_user, context, "campaign.selection", campaign_id)
    return result


@router.post("/{campaign_id}/rejection", response_model=DecisionResult)
def reject_influencers_endpoint(
    campaign_id: int,
    payload: InfluencerDecisionRequest,
    db: Session = Depends(get_db),
    current_user: deps.AuthenticatedUser = Depends(deps.get_current_user),
    context: deps.RequestContext = Depends(deps.get_request_context),
):
    result = unwrap(
        selection_service.reject_influencers(db, current_user.id, campaign_id, payload.influencer_ids)
    )
    _audit(db, current_user, context, "campaign.rejection", campaign_id)
    return result


def _audit(
    db: Session,
    current_user: deps.AuthenticatedUser,
    context: deps.RequestContext,
    action: str,
    campaign_id: int,
) -> None:
    log_action(
        db,
        user_id=current_user.id,
        action=action,
        target_type="campaign",
        target_id=str(campaign_id),
        ip_address=context.ip_address,
        user_agent=context.user_agent,
        commit=True,
    )
