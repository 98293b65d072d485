"""
지원자 선정/반려 처리.

선정은 모집종료(CLOSED) 상태에서만 가능하며, 모집 인원을 넘기지 않도록
"SUBMITTED 일 때만 변경" 조건부 UPDATE 의 반영 행 수를 기준으로 계산한다.
모집 인원이 모두 채워지면 캠페인을 선정완료(SELECTION_COMPLETE)로 올린다.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campaign_market.core.clock import utcnow
from campaign_market.core.lifecycle import ApplicationStatus, CampaignStatus, can_transition
from campaign_market.core.result import Err, ErrorCode, Ok, Result, fail, internal_error
from campaign_market.models.domain import Campaign
from campaign_market.schemas.selection import (
    ApplicantItem,
    CampaignApplicants,
    CampaignSummary,
    DecisionResult,
)
from campaign_market.services.access_guard import abort, load_owned_campaign
from campaign_market.stores import applications as application_store
from campaign_market.stores import campaigns as campaign_store

logger = logging.getLogger(__name__)

UNKNOWN_INFLUENCER_NAME = "알 수 없음"


def select_influencers(
    db: Session,
    owner_id: str,
    campaign_id: int,
    influencer_ids: Iterable[str],
    *,
    now: datetime | None = None,
) -> Result[DecisionResult]:
    return _decide(db, owner_id, campaign_id, influencer_ids, ApplicationStatus.SELECTED, now=now)


def reject_influencers(
    db: Session,
    owner_id: str,
    campaign_id: int,
    influencer_ids: Iterable[str],
    *,
    now: datetime | None = None,
) -> Result[DecisionResult]:
    return _decide(db, owner_id, campaign_id, influencer_ids, ApplicationStatus.REJECTED, now=now)


def get_campaign_applicants(db: Session, owner_id: str, campaign_id: int) -> Result[CampaignApplicants]:
    try:
        loaded = load_owned_campaign(db, owner_id, campaign_id)
        if isinstance(loaded, Err):
            return loaded
        campaign = loaded.value
        rows = application_store.list_applicants(db, campaign_id)
        selected_count = application_store.count_with_status(
            db, campaign_id, ApplicationStatus.SELECTED
        )
    except SQLAlchemyError:
        logger.exception("지원자 조회 실패 (actor=%s, campaign_id=%s)", owner_id, campaign_id)
        return internal_error()

    applicants = [
        ApplicantItem(
            id=application.id,
            influencer_id=application.influencer_id,
            influencer_name=user.full_name if user else UNKNOWN_INFLUENCER_NAME,
            sns_channel_name=profile.sns_channel_name if profile else "",
            follower_count=profile.follower_count if profile else 0,
            motivation=application.motivation,
            visit_date=application.visit_date,
            status=application.status,
            applied_at=application.applied_at,
        )
        for application, profile, user in rows
    ]
    return Ok(
        CampaignApplicants(
            applicants=applicants,
            campaign=CampaignSummary(
                id=campaign.id,
                title=campaign.title,
                status=campaign.status,
                recruitment_count=campaign.recruitment_count,
                selected_count=selected_count,
            ),
        )
    )


def _decide(
    db: Session,
    owner_id: str,
    campaign_id: int,
    influencer_ids: Iterable[str],
    target: ApplicationStatus,
    *,
    now: datetime | None,
) -> Result[DecisionResult]:
    unique_ids = _dedupe(influencer_ids)
    if not unique_ids:
        return fail(ErrorCode.INVALID_INPUT, "최소 1명 이상 선택해야 합니다.")

    now = now or utcnow()
    try:
        loaded = load_owned_campaign(db, owner_id, campaign_id, for_update=True)
        if isinstance(loaded, Err):
            return abort(db, loaded)
        campaign = loaded.value

        if campaign.status != CampaignStatus.CLOSED.value:
            return abort(
                db,
                fail(
                    ErrorCode.CAMPAIGN_NOT_CLOSED,
                    "모집종료 상태에서만 선정/반려할 수 있습니다.",
                    {"current_status": campaign.status},
                ),
            )

        applications = application_store.find_for_influencers(db, campaign_id, unique_ids)
        if len(applications) != len(unique_ids):
            found = {application.influencer_id for application in applications}
            return abort(
                db,
                fail(
                    ErrorCode.APPLICANTS_NOT_FOUND,
                    "지원하지 않은 인플루언서가 포함되어 있습니다.",
                    {"missing": [i for i in unique_ids if i not in found]},
                ),
            )

        processed = [
            application.influencer_id
            for application in applications
            if ApplicationStatus(application.status).is_terminal
        ]
        if processed:
            return abort(
                db,
                fail(
                    ErrorCode.ALREADY_PROCESSED,
                    "이미 선정 또는 반려된 지원자가 포함되어 있습니다.",
                    {"processed": processed},
                ),
            )

        if target is ApplicationStatus.SELECTED:
            result = _apply_selection(db, owner_id, campaign, unique_ids, now=now)
        else:
            result = _apply_rejection(db, owner_id, campaign, unique_ids, now=now)
        if isinstance(result, Err):
            return abort(db, result)

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "지원자 %s 처리 실패 (actor=%s, campaign_id=%s)", target.value, owner_id, campaign_id
        )
        return internal_error()

    return result


def _apply_selection(
    db: Session,
    owner_id: str,
    campaign: Campaign,
    influencer_ids: list[str],
    *,
    now: datetime,
) -> Result[DecisionResult]:
    capacity = campaign.recruitment_count
    already_selected = application_store.count_with_status(db, campaign.id, ApplicationStatus.SELECTED)
    if already_selected + len(influencer_ids) > capacity:
        return fail(
            ErrorCode.CAPACITY_EXCEEDED,
            "모집 인원을 초과하여 선정할 수 없습니다.",
            {
                "recruitment_count": capacity,
                "already_selected": already_selected,
                "requested": len(influencer_ids),
            },
        )

    updated = application_store.decide_if_submitted(
        db, campaign.id, influencer_ids, ApplicationStatus.SELECTED, now=now
    )
    if updated == 0:
        logger.warning(
            "선정 대상이 이미 처리되어 반영된 행이 없음 (actor=%s, campaign_id=%s)",
            owner_id,
            campaign.id,
        )
        return fail(ErrorCode.NO_OP, "선정된 지원자가 없습니다. 이미 다른 요청에서 처리되었습니다.")

    # 조건부 UPDATE 이후의 실제 선정 수로 한 번 더 확인한다.
    selected_total = application_store.count_with_status(db, campaign.id, ApplicationStatus.SELECTED)
    if selected_total > capacity:
        logger.warning(
            "동시 선정으로 모집 인원 초과, 롤백 (actor=%s, campaign_id=%s, selected=%s, capacity=%s)",
            owner_id,
            campaign.id,
            selected_total,
            capacity,
        )
        return fail(
            ErrorCode.CAPACITY_EXCEEDED,
            "모집 인원을 초과하여 선정할 수 없습니다.",
            {"recruitment_count": capacity, "already_selected": selected_total - updated},
        )

    status = CampaignStatus.CLOSED
    if already_selected + updated >= capacity and can_transition(
        campaign.status, CampaignStatus.SELECTION_COMPLETE
    ):
        promoted = campaign_store.update_if_status(
            db,
            campaign.id,
            CampaignStatus.CLOSED,
            {"status": CampaignStatus.SELECTION_COMPLETE.value, "updated_at": now},
        )
        if promoted:
            status = CampaignStatus.SELECTION_COMPLETE
            campaign_store.add_status_log(
                db,
                campaign.id,
                CampaignStatus.SELECTION_COMPLETE,
                actor_id=owner_id,
                now=now,
                detail=f"selected={already_selected + updated}/{capacity}",
            )
            logger.info(
                "선정완료 전환 (actor=%s, campaign_id=%s, selected=%s)",
                owner_id,
                campaign.id,
                already_selected + updated,
            )

    logger.info(
        "지원자 선정 (actor=%s, campaign_id=%s, updated=%s)", owner_id, campaign.id, updated
    )
    return Ok(DecisionResult(campaign_id=campaign.id, updated=updated, campaign_status=status.value))


def _apply_rejection(
    db: Session,
    owner_id: str,
    campaign: Campaign,
    influencer_ids: list[str],
    *,
    now: datetime,
) -> Result[DecisionResult]:
    updated = application_store.decide_if_submitted(
        db, campaign.id, influencer_ids, ApplicationStatus.REJECTED, now=now
    )
    if updated == 0:
        logger.warning(
            "반려 대상이 이미 처리되어 반영된 행이 없음 (actor=%s, campaign_id=%s)",
            owner_id,
            campaign.id,
        )
        return fail(ErrorCode.NO_OP, "반려된 지원자가 없습니다. 이미 다른 요청에서 처리되었습니다.")

    logger.info(
        "지원자 반려 (actor=%s, campaign_id=%s, updated=%s)", owner_id, campaign.id, updated
    )
    return Ok(
        DecisionResult(campaign_id=campaign.id, updated=updated, campaign_status=campaign.status)
    )


def _dedupe(influencer_ids: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for influencer_id in influencer_ids:
        if influencer_id:
            seen.setdefault(influencer_id, None)
    return list(seen)
