from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from campaign_market.core.clock import business_today, utcnow
from campaign_market.core.lifecycle import CampaignStatus
from campaign_market.core.result import ErrorCode, Ok, Result, fail, internal_error
from campaign_market.core.validation import (
    MOTIVATION_MAX,
    MOTIVATION_MIN,
    validate_string_length,
    validate_visit_date,
)
from campaign_market.schemas.applications import (
    ApplicationCreate,
    ApplicationRead,
    MyApplicationItem,
    MyApplicationList,
    MyApplicationsQuery,
)
from campaign_market.schemas.common import Pagination
from campaign_market.services.profile_service import has_influencer_profile
from campaign_market.stores import applications as application_store
from campaign_market.stores import campaigns as campaign_store

logger = logging.getLogger(__name__)

PROFILE_REQUIRED_MESSAGE = "인플루언서 프로필이 등록되지 않았습니다."
DUPLICATE_MESSAGE = "이미 이 체험단에 지원했습니다."


def apply_to_campaign(
    db: Session,
    influencer_id: str,
    payload: ApplicationCreate,
    *,
    now: datetime | None = None,
) -> Result[ApplicationRead]:
    motivation = payload.motivation.strip() if payload.motivation else payload.motivation
    message = validate_string_length(motivation, "각오 한마디", MOTIVATION_MIN, MOTIVATION_MAX)
    if message:
        return fail(ErrorCode.INVALID_INPUT, "입력값이 올바르지 않습니다.", {"motivation": message})

    now = now or utcnow()
    try:
        if not has_influencer_profile(db, influencer_id):
            return fail(ErrorCode.PROFILE_REQUIRED, PROFILE_REQUIRED_MESSAGE)

        campaign = campaign_store.get_campaign(db, payload.campaign_id)
        if campaign is None:
            return fail(ErrorCode.NOT_FOUND, "체험단을 찾을 수 없습니다.")
        if campaign.status != CampaignStatus.RECRUITING.value:
            return fail(
                ErrorCode.NOT_RECRUITING,
                "현재 모집 중인 체험단이 아닙니다.",
                {"current_status": campaign.status},
            )

        message = validate_visit_date(
            payload.visit_date, today=business_today(now), end_date=campaign.end_date
        )
        if message:
            return fail(ErrorCode.INVALID_VISIT_DATE, message, {"visit_date": message})

        if application_store.exists(db, campaign.id, influencer_id):
            return fail(ErrorCode.DUPLICATE_APPLICATION, DUPLICATE_MESSAGE)

        application = application_store.insert_application(
            db,
            campaign_id=campaign.id,
            influencer_id=influencer_id,
            motivation=motivation,
            visit_date=payload.visit_date,
            now=now,
        )
        db.commit()
        db.refresh(application)
    except IntegrityError:
        # 동시에 들어온 중복 지원은 유니크 제약에서 걸러진다.
        db.rollback()
        return fail(ErrorCode.DUPLICATE_APPLICATION, DUPLICATE_MESSAGE)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "지원서 제출 실패 (actor=%s, campaign_id=%s)", influencer_id, payload.campaign_id
        )
        return internal_error()

    logger.info(
        "체험단 지원 (actor=%s, campaign_id=%s, application_id=%s)",
        influencer_id,
        payload.campaign_id,
        application.id,
    )
    return Ok(ApplicationRead.model_validate(application))


def list_my_applications(
    db: Session,
    influencer_id: str,
    query: MyApplicationsQuery,
) -> Result[MyApplicationList]:
    try:
        if not has_influencer_profile(db, influencer_id):
            return fail(ErrorCode.PROFILE_REQUIRED, PROFILE_REQUIRED_MESSAGE)
        rows, total = application_store.list_for_influencer(
            db,
            influencer_id,
            status=query.status,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            offset=query.offset,
            limit=query.limit,
        )
    except SQLAlchemyError:
        logger.exception("내 지원 목록 조회 실패 (actor=%s)", influencer_id)
        return internal_error()

    items = [
        MyApplicationItem(
            id=application.id,
            campaign_id=campaign.id,
            campaign_title=campaign.title,
            company_name=advertiser.company_name if advertiser else "",
            status=application.status,
            visit_date=application.visit_date,
            applied_at=application.applied_at,
            updated_at=application.updated_at,
        )
        for application, campaign, advertiser in rows
    ]
    return Ok(
        MyApplicationList(
            applications=items,
            pagination=Pagination.build(page=query.page, limit=query.limit, total=total),
        )
    )
