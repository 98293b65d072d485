from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campaign_market.core.clock import business_today, month_window_utc, utcnow
from campaign_market.core.config import settings
from campaign_market.core.lifecycle import (
    OWNER_TRANSITION_TARGETS,
    CampaignStatus,
    can_transition,
    is_editable,
)
from campaign_market.core.result import Err, ErrorCode, Ok, Result, fail, internal_error
from campaign_market.core.validation import campaign_field_errors
from campaign_market.schemas.campaigns import (
    AdvertiserCampaignItem,
    AdvertiserCampaignList,
    CampaignDeleted,
    CampaignRead,
    CampaignStatusRead,
    CampaignWrite,
)
from campaign_market.schemas.common import PageQuery, Pagination
from campaign_market.services.access_guard import abort, load_owned_campaign
from campaign_market.services.profile_service import has_advertiser_profile
from campaign_market.stores import campaigns as campaign_store

logger = logging.getLogger(__name__)

OWNER_PROFILE_MESSAGE = "광고주 프로필이 필요합니다."


def create_campaign(
    db: Session,
    owner_id: str,
    payload: CampaignWrite,
    *,
    now: datetime | None = None,
) -> Result[CampaignRead]:
    fields = _normalized_fields(payload)
    errors = campaign_field_errors(fields)
    if errors:
        return fail(ErrorCode.INVALID_INPUT, "입력값이 올바르지 않습니다.", errors)

    now = now or utcnow()
    try:
        if campaign_store.lock_advertiser_profile(db, owner_id) is None:
            return abort(db, fail(ErrorCode.OWNER_PROFILE_REQUIRED, OWNER_PROFILE_MESSAGE))

        month_start, month_end = month_window_utc(now)
        created = campaign_store.count_created_between(db, owner_id, month_start, month_end)
        if created >= settings.monthly_campaign_limit:
            return abort(
                db,
                fail(
                    ErrorCode.CREATION_LIMIT_EXCEEDED,
                    f"체험단은 한 달에 최대 {settings.monthly_campaign_limit}개까지 생성할 수 있습니다.",
                    {"created_this_month": created, "limit": settings.monthly_campaign_limit},
                ),
            )

        campaign = campaign_store.insert_campaign(db, owner_id, fields, now=now)
        campaign_store.add_status_log(
            db, campaign.id, CampaignStatus.RECRUITING, actor_id=owner_id, now=now, detail="created"
        )
        db.commit()
        db.refresh(campaign)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("체험단 생성 실패 (actor=%s)", owner_id)
        return internal_error()

    logger.info("체험단 생성 (actor=%s, campaign_id=%s)", owner_id, campaign.id)
    return Ok(CampaignRead.model_validate(campaign))


def update_campaign(
    db: Session,
    owner_id: str,
    campaign_id: int,
    payload: CampaignWrite,
    *,
    now: datetime | None = None,
) -> Result[CampaignRead]:
    now = now or utcnow()
    try:
        loaded = load_owned_campaign(db, owner_id, campaign_id, for_update=True)
        if isinstance(loaded, Err):
            return abort(db, loaded)
        campaign = loaded.value
        if not is_editable(campaign.status):
            return abort(db, _locked_error(campaign.status))

        fields = _normalized_fields(payload)
        errors = campaign_field_errors(fields)
        if errors:
            return abort(db, fail(ErrorCode.INVALID_INPUT, "입력값이 올바르지 않습니다.", errors))

        updated = campaign_store.update_if_status(
            db, campaign_id, CampaignStatus.RECRUITING, {**fields, "updated_at": now}
        )
        if updated == 0:
            # 조회 이후 다른 요청이 모집을 종료한 경우
            return abort(db, _locked_error(None))
        db.commit()
        db.refresh(campaign)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("체험단 수정 실패 (actor=%s, campaign_id=%s)", owner_id, campaign_id)
        return internal_error()

    return Ok(CampaignRead.model_validate(campaign))


def delete_campaign(db: Session, owner_id: str, campaign_id: int) -> Result[CampaignDeleted]:
    try:
        loaded = load_owned_campaign(db, owner_id, campaign_id, for_update=True)
        if isinstance(loaded, Err):
            return abort(db, loaded)

        deleted = campaign_store.delete_campaign(db, campaign_id)
        if deleted == 0:
            return abort(db, fail(ErrorCode.NOT_FOUND, "체험단을 찾을 수 없습니다."))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("체험단 삭제 실패 (actor=%s, campaign_id=%s)", owner_id, campaign_id)
        return internal_error()

    logger.info("체험단 삭제 (actor=%s, campaign_id=%s)", owner_id, campaign_id)
    return Ok(CampaignDeleted(id=campaign_id))


def transition_status(
    db: Session,
    owner_id: str,
    campaign_id: int,
    target: CampaignStatus | str,
    reason: str | None = None,
    *,
    now: datetime | None = None,
) -> Result[CampaignStatusRead]:
    """
    모집종료(CLOSED) 또는 조기종료(TERMINATED_EARLY) 전환.
    두 전환 모두 모집중(RECRUITING) 상태에서만 가능하다.
    """
    try:
        target = CampaignStatus(target)
    except ValueError:
        return fail(ErrorCode.INVALID_TRANSITION, "알 수 없는 상태입니다.", {"target": str(target)})
    if target not in OWNER_TRANSITION_TARGETS:
        return fail(
            ErrorCode.INVALID_TRANSITION,
            "모집종료 또는 조기종료로만 변경할 수 있습니다.",
            {"target": target.value},
        )

    now = now or utcnow()
    today = business_today(now)
    try:
        loaded = load_owned_campaign(db, owner_id, campaign_id, for_update=True)
        if isinstance(loaded, Err):
            return abort(db, loaded)
        campaign = loaded.value

        if not can_transition(campaign.status, target):
            return abort(
                db,
                fail(
                    ErrorCode.INVALID_TRANSITION,
                    "모집 중인 체험단만 종료할 수 있습니다.",
                    {"current_status": campaign.status, "target": target.value},
                ),
            )
        if target is CampaignStatus.TERMINATED_EARLY and today < campaign.start_date:
            return abort(
                db,
                fail(
                    ErrorCode.NOT_STARTED,
                    "시작되지 않은 체험단은 조기종료할 수 없습니다.",
                    {"start_date": campaign.start_date.isoformat(), "today": today.isoformat()},
                ),
            )

        values: dict = {"status": target.value, "updated_at": now}
        if target is CampaignStatus.TERMINATED_EARLY:
            values["early_termination_date"] = today
            values["early_termination_reason"] = reason
        else:
            values["early_termination_date"] = None
            values["early_termination_reason"] = None

        updated = campaign_store.update_if_status(db, campaign_id, CampaignStatus.RECRUITING, values)
        if updated == 0:
            logger.warning(
                "상태 변경 경합으로 반영되지 않음 (actor=%s, campaign_id=%s, target=%s)",
                owner_id,
                campaign_id,
                target.value,
            )
            return abort(db, fail(ErrorCode.NO_OP, "다른 요청에 의해 이미 상태가 변경되었습니다."))

        campaign_store.add_status_log(db, campaign_id, target, actor_id=owner_id, now=now, detail=reason)
        db.commit()
        db.refresh(campaign)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("체험단 상태 변경 실패 (actor=%s, campaign_id=%s)", owner_id, campaign_id)
        return internal_error()

    logger.info(
        "체험단 상태 변경 (actor=%s, campaign_id=%s, status=%s)", owner_id, campaign_id, target.value
    )
    return Ok(CampaignStatusRead.model_validate(campaign))


def list_advertiser_campaigns(
    db: Session,
    owner_id: str,
    query: PageQuery,
) -> Result[AdvertiserCampaignList]:
    try:
        if not has_advertiser_profile(db, owner_id):
            return fail(ErrorCode.OWNER_PROFILE_REQUIRED, OWNER_PROFILE_MESSAGE)
        rows, total = campaign_store.list_for_advertiser(
            db, owner_id, offset=query.offset, limit=query.limit
        )
    except SQLAlchemyError:
        logger.exception("광고주 체험단 목록 조회 실패 (actor=%s)", owner_id)
        return internal_error()

    items = [
        AdvertiserCampaignItem(
            id=campaign.id,
            title=campaign.title,
            status=campaign.status,
            recruitment_count=campaign.recruitment_count,
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            created_at=campaign.created_at,
            application_count=count,
        )
        for campaign, count in rows
    ]
    return Ok(
        AdvertiserCampaignList(
            campaigns=items,
            pagination=Pagination.build(page=query.page, limit=query.limit, total=total),
        )
    )


def get_advertiser_campaign(db: Session, owner_id: str, campaign_id: int) -> Result[CampaignRead]:
    try:
        loaded = load_owned_campaign(db, owner_id, campaign_id)
    except SQLAlchemyError:
        logger.exception("체험단 조회 실패 (actor=%s, campaign_id=%s)", owner_id, campaign_id)
        return internal_error()
    if isinstance(loaded, Err):
        return loaded
    return Ok(CampaignRead.model_validate(loaded.value))


def _normalized_fields(payload: CampaignWrite) -> dict:
    fields = payload.model_dump()
    for name in ("title", "description", "mission", "benefits", "location"):
        if isinstance(fields.get(name), str):
            fields[name] = fields[name].strip()
    return fields


def _locked_error(status: str | None) -> Err:
    return fail(
        ErrorCode.LOCKED,
        "모집 중인 체험단만 수정할 수 있습니다.",
        {"current_status": status} if status else None,
    )
