"""
캠페인 저장소. 캠페인 상태의 유일한 기준이며, 상태 변경은 모두 조건부 UPDATE 로 처리한다.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from campaign_market.core.lifecycle import CampaignStatus
from campaign_market.models.domain import (
    AdvertiserProfile,
    Application,
    Campaign,
    CampaignStatusLog,
)

EDITABLE_FIELDS = (
    "title",
    "description",
    "mission",
    "benefits",
    "location",
    "recruitment_count",
    "start_date",
    "end_date",
)


def get_campaign(db: Session, campaign_id: int, *, for_update: bool = False) -> Campaign | None:
    stmt = select(Campaign).where(Campaign.id == campaign_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.scalar(stmt)


def count_created_between(db: Session, advertiser_id: str, start: datetime, end: datetime) -> int:
    return db.scalar(
        select(func.count(Campaign.id)).where(
            Campaign.advertiser_id == advertiser_id,
            Campaign.created_at >= start,
            Campaign.created_at < end,
        )
    ) or 0


def insert_campaign(db: Session, advertiser_id: str, fields: dict[str, Any], *, now: datetime) -> Campaign:
    campaign = Campaign(
        advertiser_id=advertiser_id,
        status=CampaignStatus.RECRUITING.value,
        created_at=now,
        updated_at=now,
        **{name: fields[name] for name in EDITABLE_FIELDS},
    )
    db.add(campaign)
    db.flush()
    return campaign


def update_if_status(
    db: Session,
    campaign_id: int,
    expected: CampaignStatus,
    values: dict[str, Any],
) -> int:
    """expected 상태일 때만 갱신하고 실제 반영된 행 수를 돌려준다."""
    result = db.execute(
        update(Campaign)
        .where(Campaign.id == campaign_id, Campaign.status == expected.value)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def delete_campaign(db: Session, campaign_id: int) -> int:
    # FK CASCADE 가 꺼진 DB(SQLite 등)에서도 동일하게 동작하도록 직접 삭제한다.
    db.execute(delete(Application).where(Application.campaign_id == campaign_id))
    db.execute(delete(CampaignStatusLog).where(CampaignStatusLog.campaign_id == campaign_id))
    result = db.execute(delete(Campaign).where(Campaign.id == campaign_id))
    return result.rowcount or 0


def add_status_log(
    db: Session,
    campaign_id: int,
    status: CampaignStatus,
    *,
    actor_id: str | None,
    now: datetime,
    detail: str | None = None,
) -> CampaignStatusLog:
    log = CampaignStatusLog(
        campaign_id=campaign_id,
        status=status.value,
        detail=detail,
        logged_by=actor_id,
        logged_at=now,
    )
    db.add(log)
    return log


def list_for_advertiser(
    db: Session,
    advertiser_id: str,
    *,
    offset: int,
    limit: int,
) -> tuple[list[tuple[Campaign, int]], int]:
    counts = (
        select(Application.campaign_id, func.count(Application.id).label("application_count"))
        .group_by(Application.campaign_id)
        .subquery()
    )
    rows = db.execute(
        select(Campaign, func.coalesce(counts.c.application_count, 0))
        .outerjoin(counts, counts.c.campaign_id == Campaign.id)
        .where(Campaign.advertiser_id == advertiser_id)
        .order_by(Campaign.created_at.desc(), Campaign.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    total = db.scalar(
        select(func.count(Campaign.id)).where(Campaign.advertiser_id == advertiser_id)
    ) or 0
    return [(campaign, int(count)) for campaign, count in rows], total


def lock_advertiser_profile(db: Session, advertiser_id: str) -> AdvertiserProfile | None:
    """같은 광고주의 동시 생성 요청을 직렬화한다."""
    return db.scalar(
        select(AdvertiserProfile).where(AdvertiserProfile.id == advertiser_id).with_for_update()
    )
