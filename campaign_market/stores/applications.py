from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Literal

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from campaign_market.core.lifecycle import ApplicationStatus
from campaign_market.models.domain import (
    AdvertiserProfile,
    Application,
    Campaign,
    InfluencerProfile,
    User,
)


def exists(db: Session, campaign_id: int, influencer_id: str) -> bool:
    return db.scalar(
        select(Application.id)
        .where(
            Application.campaign_id == campaign_id,
            Application.influencer_id == influencer_id,
        )
        .limit(1)
    ) is not None


def insert_application(
    db: Session,
    *,
    campaign_id: int,
    influencer_id: str,
    motivation: str,
    visit_date: date,
    now: datetime,
) -> Application:
    application = Application(
        campaign_id=campaign_id,
        influencer_id=influencer_id,
        motivation=motivation,
        visit_date=visit_date,
        status=ApplicationStatus.SUBMITTED.value,
        applied_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(application)
    db.flush()
    return application


def find_for_influencers(db: Session, campaign_id: int, influencer_ids: Iterable[str]) -> list[Application]:
    ids = list(influencer_ids)
    if not ids:
        return []
    return list(
        db.scalars(
            select(Application).where(
                Application.campaign_id == campaign_id,
                Application.influencer_id.in_(ids),
            )
        )
    )


def count_with_status(db: Session, campaign_id: int, status: ApplicationStatus) -> int:
    return db.scalar(
        select(func.count(Application.id)).where(
            Application.campaign_id == campaign_id,
            Application.status == status.value,
        )
    ) or 0


def decide_if_submitted(
    db: Session,
    campaign_id: int,
    influencer_ids: Iterable[str],
    target: ApplicationStatus,
    *,
    now: datetime,
) -> int:
    """
    SUBMITTED 상태인 지원서만 target 으로 바꾼다.
    반환되는 행 수가 실제 처리 결과이며, 앞선 조회 결과보다 작을 수 있다.
    """
    result = db.execute(
        update(Application)
        .where(
            Application.campaign_id == campaign_id,
            Application.influencer_id.in_(list(influencer_ids)),
            Application.status == ApplicationStatus.SUBMITTED.value,
        )
        .values(status=target.value, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


def list_applicants(db: Session, campaign_id: int) -> list[tuple[Application, InfluencerProfile | None, User | None]]:
    rows = db.execute(
        select(Application, InfluencerProfile, User)
        .outerjoin(InfluencerProfile, InfluencerProfile.id == Application.influencer_id)
        .outerjoin(User, User.id == Application.influencer_id)
        .where(Application.campaign_id == campaign_id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
    ).all()
    return [(application, profile, user) for application, profile, user in rows]


def list_for_influencer(
    db: Session,
    influencer_id: str,
    *,
    status: ApplicationStatus | None,
    sort_by: Literal["applied_at", "updated_at"],
    sort_order: Literal["asc", "desc"],
    offset: int,
    limit: int,
) -> tuple[list[tuple[Application, Campaign, AdvertiserProfile | None]], int]:
    filters = [Application.influencer_id == influencer_id]
    if status is not None:
        filters.append(Application.status == status.value)

    sort_column = Application.updated_at if sort_by == "updated_at" else Application.applied_at
    ordering = sort_column.asc() if sort_order == "asc" else sort_column.desc()

    rows = db.execute(
        select(Application, Campaign, AdvertiserProfile)
        .join(Campaign, Campaign.id == Application.campaign_id)
        .outerjoin(AdvertiserProfile, AdvertiserProfile.id == Campaign.advertiser_id)
        .where(*filters)
        .order_by(ordering, Application.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()
    total = db.scalar(select(func.count(Application.id)).where(*filters)) or 0
    return [(application, campaign, advertiser) for application, campaign, advertiser in rows], total
