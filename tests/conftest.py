"""
Pytest configuration and shared fixtures.

테스트는 메모리 SQLite 하나를 공유하는 세션 위에서 돈다.
"""

import os
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Generator

# 애플리케이션 모듈을 import 하기 전에 테스트 환경을 고정한다.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BUSINESS_TIMEZONE"] = "Asia/Seoul"
os.environ["MONTHLY_CAMPAIGN_LIMIT"] = "10"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from campaign_market.core.clock import business_today
from campaign_market.core.lifecycle import ApplicationStatus, CampaignStatus
from campaign_market.core.roles import RoleCode
from campaign_market.core.security import create_access_token
from campaign_market.db.session import get_db
from campaign_market.main import app
from campaign_market.models import Base
from campaign_market.models.domain import (
    AdvertiserProfile,
    Application,
    Campaign,
    InfluencerProfile,
    User,
)


# --- Time Fixtures ---


@pytest.fixture
def today() -> date:
    """서비스 기준 시간대의 실제 오늘. API 테스트도 같은 날짜를 본다."""
    return business_today()


@pytest.fixture
def frozen_now(today: date) -> datetime:
    """오늘 12:00 KST (03:00 UTC)."""
    return datetime(today.year, today.month, today.day, 3, 0, tzinfo=timezone.utc)


# --- Database Fixtures ---


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# --- Factories ---


@pytest.fixture
def make_advertiser(db: Session) -> Callable[..., AdvertiserProfile]:
    counter = {"n": 0}

    def _make(user_id: str = "adv-1", company_name: str = "깜드래곤 식당") -> AdvertiserProfile:
        counter["n"] += 1
        db.add(User(id=user_id, full_name=f"광고주{counter['n']}", role=RoleCode.ADVERTISER.value))
        profile = AdvertiserProfile(
            id=user_id,
            company_name=company_name,
            business_number=f"000-00-{counter['n']:05d}",
        )
        db.add(profile)
        db.commit()
        return profile

    return _make


@pytest.fixture
def make_influencer(db: Session) -> Callable[..., InfluencerProfile]:
    def _make(user_id: str, full_name: str | None = None, followers: int = 1000) -> InfluencerProfile:
        db.add(User(id=user_id, full_name=full_name or user_id, role=RoleCode.INFLUENCER.value))
        profile = InfluencerProfile(
            id=user_id,
            sns_channel_name=f"{user_id}-channel",
            follower_count=followers,
        )
        db.add(profile)
        db.commit()
        return profile

    return _make


@pytest.fixture
def make_campaign(db: Session, today: date) -> Callable[..., Campaign]:
    def _make(advertiser_id: str = "adv-1", **overrides: Any) -> Campaign:
        values: dict[str, Any] = {
            "title": "신메뉴 체험단",
            "description": "새로 나온 메뉴를 먹어보고 후기를 남겨주세요.",
            "mission": "방문 후 사진 3장 이상 포함한 리뷰 작성",
            "benefits": "2인 식사권",
            "location": "서울시 강남구 테헤란로 1",
            "recruitment_count": 2,
            "start_date": today - timedelta(days=1),
            "end_date": today + timedelta(days=14),
            "status": CampaignStatus.RECRUITING.value,
        }
        if isinstance(overrides.get("status"), CampaignStatus):
            overrides["status"] = overrides["status"].value
        values.update(overrides)
        campaign = Campaign(advertiser_id=advertiser_id, **values)
        db.add(campaign)
        db.commit()
        db.refresh(campaign)
        return campaign

    return _make


@pytest.fixture
def make_application(db: Session, today: date) -> Callable[..., Application]:
    def _make(
        campaign: Campaign,
        influencer_id: str,
        status: ApplicationStatus = ApplicationStatus.SUBMITTED,
        **overrides: Any,
    ) -> Application:
        application = Application(
            campaign_id=campaign.id,
            influencer_id=influencer_id,
            motivation=overrides.pop("motivation", "꼭 방문해서 솔직한 후기를 남기겠습니다."),
            visit_date=overrides.pop("visit_date", today + timedelta(days=3)),
            status=status.value,
            **overrides,
        )
        db.add(application)
        db.commit()
        db.refresh(application)
        return application

    return _make


# --- Auth helpers ---


def auth_headers(user_id: str, role: RoleCode | None = None) -> dict[str, str]:
    token = create_access_token(user_id, role=role.value if role else None)
    return {"Authorization": f"Bearer {token.token}"}


@pytest.fixture
def advertiser_headers() -> dict[str, str]:
    return auth_headers("adv-1", RoleCode.ADVERTISER)


@pytest.fixture
def campaign_payload(today: date) -> dict[str, Any]:
    return {
        "title": "주말 브런치 체험단",
        "description": "브런치 세트를 체험하고 후기를 남겨주세요.",
        "mission": "인스타그램 게시물 1건",
        "benefits": "브런치 세트 2인",
        "location": "서울시 마포구 연남동 2",
        "recruitment_count": 3,
        "start_date": today.isoformat(),
        "end_date": (today + timedelta(days=10)).isoformat(),
    }
