from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from campaign_market.core.roles import RoleCode
from campaign_market.core.validation import (
    normalize_business_number,
    validate_business_number,
    validate_phone,
    validate_string_length,
)
from campaign_market.models.domain import AdvertiserProfile, InfluencerProfile, User
from campaign_market.schemas.profiles import (
    AdvertiserRegistration,
    InfluencerRegistration,
    UserRegistration,
)


def has_advertiser_profile(db: Session, user_id: str) -> bool:
    return db.scalar(select(AdvertiserProfile.id).where(AdvertiserProfile.id == user_id)) is not None


def has_influencer_profile(db: Session, user_id: str) -> bool:
    return db.scalar(select(InfluencerProfile.id).where(InfluencerProfile.id == user_id)) is not None


def register_advertiser(db: Session, payload: AdvertiserRegistration) -> AdvertiserProfile:
    """로컬 개발용 광고주 등록. 운영 환경의 프로필 관리는 별도 서비스가 담당한다."""
    _ensure_valid(validate_string_length(payload.company_name, "업체명", 1, 100))
    business_number = normalize_business_number(payload.business_number)
    _ensure_valid(validate_business_number(business_number))
    if db.scalar(
        select(AdvertiserProfile.id).where(AdvertiserProfile.business_number == business_number)
    ):
        raise ValueError("이미 등록된 사업자등록번호입니다.")
    if has_advertiser_profile(db, payload.id):
        raise ValueError("이미 광고주 프로필이 등록되어 있습니다.")

    _upsert_user(db, payload, RoleCode.ADVERTISER)
    profile = AdvertiserProfile(
        id=payload.id,
        company_name=payload.company_name.strip(),
        business_number=business_number,
        location=payload.location,
        category=payload.category,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def register_influencer(db: Session, payload: InfluencerRegistration) -> InfluencerProfile:
    _ensure_valid(validate_string_length(payload.sns_channel_name, "채널명", 1, 100))
    if has_influencer_profile(db, payload.id):
        raise ValueError("이미 인플루언서 프로필이 등록되어 있습니다.")

    _upsert_user(db, payload, RoleCode.INFLUENCER)
    profile = InfluencerProfile(
        id=payload.id,
        sns_channel_name=payload.sns_channel_name.strip(),
        sns_channel_url=payload.sns_channel_url,
        follower_count=payload.follower_count,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def _upsert_user(db: Session, payload: UserRegistration, role: RoleCode) -> User:
    _ensure_valid(validate_string_length(payload.full_name, "이름", 1, 100))
    if payload.phone:
        _ensure_valid(validate_phone(payload.phone))

    user = db.get(User, payload.id)
    if user is None:
        user = User(id=payload.id, full_name=payload.full_name.strip())
        db.add(user)
    user.full_name = payload.full_name.strip()
    user.email = payload.email
    user.phone = payload.phone
    user.role = role.value
    db.flush()
    return user


def _ensure_valid(message: str | None) -> None:
    if message:
        raise ValueError(message)
