"""
로컬 개발용 사용자/프로필 등록 스크립트.

    python -m campaign_market.seed advertiser --id adv-1 --name 홍길동 \
        --company 깜드래곤 --business-number 220-81-62517
    python -m campaign_market.seed influencer --id inf-1 --name 김철수 --channel 맛집탐방

등록 후 해당 사용자로 호출할 수 있는 Bearer 토큰을 출력한다.
"""
from __future__ import annotations

import argparse
import logging
from datetime import timedelta

from campaign_market.core.roles import RoleCode
from campaign_market.core.security import create_access_token
from campaign_market.db.session import SessionLocal, engine
from campaign_market.models import Base
from campaign_market.schemas.profiles import AdvertiserRegistration, InfluencerRegistration
from campaign_market.services import profile_service

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="체험단 서비스 개발용 사용자 등록")
    parser.add_argument("--create-tables", action="store_true", help="테이블이 없으면 생성 (SQLite 개발용)")
    parser.add_argument("--expire-minutes", type=int, default=None, help="발급 토큰 유효 시간(분)")
    sub = parser.add_subparsers(dest="role", required=True)

    advertiser = sub.add_parser(RoleCode.ADVERTISER.value, help="광고주 등록")
    _add_user_arguments(advertiser)
    advertiser.add_argument("--company", required=True, help="업체명")
    advertiser.add_argument("--business-number", required=True, help="사업자등록번호 (XXX-XX-XXXXX)")
    advertiser.add_argument("--location")
    advertiser.add_argument("--category")

    influencer = sub.add_parser(RoleCode.INFLUENCER.value, help="인플루언서 등록")
    _add_user_arguments(influencer)
    influencer.add_argument("--channel", required=True, help="SNS 채널명")
    influencer.add_argument("--channel-url")
    influencer.add_argument("--followers", type=int, default=0)
    return parser


def _add_user_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--id", required=True, help="인증 서비스 사용자 ID")
    parser.add_argument("--name", required=True, help="이름")
    parser.add_argument("--email")
    parser.add_argument("--phone")


def register(args: argparse.Namespace) -> str:
    """프로필을 등록하고 사용자 ID 를 돌려준다."""
    with SessionLocal() as db:
        if args.role == RoleCode.ADVERTISER.value:
            profile = profile_service.register_advertiser(
                db,
                AdvertiserRegistration(
                    id=args.id,
                    full_name=args.name,
                    email=args.email,
                    phone=args.phone,
                    company_name=args.company,
                    business_number=args.business_number,
                    location=args.location,
                    category=args.category,
                ),
            )
        else:
            profile = profile_service.register_influencer(
                db,
                InfluencerRegistration(
                    id=args.id,
                    full_name=args.name,
                    email=args.email,
                    phone=args.phone,
                    sns_channel_name=args.channel,
                    sns_channel_url=args.channel_url,
                    follower_count=args.followers,
                ),
            )
        return profile.id


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    try:
        user_id = register(args)
    except ValueError as exc:
        logger.error("등록 실패: %s", exc)
        return 1

    expires = timedelta(minutes=args.expire_minutes) if args.expire_minutes else None
    token = create_access_token(user_id, role=args.role, expires_delta=expires)
    print("등록 완료:", args.role, user_id)
    print("만료:", token.expires_at.isoformat())
    print("Authorization: Bearer", token.token)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
