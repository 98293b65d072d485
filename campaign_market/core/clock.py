from __future__ import annotations

from datetime import date, datetime, time, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from campaign_market.core.config import settings


@lru_cache(maxsize=1)
def _business_zone() -> ZoneInfo:
    return ZoneInfo(settings.business_timezone)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def business_today(now: datetime | None = None) -> date:
    """서비스 기준 시간대(BUSINESS_TIMEZONE)의 오늘 날짜."""
    current = now or utcnow()
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(_business_zone()).date()


def month_window_utc(now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    기준 시간대의 달력 월 경계를 UTC 구간 [start, end) 으로 돌려준다.
    생성 한도 계산에 사용한다.
    """
    today = business_today(now)
    zone = _business_zone()
    start_local = datetime.combine(today.replace(day=1), time.min, tzinfo=zone)
    if today.month == 12:
        next_month = date(today.year + 1, 1, 1)
    else:
        next_month = date(today.year, today.month + 1, 1)
    end_local = datetime.combine(next_month, time.min, tzinfo=zone)
    return start_local.astimezone(timezone.utc), end_local.astimezone(timezone.utc)
