from __future__ import annotations

import re
from datetime import date
from typing import Any, Mapping

BUSINESS_NUMBER_PATTERN = re.compile(r"^\d{3}-\d{2}-\d{5}$")
BUSINESS_NUMBER_WEIGHTS = (1, 3, 7, 1, 3, 7, 1, 3, 5)
MOBILE_PATTERN = re.compile(r"^010-\d{4}-\d{4}$")
PHONE_PATTERN = re.compile(r"^0\d{1,2}-\d{3,4}-\d{4}$")

RECRUITMENT_COUNT_MIN = 1
RECRUITMENT_COUNT_MAX = 1000
MOTIVATION_MIN = 10
MOTIVATION_MAX = 1000

# 필드명 -> (표시명, 최소 길이, 최대 길이)
CAMPAIGN_TEXT_FIELDS: dict[str, tuple[str, int, int]] = {
    "title": ("제목", 1, 100),
    "description": ("설명", 1, 2000),
    "mission": ("미션", 1, 1000),
    "benefits": ("혜택", 1, 1000),
    "location": ("주소", 1, 255),
}


def validate_string_length(
    value: str | None,
    field_name: str,
    min_length: int = 1,
    max_length: int = 255,
) -> str | None:
    """오류 메시지를 돌려주고, 통과하면 None."""
    if not value or not isinstance(value, str):
        return f"{field_name}을(를) 입력해주세요."
    trimmed = value.strip()
    if len(trimmed) < min_length:
        return f"{field_name}은(는) 최소 {min_length}자 이상 입력해주세요."
    if len(trimmed) > max_length:
        return f"{field_name}은(는) 최대 {max_length}자까지 입력 가능합니다."
    return None


def normalize_business_number(value: str | None) -> str | None:
    if not value:
        return None
    digits = re.sub(r"\D", "", value)
    if len(digits) != 10:
        return value.strip()
    return f"{digits[:3]}-{digits[3:5]}-{digits[5:]}"


def validate_business_number(value: str | None) -> str | None:
    if not value:
        return "사업자등록번호를 입력해주세요."
    trimmed = value.strip()
    if not BUSINESS_NUMBER_PATTERN.match(trimmed):
        return "사업자등록번호 형식이 올바르지 않습니다. (XXX-XX-XXXXX)"

    digits = [int(ch) for ch in trimmed.replace("-", "")]
    total = sum(d * w for d, w in zip(digits[:9], BUSINESS_NUMBER_WEIGHTS))
    checksum = (10 - (total % 10)) % 10
    if checksum != digits[9]:
        return "올바른 사업자등록번호가 아닙니다."
    return None


def validate_phone(phone: str | None) -> str | None:
    if not phone:
        return "전화번호를 입력해주세요."
    trimmed = phone.strip()
    if not MOBILE_PATTERN.match(trimmed) and not PHONE_PATTERN.match(trimmed):
        return "전화번호 형식이 올바르지 않습니다. (XXX-XXXX-XXXX 또는 XX-XXX-XXXX)"
    return None


def validate_date_order(start_date: date | None, end_date: date | None) -> str | None:
    if start_date is None:
        return "시작일이 올바르지 않습니다."
    if end_date is None:
        return "종료일이 올바르지 않습니다."
    if end_date <= start_date:
        return "종료일은 시작일 이후 날짜여야 합니다."
    return None


def validate_visit_date(visit_date: date, *, today: date, end_date: date) -> str | None:
    if visit_date < today:
        return "방문 예정일은 오늘 이후 날짜만 선택 가능합니다."
    if visit_date > end_date:
        return "방문 예정일은 모집 마감일 이전이어야 합니다."
    return None


def campaign_field_errors(fields: Mapping[str, Any]) -> dict[str, str]:
    """
    캠페인 생성/수정이 공유하는 단일 검증 규칙.
    필드별 오류 메시지를 모아 돌려준다.
    """
    errors: dict[str, str] = {}
    for name, (label, min_length, max_length) in CAMPAIGN_TEXT_FIELDS.items():
        message = validate_string_length(fields.get(name), label, min_length, max_length)
        if message:
            errors[name] = message

    count = fields.get("recruitment_count")
    if not isinstance(count, int) or isinstance(count, bool):
        errors["recruitment_count"] = "모집 인원을 입력해주세요."
    elif count < RECRUITMENT_COUNT_MIN:
        errors["recruitment_count"] = "모집 인원은 최소 1명 이상이어야 합니다."
    elif count > RECRUITMENT_COUNT_MAX:
        errors["recruitment_count"] = "모집 인원은 최대 1000명까지 가능합니다."

    message = validate_date_order(fields.get("start_date"), fields.get("end_date"))
    if message:
        key = "start_date" if fields.get("start_date") is None else "end_date"
        errors[key] = message
    return errors
