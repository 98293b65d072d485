from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt

from campaign_market.core.config import settings


@dataclass
class AccessToken:
    token: str
    expires_at: datetime
    jti: str


@dataclass
class TokenPayload:
    subject: str
    role: str | None
    expires_at: datetime
    jti: str | None


class TokenDecodeError(RuntimeError):
    pass


def create_access_token(
    subject: str,
    role: str | None = None,
    expires_delta: timedelta | None = None,
) -> AccessToken:
    """로컬 도구와 테스트용 토큰 발급. 운영 토큰은 외부 인증 서비스가 발급한다."""
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    jti = uuid4().hex
    payload: dict[str, Any] = {
        "sub": subject,
        "exp": int(expires.timestamp()),
        "iat": int(now.timestamp()),
        "jti": jti,
    }
    if role:
        payload["user_role"] = role
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return AccessToken(token=token, expires_at=expires, jti=jti)


def decode_access_token(token: str) -> TokenPayload:
    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as exc:  # noqa: PERF203 - explicit conversion needed
        raise TokenDecodeError("토큰 검증에 실패했습니다.") from exc

    subject = payload.get("sub")
    exp = payload.get("exp")
    if not subject or exp is None:
        raise TokenDecodeError("토큰 페이로드가 올바르지 않습니다.")

    # 인증 서비스마다 역할 클레임 위치가 달라 두 군데를 모두 본다.
    role = payload.get("user_role") or (payload.get("user_metadata") or {}).get("role")
    jti = payload.get("jti")
    expires_at = datetime.fromtimestamp(int(exp), tz=timezone.utc)
    return TokenPayload(
        subject=str(subject),
        role=str(role) if role else None,
        expires_at=expires_at,
        jti=str(jti) if jti else None,
    )
