from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campaign_market.models.domain import AuditLog

logger = logging.getLogger(__name__)


def log_action(
    db: Session,
    *,
    user_id: str | None,
    action: str,
    target_type: str | None = None,
    target_id: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    success: bool = True,
    commit: bool = False,
) -> AuditLog | None:
    log = AuditLog(
        user_id=user_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        ip_address=ip_address,
        user_agent=user_agent,
        success=success,
    )
    try:
        db.add(log)
        if commit:
            db.commit()
        else:
            db.flush()
    except SQLAlchemyError:
        # 감사 로그 실패가 이미 커밋된 업무 처리 결과를 뒤집지 않도록 한다.
        db.rollback()
        logger.exception("감사 로그 기록 실패 (action=%s, target_id=%s)", action, target_id)
        return None
    return log
