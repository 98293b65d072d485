from __future__ import annotations

from sqlalchemy.orm import Session

from campaign_market.core.lifecycle import is_owner
from campaign_market.core.result import Err, ErrorCode, Ok, Result, fail
from campaign_market.models.domain import Campaign
from campaign_market.stores import campaigns as campaign_store

CAMPAIGN_NOT_FOUND_MESSAGE = "체험단을 찾을 수 없습니다."
FORBIDDEN_MESSAGE = "권한이 없습니다."


def load_owned_campaign(
    db: Session,
    actor_id: str,
    campaign_id: int,
    *,
    for_update: bool = False,
) -> Result[Campaign]:
    """캠페인을 조회하고 요청자가 소유 광고주인지 확인한다."""
    campaign = campaign_store.get_campaign(db, campaign_id, for_update=for_update)
    if campaign is None:
        return fail(ErrorCode.NOT_FOUND, CAMPAIGN_NOT_FOUND_MESSAGE)
    if not is_owner(campaign.advertiser_id, actor_id):
        return fail(ErrorCode.FORBIDDEN, FORBIDDEN_MESSAGE)
    return Ok(campaign)


def abort(db: Session, err: Err) -> Err:
    """잠금을 쥔 트랜잭션을 정리하고 오류를 그대로 돌려준다."""
    db.rollback()
    return err
