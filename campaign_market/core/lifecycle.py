"""
체험단/지원서 상태 전이 규칙.

체험단: RECRUITING -> {CLOSED, TERMINATED_EARLY} -> SELECTION_COMPLETE
지원서: SUBMITTED -> {SELECTED, REJECTED}
"""
from __future__ import annotations

from enum import Enum
from typing import Final


class CampaignStatus(str, Enum):
    RECRUITING = "RECRUITING"
    """모집중. 생성 직후 상태이며 필드 수정과 지원이 가능하다."""

    CLOSED = "CLOSED"
    """모집종료. 지원자 선정/반려가 가능한 유일한 상태."""

    TERMINATED_EARLY = "TERMINATED_EARLY"
    """조기종료. 종료일과 사유가 기록된다."""

    SELECTION_COMPLETE = "SELECTION_COMPLETE"
    """선정완료. 모집 인원이 모두 선정되면 자동 전환된다."""


class ApplicationStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    SELECTED = "SELECTED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self in DECIDED_APPLICATION_STATUSES


CAMPAIGN_TRANSITIONS: Final[dict[CampaignStatus, frozenset[CampaignStatus]]] = {
    CampaignStatus.RECRUITING: frozenset({
        CampaignStatus.CLOSED,
        CampaignStatus.TERMINATED_EARLY,
    }),
    CampaignStatus.CLOSED: frozenset({CampaignStatus.SELECTION_COMPLETE}),
    CampaignStatus.TERMINATED_EARLY: frozenset({CampaignStatus.SELECTION_COMPLETE}),
    CampaignStatus.SELECTION_COMPLETE: frozenset(),
}

# 광고주가 직접 요청할 수 있는 전환 대상
OWNER_TRANSITION_TARGETS: Final[frozenset[CampaignStatus]] = frozenset({
    CampaignStatus.CLOSED,
    CampaignStatus.TERMINATED_EARLY,
})

DECIDED_APPLICATION_STATUSES: Final[frozenset[ApplicationStatus]] = frozenset({
    ApplicationStatus.SELECTED,
    ApplicationStatus.REJECTED,
})


def can_transition(current: CampaignStatus | str, target: CampaignStatus | str) -> bool:
    return CampaignStatus(target) in CAMPAIGN_TRANSITIONS[CampaignStatus(current)]


def is_editable(status: CampaignStatus | str) -> bool:
    return CampaignStatus(status) is CampaignStatus.RECRUITING


def is_owner(advertiser_id: str, caller_id: str) -> bool:
    """소유권 검사. 캠페인을 변경하는 모든 작업 전에 호출한다."""
    return advertiser_id == caller_id
