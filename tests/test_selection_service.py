"""Service-level tests for selecting and rejecting applicants."""

import pytest
from sqlalchemy import select

from campaign_market.core.lifecycle import ApplicationStatus, CampaignStatus
from campaign_market.core.result import Err, ErrorCode, Ok
from campaign_market.models.domain import Application, Campaign, CampaignStatusLog
from campaign_market.services import selection_service
from campaign_market.stores import applications as application_store


@pytest.fixture
def closed_campaign(make_advertiser, make_influencer, make_campaign, make_application):
    """모집 인원 2명, 지원자 A/B/C 가 SUBMITTED 인 모집종료 체험단."""
    make_advertiser("adv-1")
    campaign = make_campaign("adv-1", recruitment_count=2, status=CampaignStatus.CLOSED)
    for influencer_id in ("inf-a", "inf-b", "inf-c"):
        make_influencer(influencer_id)
        make_application(campaign, influencer_id)
    return campaign


def _statuses(db, campaign_id):
    db.expire_all()
    rows = db.execute(
        select(Application.influencer_id, Application.status).where(Application.campaign_id == campaign_id)
    ).all()
    return dict(rows)


def _campaign_status(db, campaign_id):
    db.expire_all()
    return db.get(Campaign, campaign_id).status


def _error_code(result):
    assert isinstance(result, Err), result
    return result.error.code


class TestSelect:
    def test_filling_capacity_completes_selection(self, db, closed_campaign):
        result = selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-a", "inf-b"])

        assert isinstance(result, Ok)
        assert result.value.updated == 2
        assert result.value.campaign_status == "SELECTION_COMPLETE"
        assert _statuses(db, closed_campaign.id) == {
            "inf-a": "SELECTED",
            "inf-b": "SELECTED",
            "inf-c": "SUBMITTED",
        }
        assert _campaign_status(db, closed_campaign.id) == "SELECTION_COMPLETE"
        logs = db.scalars(select(CampaignStatusLog.status)).all()
        assert logs == ["SELECTION_COMPLETE"]

        again = selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-c"])
        assert _error_code(again) is ErrorCode.CAMPAIGN_NOT_CLOSED

    def test_partial_selection_keeps_campaign_closed(self, db, closed_campaign):
        result = selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-a"])

        assert result.value.updated == 1
        assert result.value.campaign_status == "CLOSED"
        assert _campaign_status(db, closed_campaign.id) == "CLOSED"

        second = selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-b"])
        assert second.value.campaign_status == "SELECTION_COMPLETE"

    def test_duplicate_ids_are_collapsed(self, db, closed_campaign):
        result = selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-a", "inf-a"])

        assert result.value.updated == 1

    def test_capacity_exceeded(self, db, closed_campaign):
        result = selection_service.select_influencers(
            db, "adv-1", closed_campaign.id, ["inf-a", "inf-b", "inf-c"]
        )

        assert _error_code(result) is ErrorCode.CAPACITY_EXCEEDED
        assert result.error.details["requested"] == 3
        assert set(_statuses(db, closed_campaign.id).values()) == {"SUBMITTED"}

    def test_requires_closed_campaign(self, db, make_advertiser, make_influencer, make_campaign, make_application):
        make_advertiser("adv-1")
        make_influencer("inf-a")
        campaign = make_campaign("adv-1", status=CampaignStatus.RECRUITING)
        make_application(campaign, "inf-a")

        result = selection_service.select_influencers(db, "adv-1", campaign.id, ["inf-a"])

        assert _error_code(result) is ErrorCode.CAMPAIGN_NOT_CLOSED
        assert result.error.details == {"current_status": "RECRUITING"}

    def test_terminated_early_campaign_cannot_select(
        self, db, make_advertiser, make_influencer, make_campaign, make_application
    ):
        make_advertiser("adv-1")
        make_influencer("inf-a")
        campaign = make_campaign("adv-1", status=CampaignStatus.TERMINATED_EARLY)
        make_application(campaign, "inf-a")

        result = selection_service.select_influencers(db, "adv-1", campaign.id, ["inf-a"])

        assert _error_code(result) is ErrorCode.CAMPAIGN_NOT_CLOSED

    def test_unknown_applicant(self, db, closed_campaign):
        result = selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-a", "inf-x"])

        assert _error_code(result) is ErrorCode.APPLICANTS_NOT_FOUND
        assert result.error.details == {"missing": ["inf-x"]}
        assert _statuses(db, closed_campaign.id)["inf-a"] == "SUBMITTED"

    def test_already_processed(self, db, closed_campaign):
        selection_service.reject_influencers(db, "adv-1", closed_campaign.id, ["inf-c"])

        result = selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-a", "inf-c"])

        assert _error_code(result) is ErrorCode.ALREADY_PROCESSED
        assert result.error.details == {"processed": ["inf-c"]}
        assert _statuses(db, closed_campaign.id)["inf-a"] == "SUBMITTED"

    def test_empty_request(self, db, closed_campaign):
        assert _error_code(selection_service.select_influencers(db, "adv-1", closed_campaign.id, [])) is (
            ErrorCode.INVALID_INPUT
        )

    def test_not_owner(self, db, closed_campaign):
        result = selection_service.select_influencers(db, "adv-2", closed_campaign.id, ["inf-a"])
        assert _error_code(result) is ErrorCode.FORBIDDEN

    def test_concurrent_selection_reports_no_op(self, db, make_advertiser, make_influencer, make_campaign,
                                                make_application, monkeypatch, frozen_now):
        make_advertiser("adv-1")
        make_influencer("inf-a")
        campaign = make_campaign("adv-1", recruitment_count=1, status=CampaignStatus.CLOSED)
        make_application(campaign, "inf-a")
        real_count = application_store.count_with_status
        calls = {"n": 0}

        def _count_after_competing_select(session, campaign_id, status):
            calls["n"] += 1
            if calls["n"] == 1:
                # 검증을 통과한 직후 다른 요청이 같은 지원자를 먼저 선정한다.
                application_store.decide_if_submitted(
                    session, campaign_id, ["inf-a"], ApplicationStatus.SELECTED, now=frozen_now
                )
                return 0
            return real_count(session, campaign_id, status)

        monkeypatch.setattr(application_store, "count_with_status", _count_after_competing_select)

        result = selection_service.select_influencers(db, "adv-1", campaign.id, ["inf-a"])

        assert _error_code(result) is ErrorCode.NO_OP
        assert _campaign_status(db, campaign.id) == "CLOSED"

    def test_oversell_after_conditional_update_rolls_back(self, db, make_advertiser, make_influencer,
                                                          make_campaign, make_application, monkeypatch,
                                                          frozen_now):
        make_advertiser("adv-1")
        campaign = make_campaign("adv-1", recruitment_count=1, status=CampaignStatus.CLOSED)
        for influencer_id in ("inf-a", "inf-b"):
            make_influencer(influencer_id)
            make_application(campaign, influencer_id)
        real_count = application_store.count_with_status
        calls = {"n": 0}

        def _count_after_competing_select(session, campaign_id, status):
            calls["n"] += 1
            if calls["n"] == 1:
                # 정원 확인 직후 다른 요청이 남은 한 자리를 inf-b 로 채운다.
                application_store.decide_if_submitted(
                    session, campaign_id, ["inf-b"], ApplicationStatus.SELECTED, now=frozen_now
                )
                return 0
            return real_count(session, campaign_id, status)

        monkeypatch.setattr(application_store, "count_with_status", _count_after_competing_select)

        result = selection_service.select_influencers(db, "adv-1", campaign.id, ["inf-a"])

        assert _error_code(result) is ErrorCode.CAPACITY_EXCEEDED
        assert result.error.details == {"recruitment_count": 1, "already_selected": 1}
        assert set(_statuses(db, campaign.id).values()) == {"SUBMITTED"}
        assert _campaign_status(db, campaign.id) == "CLOSED"

    def test_sequential_duplicate_selection(self, db, make_advertiser, make_influencer, make_campaign,
                                            make_application):
        make_advertiser("adv-1")
        make_influencer("inf-a")
        campaign = make_campaign("adv-1", recruitment_count=1, status=CampaignStatus.CLOSED)
        make_application(campaign, "inf-a")

        first = selection_service.select_influencers(db, "adv-1", campaign.id, ["inf-a"])
        second = selection_service.select_influencers(db, "adv-1", campaign.id, ["inf-a"])

        assert first.value.updated == 1
        assert first.value.campaign_status == "SELECTION_COMPLETE"
        assert isinstance(second, Err)


class TestReject:
    def test_rejects_without_changing_campaign(self, db, closed_campaign):
        result = selection_service.reject_influencers(db, "adv-1", closed_campaign.id, ["inf-a", "inf-b"])

        assert result.value.updated == 2
        assert result.value.campaign_status == "CLOSED"
        assert _statuses(db, closed_campaign.id)["inf-b"] == "REJECTED"
        assert _campaign_status(db, closed_campaign.id) == "CLOSED"

    def test_rejected_applicant_cannot_be_selected(self, db, closed_campaign):
        selection_service.reject_influencers(db, "adv-1", closed_campaign.id, ["inf-a"])

        again = selection_service.reject_influencers(db, "adv-1", closed_campaign.id, ["inf-a"])

        assert _error_code(again) is ErrorCode.ALREADY_PROCESSED


class TestApplicants:
    def test_lists_applicants_with_profile(self, db, closed_campaign):
        selection_service.select_influencers(db, "adv-1", closed_campaign.id, ["inf-a"])

        result = selection_service.get_campaign_applicants(db, "adv-1", closed_campaign.id)

        assert isinstance(result, Ok)
        assert {item.influencer_id for item in result.value.applicants} == {"inf-a", "inf-b", "inf-c"}
        item = next(a for a in result.value.applicants if a.influencer_id == "inf-a")
        assert item.sns_channel_name == "inf-a-channel"
        assert item.status == "SELECTED"
        assert result.value.campaign.selected_count == 1
        assert result.value.campaign.recruitment_count == 2

    def test_only_owner_can_view(self, db, closed_campaign):
        result = selection_service.get_campaign_applicants(db, "adv-2", closed_campaign.id)
        assert _error_code(result) is ErrorCode.FORBIDDEN
