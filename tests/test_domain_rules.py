"""Unit tests for lifecycle rules, result types and the business clock."""

from datetime import date, datetime, timezone

import pytest

from campaign_market.core.clock import business_today, month_window_utc
from campaign_market.core.lifecycle import (
    ApplicationStatus,
    CampaignStatus,
    can_transition,
    is_editable,
    is_owner,
)
from campaign_market.core.result import ErrorCode, ErrorKind, Ok, fail
from campaign_market.schemas.common import PageQuery, Pagination


class TestCampaignLifecycle:
    @pytest.mark.parametrize(
        "current,target",
        [
            (CampaignStatus.RECRUITING, CampaignStatus.CLOSED),
            (CampaignStatus.RECRUITING, CampaignStatus.TERMINATED_EARLY),
            (CampaignStatus.CLOSED, CampaignStatus.SELECTION_COMPLETE),
            (CampaignStatus.TERMINATED_EARLY, CampaignStatus.SELECTION_COMPLETE),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            ("CLOSED", "RECRUITING"),
            ("RECRUITING", "SELECTION_COMPLETE"),
            ("SELECTION_COMPLETE", "CLOSED"),
            ("TERMINATED_EARLY", "CLOSED"),
        ],
    )
    def test_disallowed(self, current, target):
        assert not can_transition(current, target)

    def test_only_recruiting_is_editable(self):
        assert is_editable("RECRUITING")
        for status in ("CLOSED", "TERMINATED_EARLY", "SELECTION_COMPLETE"):
            assert not is_editable(status)

    def test_application_decisions_are_terminal(self):
        assert not ApplicationStatus.SUBMITTED.is_terminal
        assert ApplicationStatus.SELECTED.is_terminal
        assert ApplicationStatus.REJECTED.is_terminal

    def test_owner_check(self):
        assert is_owner("adv-1", "adv-1")
        assert not is_owner("adv-1", "adv-2")


class TestResult:
    def test_error_kind_maps_to_status(self):
        assert ErrorCode.INVALID_INPUT.kind.http_status == 400
        assert ErrorCode.APPLICANTS_NOT_FOUND.kind.http_status == 404
        assert ErrorCode.OWNER_PROFILE_REQUIRED.kind.http_status == 403
        assert ErrorCode.CAPACITY_EXCEEDED.kind.http_status == 409
        assert ErrorCode.NO_OP.kind is ErrorKind.NO_OP
        assert ErrorCode.INTERNAL_ERROR.kind.http_status == 500

    def test_fail_carries_details(self):
        err = fail(ErrorCode.LOCKED, "잠김", {"current_status": "CLOSED"})
        assert err.error.code is ErrorCode.LOCKED
        assert err.error.details == {"current_status": "CLOSED"}
        assert Ok(1).value == 1


class TestBusinessClock:
    def test_today_follows_business_timezone(self):
        # 2026-10-15 16:00 UTC == 2026-10-16 01:00 KST
        assert business_today(datetime(2026, 10, 15, 16, 0, tzinfo=timezone.utc)) == date(2026, 10, 16)

    def test_naive_datetime_is_treated_as_utc(self):
        assert business_today(datetime(2026, 10, 15, 14, 59)) == date(2026, 10, 15)

    def test_month_window_in_utc(self):
        start, end = month_window_utc(datetime(2026, 9, 30, 16, 0, tzinfo=timezone.utc))
        assert start == datetime(2026, 9, 30, 15, 0, tzinfo=timezone.utc)
        assert end == datetime(2026, 10, 31, 15, 0, tzinfo=timezone.utc)

    def test_month_window_wraps_year(self):
        start, end = month_window_utc(datetime(2026, 12, 10, tzinfo=timezone.utc))
        assert start == datetime(2026, 11, 30, 15, 0, tzinfo=timezone.utc)
        assert end == datetime(2026, 12, 31, 15, 0, tzinfo=timezone.utc)


class TestPagination:
    def test_build(self):
        page = Pagination.build(page=2, limit=10, total=25)
        assert page.total_pages == 3
        assert page.has_next and page.has_prev

    def test_empty_result_has_one_page(self):
        page = Pagination.build(page=1, limit=10, total=0)
        assert page.total_pages == 1
        assert not page.has_next and not page.has_prev

    def test_offset(self):
        assert PageQuery(page=3, limit=20).offset == 40
