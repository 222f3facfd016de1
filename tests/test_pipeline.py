"""Tests for candidate status resolution and the pipeline report."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from carehire.pipeline import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    build_pipeline,
    is_actionable,
    next_step,
    rejection_funnel,
    rejection_of,
    resolve_status,
    search_candidates,
    status_counts,
    time_to_reject,
)
from carehire.schemas import (
    CandidateProfile,
    CandidateStatus,
    EmployeeRecord,
    EnrichedCandidate,
    Interview,
)


def _interview(**kwargs) -> Interview:
    kwargs.setdefault("caregiver_profile_id", "p1")
    kwargs.setdefault("phone_screen_passed", "Yes")
    return Interview(**kwargs)


# ---------------------------------------------------------------------------
# Status resolution
# ---------------------------------------------------------------------------

def test_employee_is_hired_regardless_of_interview():
    interview = _interview(phone_screen_passed="No")
    assert resolve_status("p1", interview, True) == CandidateStatus.HIRED
    assert resolve_status("p1", None, True) == CandidateStatus.HIRED


def test_no_interview_is_applied():
    assert resolve_status("p1", None, False) == CandidateStatus.APPLIED
    assert INITIAL_STATUS == CandidateStatus.APPLIED


@pytest.mark.parametrize("fields, expected", [
    ({"phone_screen_passed": "No"}, CandidateStatus.PHONE_SCREEN_FAILED),
    ({"final_interview_status": "Rejected after Orientation"},
     CandidateStatus.REJECTED_AFTER_ORIENTATION),
    ({"orientation_scheduled": True}, CandidateStatus.ORIENTATION_SCHEDULED),
    ({"final_interview_status": "Passed"}, CandidateStatus.FINAL_INTERVIEW_PASSED),
    ({"final_interview_status": "Failed"}, CandidateStatus.FINAL_INTERVIEW_FAILED),
    ({"final_interview_status": "Pending"}, CandidateStatus.FINAL_INTERVIEW_PENDING),
    ({}, CandidateStatus.FINAL_INTERVIEW_PENDING),
    ({"phone_screen_passed": "N/A"}, CandidateStatus.FINAL_INTERVIEW_PENDING),
    ({"orientation_scheduled": False, "final_interview_status": "Passed"},
     CandidateStatus.FINAL_INTERVIEW_PASSED),
])
def test_interview_rules(fields, expected):
    assert resolve_status("p1", _interview(**fields), False) == expected


def test_phone_screen_failure_outranks_orientation():
    interview = _interview(phone_screen_passed="No", orientation_scheduled=True)
    assert resolve_status("p1", interview, False) == CandidateStatus.PHONE_SCREEN_FAILED


def test_rejection_after_orientation_outranks_orientation_flag():
    interview = _interview(
        orientation_scheduled=True, final_interview_status="Rejected after Orientation"
    )
    assert resolve_status("p1", interview, False) == CandidateStatus.REJECTED_AFTER_ORIENTATION


def test_orientation_outranks_final_interview_result():
    interview = _interview(orientation_scheduled=True, final_interview_status="Failed")
    assert resolve_status("p1", interview, False) == CandidateStatus.ORIENTATION_SCHEDULED


@pytest.mark.parametrize("status", list(CandidateStatus))
def test_is_actionable(status):
    terminal = {
        CandidateStatus.HIRED,
        CandidateStatus.FINAL_INTERVIEW_FAILED,
        CandidateStatus.PHONE_SCREEN_FAILED,
        CandidateStatus.REJECTED_AFTER_ORIENTATION,
    }
    assert is_actionable(status) is (status not in terminal)
    assert (status in TERMINAL_STATUSES) is (status in terminal)


# ---------------------------------------------------------------------------
# Pipeline report
# ---------------------------------------------------------------------------

@pytest.fixture
def records():
    profiles = [
        CandidateProfile(id="p1", full_name="Ana Lopez", created_at=datetime(2026, 9, 1, 10, 0),
                         cna=True, dementiaExperience=True),
        CandidateProfile(id="p2", full_name="Ben Carter", created_at=datetime(2026, 10, 5, 8, 0),
                         cna=True),
        CandidateProfile(id="p3", full_name="Cara Diaz", created_at=datetime(2026, 10, 12, 16, 30)),
        CandidateProfile(id="p4", full_name="Dan Evans"),
    ]
    interviews = [
        Interview(id="i1", caregiver_profile_id="p1", phone_screen_passed="Yes",
                  final_interview_status="Passed"),
        Interview(id="i2", caregiver_profile_id="p2", phone_screen_passed="No"),
        Interview(id="i4", caregiver_profile_id="p4", phone_screen_passed="Yes",
                  orientation_scheduled=True,
                  orientation_date_time=datetime(2026, 10, 22, 9, 0)),
    ]
    employees = [
        EmployeeRecord(id="e1", caregiver_profile_id="p1", interview_id="i1",
                       hire_date=datetime(2026, 10, 1)),
    ]
    return profiles, interviews, employees


def test_build_pipeline_resolves_and_sorts_newest_first(records):
    rows = build_pipeline(*records)

    assert [r.profile.id for r in rows] == ["p3", "p2", "p1", "p4"]
    statuses = {r.profile.id: r.status for r in rows}
    assert statuses == {
        "p1": CandidateStatus.HIRED,
        "p2": CandidateStatus.PHONE_SCREEN_FAILED,
        "p3": CandidateStatus.APPLIED,
        "p4": CandidateStatus.ORIENTATION_SCHEDULED,
    }


def test_build_pipeline_keeps_joined_records(records):
    rows = {r.profile.id: r for r in build_pipeline(*records)}
    assert rows["p1"].employee.id == "e1"
    assert rows["p1"].interview.id == "i1"
    assert rows["p3"].interview is None
    assert rows["p3"].employee is None


def test_search_by_name(records):
    rows = build_pipeline(*records)
    assert [r.profile.id for r in search_candidates(rows, name="car")] == ["p3", "p2"]


def test_search_by_status(records):
    rows = build_pipeline(*records)
    found = search_candidates(rows, status=CandidateStatus.APPLIED)
    assert [r.profile.id for r in found] == ["p3"]


def test_search_requires_every_skill(records):
    rows = build_pipeline(*records)
    assert [r.profile.id for r in search_candidates(rows, skills=["cna"])] == ["p2", "p1"]
    assert [r.profile.id for r in search_candidates(rows, skills=["cna", "dementiaExperience"])] == ["p1"]


def test_search_by_creation_range_is_inclusive(records):
    rows = build_pipeline(*records)
    found = search_candidates(rows, created_from=date(2026, 10, 5), created_to=date(2026, 10, 12))
    assert [r.profile.id for r in found] == ["p3", "p2"]


def test_search_range_needs_both_ends(records):
    rows = build_pipeline(*records)
    assert len(search_candidates(rows, created_from=date(2026, 10, 5))) == 4


def test_status_counts(records):
    counts = status_counts(build_pipeline(*records))
    assert set(counts) == set(CandidateStatus)
    assert counts[CandidateStatus.HIRED] == 1
    assert counts[CandidateStatus.APPLIED] == 1
    assert counts[CandidateStatus.FINAL_INTERVIEW_PENDING] == 0
    assert sum(counts.values()) == 4


def test_next_step(records):
    rows = {r.profile.id: r for r in build_pipeline(*records)}
    assert next_step(rows["p1"]) == "Hired On: Oct 01, 2026"
    assert next_step(rows["p2"]) == "Process Ended"
    assert next_step(rows["p3"]) == "Needs Phone Screen"
    assert next_step(rows["p4"]) == "Orientation: Oct 22, 2026 09:00 AM"


def test_next_step_for_interview_stages():
    profile = CandidateProfile(id="p9", full_name="Eve")
    passed = EnrichedCandidate(profile=profile, status=CandidateStatus.FINAL_INTERVIEW_PASSED)
    pending = EnrichedCandidate(
        profile=profile,
        status=CandidateStatus.FINAL_INTERVIEW_PENDING,
        interview=_interview(interview_date_time=datetime(2026, 10, 28, 14, 0)),
    )
    assert next_step(passed) == "Needs Orientation"
    assert next_step(pending) == "Final Interview: Oct 28, 2026 02:00 PM"


# ---------------------------------------------------------------------------
# Rejection reports
# ---------------------------------------------------------------------------

def test_rejection_funnel(records):
    assert list(rejection_funnel(*records).items()) == [
        ("Total Applications", 4),
        ("Phone Screened", 3),
        ("Passed Phone Screen", 2),
        ("Passed Final Interview", 1),
        ("Hired", 1),
    ]


def test_rejection_funnel_empty():
    assert set(rejection_funnel([], [], []).values()) == {0}


def test_explicit_rejection_reason_wins():
    interview = _interview(
        phone_screen_passed="No",
        rejection_reason="Withdrew",
        created_at=datetime(2026, 9, 2),
        last_updated_at=datetime(2026, 9, 5),
    )
    assert rejection_of(interview) == ("Withdrew", datetime(2026, 9, 5))


@pytest.mark.parametrize("fields, expected", [
    ({"phone_screen_passed": "No", "created_at": datetime(2026, 9, 2)},
     ("Failed Phone Screen", datetime(2026, 9, 2))),
    ({"final_interview_status": "Failed", "last_updated_at": datetime(2026, 9, 8)},
     ("Failed Final Interview", datetime(2026, 9, 8))),
    ({"final_interview_status": "No Show", "cancel_date_time": datetime(2026, 9, 6),
      "last_updated_at": datetime(2026, 9, 8)},
     ("No Show", datetime(2026, 9, 6))),
    ({"final_interview_status": "No Show", "last_updated_at": datetime(2026, 9, 8)},
     ("No Show", datetime(2026, 9, 8))),
    ({"final_interview_status": "Passed"}, None),
    ({}, None),
])
def test_rejection_of(fields, expected):
    assert rejection_of(_interview(**fields)) == expected


def test_time_to_reject_averages_per_reason():
    profiles = [
        CandidateProfile(id="a", created_at=datetime(2026, 9, 1, 10, 0)),
        CandidateProfile(id="b", created_at=datetime(2026, 9, 10, 8, 0)),
        CandidateProfile(id="c", created_at=datetime(2026, 9, 20, 12, 0)),
        CandidateProfile(id="d"),
    ]
    interviews = [
        # 2 days 23 hours counts as 2
        _interview(caregiver_profile_id="a", phone_screen_passed="No",
                   created_at=datetime(2026, 9, 4, 9, 0)),
        _interview(caregiver_profile_id="b", phone_screen_passed="No",
                   created_at=datetime(2026, 9, 15, 8, 0)),
        _interview(caregiver_profile_id="c", final_interview_status="Failed",
                   last_updated_at=datetime(2026, 10, 1, 13, 0)),
        _interview(caregiver_profile_id="c", rejection_reason="Withdrew",
                   last_updated_at=datetime(2026, 9, 27, 12, 0)),
        _interview(caregiver_profile_id="a", final_interview_status="No Show",
                   cancel_date_time=datetime(2026, 9, 9, 10, 0),
                   last_updated_at=datetime(2026, 9, 30)),
        _interview(caregiver_profile_id="b", final_interview_status="Passed"),
        # no rejection date
        _interview(caregiver_profile_id="a", final_interview_status="Failed"),
        # no application date
        _interview(caregiver_profile_id="d", final_interview_status="Failed",
                   last_updated_at=datetime(2026, 10, 1)),
    ]

    assert time_to_reject(profiles, interviews) == [
        ("Failed Final Interview", 11.0),
        ("No Show", 8.0),
        ("Withdrew", 7.0),
        ("Failed Phone Screen", 3.5),
    ]


def test_time_to_reject_mixes_naive_and_aware_times():
    profiles = [CandidateProfile(id="a", created_at=datetime(2026, 9, 1))]
    interviews = [_interview(
        caregiver_profile_id="a",
        rejection_reason="Position Filled",
        rejection_date=datetime(2026, 9, 3, 12, 0, tzinfo=timezone.utc),
    )]
    assert time_to_reject(profiles, interviews) == [("Position Filled", 2.0)]


def test_time_to_reject_without_rejections(records):
    profiles, interviews, _ = records
    assert time_to_reject(profiles, interviews[:1]) == []
