"""Hiring pipeline — candidate status derived from profile, interview and employee records."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, Sequence

from carehire.schemas import (
    CandidateProfile,
    CandidateStatus,
    EmployeeRecord,
    EnrichedCandidate,
    Interview,
)

INITIAL_STATUS = CandidateStatus.APPLIED

TERMINAL_STATUSES: frozenset[CandidateStatus] = frozenset({
    CandidateStatus.HIRED,
    CandidateStatus.FINAL_INTERVIEW_FAILED,
    CandidateStatus.PHONE_SCREEN_FAILED,
    CandidateStatus.REJECTED_AFTER_ORIENTATION,
})


def resolve_status(
    profile_id: str,
    interview: Interview | None,
    is_employee: bool,
) -> CandidateStatus:
    """Derive the pipeline status. Rules are checked in order; first match wins.

    ``profile_id`` identifies the candidate the records were joined on; the
    profile itself does not influence the result.
    """
    if is_employee:
        return CandidateStatus.HIRED
    if interview is None:
        return CandidateStatus.APPLIED
    if interview.phone_screen_passed == "No":
        return CandidateStatus.PHONE_SCREEN_FAILED
    if interview.final_interview_status == CandidateStatus.REJECTED_AFTER_ORIENTATION.value:
        return CandidateStatus.REJECTED_AFTER_ORIENTATION
    if interview.orientation_scheduled:
        return CandidateStatus.ORIENTATION_SCHEDULED
    if interview.final_interview_status == "Passed":
        return CandidateStatus.FINAL_INTERVIEW_PASSED
    if interview.final_interview_status == "Failed":
        return CandidateStatus.FINAL_INTERVIEW_FAILED
    return CandidateStatus.FINAL_INTERVIEW_PENDING


def is_actionable(status: CandidateStatus) -> bool:
    """Whether the "manage interview" action should be offered."""
    return status not in TERMINAL_STATUSES


# ---------------------------------------------------------------------------
# Pipeline report
# ---------------------------------------------------------------------------

def build_pipeline(
    profiles: Iterable[CandidateProfile],
    interviews: Iterable[Interview],
    employees: Iterable[EmployeeRecord],
) -> list[EnrichedCandidate]:
    """Join the three collections and resolve every profile, newest first."""
    interviews_by_profile = {i.caregiver_profile_id: i for i in interviews}
    employees_by_profile = {e.caregiver_profile_id: e for e in employees}

    rows = []
    for profile in profiles:
        interview = interviews_by_profile.get(profile.id)
        employee = employees_by_profile.get(profile.id)
        rows.append(EnrichedCandidate(
            profile=profile,
            status=resolve_status(profile.id, interview, employee is not None),
            interview=interview,
            employee=employee,
        ))

    # Newest applications first; profiles without a timestamp sink to the end.
    rows.sort(
        key=lambda r: (r.profile.created_at is not None, _timestamp(r.profile.created_at)),
        reverse=True,
    )
    return rows


def _timestamp(value: datetime | None) -> float:
    if value is None:
        return 0.0
    return value.timestamp()


def search_candidates(
    candidates: Sequence[EnrichedCandidate],
    name: str | None = None,
    status: CandidateStatus | None = None,
    skills: Iterable[str] = (),
    created_from: date | None = None,
    created_to: date | None = None,
) -> list[EnrichedCandidate]:
    """Filter pipeline rows the way the advanced search screen does.

    The creation-date filter only applies when both ends of the range are
    given; both days are inclusive.
    """
    results = list(candidates)

    if name:
        term = name.lower()
        results = [c for c in results if term in c.profile.full_name.lower()]

    required = list(skills)
    if required:
        results = [c for c in results if all(c.profile.has_skill(s) for s in required)]

    if status is not None:
        results = [c for c in results if c.status == status]

    if created_from is not None and created_to is not None:
        start = datetime.combine(created_from, time.min)
        end = datetime.combine(created_to, time.max)
        results = [
            c for c in results
            if c.profile.created_at is not None
            and start <= c.profile.created_at.replace(tzinfo=None) <= end
        ]

    return results


def status_counts(candidates: Iterable[EnrichedCandidate]) -> dict[CandidateStatus, int]:
    counts = {s: 0 for s in CandidateStatus}
    for c in candidates:
        counts[c.status] += 1
    return counts


def next_step(candidate: EnrichedCandidate) -> str:
    """Short follow-up hint shown next to a candidate in the status report."""
    status = candidate.status
    interview = candidate.interview

    if status == CandidateStatus.APPLIED:
        return "Needs Phone Screen"
    if status in TERMINAL_STATUSES and status != CandidateStatus.HIRED:
        return "Process Ended"
    if status == CandidateStatus.FINAL_INTERVIEW_PENDING:
        if interview is not None and interview.interview_date_time is not None:
            return f"Final Interview: {interview.interview_date_time:%b %d, %Y %I:%M %p}"
        return ""
    if status == CandidateStatus.FINAL_INTERVIEW_PASSED:
        return "Needs Orientation"
    if status == CandidateStatus.ORIENTATION_SCHEDULED:
        if interview is not None and interview.orientation_date_time is not None:
            return f"Orientation: {interview.orientation_date_time:%b %d, %Y %I:%M %p}"
        return ""
    if candidate.employee is not None and candidate.employee.hire_date is not None:
        return f"Hired On: {candidate.employee.hire_date:%b %d, %Y}"
    return ""


# ---------------------------------------------------------------------------
# Rejection reports
# ---------------------------------------------------------------------------

def rejection_funnel(
    profiles: Sequence[CandidateProfile],
    interviews: Sequence[Interview],
    employees: Sequence[EmployeeRecord],
) -> dict[str, int]:
    """Candidate counts at each stage, from application to hire."""
    return {
        "Total Applications": len(profiles),
        "Phone Screened": len(interviews),
        "Passed Phone Screen": sum(1 for i in interviews if i.phone_screen_passed == "Yes"),
        "Passed Final Interview": sum(1 for i in interviews if i.final_interview_status == "Passed"),
        "Hired": len(employees),
    }


def rejection_of(interview: Interview) -> tuple[str, datetime | None] | None:
    """Reason and date an interview ended the candidate's process, if it did."""
    if interview.rejection_reason:
        return interview.rejection_reason, interview.rejection_date or interview.last_updated_at
    if interview.phone_screen_passed == "No":
        return "Failed Phone Screen", interview.created_at
    if interview.final_interview_status == "Failed":
        return "Failed Final Interview", interview.last_updated_at
    if interview.final_interview_status == "No Show":
        return "No Show", interview.cancel_date_time or interview.last_updated_at
    return None


def time_to_reject(
    profiles: Iterable[CandidateProfile],
    interviews: Iterable[Interview],
) -> list[tuple[str, float]]:
    """Average whole days from application to rejection, per reason.

    Returns ``(reason, days)`` pairs rounded to one decimal, slowest first.
    Interviews without a rejection date, or whose profile has no
    ``created_at``, are left out.
    """
    applied_at = {p.id: p.created_at for p in profiles if p.created_at is not None}
    days_by_reason: dict[str, list[int]] = {}

    for interview in interviews:
        rejection = rejection_of(interview)
        if rejection is None:
            continue
        reason, rejected_at = rejection
        created = applied_at.get(interview.caregiver_profile_id)
        if rejected_at is None or created is None:
            continue
        days_by_reason.setdefault(reason, []).append(_whole_days(created, rejected_at))

    averages = [
        (reason, round(sum(days) / len(days), 1))
        for reason, days in days_by_reason.items()
    ]
    averages.sort(key=lambda pair: pair[1], reverse=True)
    return averages


def _whole_days(start: datetime, end: datetime) -> int:
    # A naive side is read in the zone of the aware side.
    if start.tzinfo is None and end.tzinfo is not None:
        start = start.replace(tzinfo=end.tzinfo)
    elif end.tzinfo is None and start.tzinfo is not None:
        end = end.replace(tzinfo=start.tzinfo)
    return int((end - start).total_seconds() / 86400)
