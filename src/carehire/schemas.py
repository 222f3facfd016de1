"""Data models for the availability, scheduling and pipeline engine."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Weekday(IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, day: date) -> Weekday:
        """Weekday of a calendar date (``date.weekday()`` starts on Monday)."""
        return cls((day.weekday() + 1) % 7)

    @classmethod
    def from_name(cls, name: str) -> Weekday | None:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return None

    @property
    def label(self) -> str:
        return self.name.lower()


# Order in which a caregiver's week is walked when proposing shifts.
WEEK_ORDER: tuple[str, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)


class CandidateStatus(str, Enum):
    APPLIED = "Applied"
    PHONE_SCREEN_FAILED = "Phone Screen Failed"
    REJECTED_AFTER_ORIENTATION = "Rejected after Orientation"
    ORIENTATION_SCHEDULED = "Orientation Scheduled"
    FINAL_INTERVIEW_PASSED = "Final Interview Passed"
    FINAL_INTERVIEW_FAILED = "Final Interview Failed"
    FINAL_INTERVIEW_PENDING = "Final Interview Pending"
    HIRED = "Hired"


# ---------------------------------------------------------------------------
# Scheduling models
# ---------------------------------------------------------------------------

WeeklyAvailabilityGrid = Mapping[str, Sequence[str]]
ProposedSchedule = dict[str, str]

# Aliased so the AvailableDay.date field does not shadow its own type.
CalendarDate = date


class BookedAppointment(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = ""
    start_time: datetime = Field(alias="startTime")
    end_time: datetime | None = Field(default=None, alias="endTime")
    caregiver_id: str = Field(default="", alias="caregiverId")
    appointment_status: str = Field(default="", alias="appointmentStatus")


class AvailableDay(BaseModel):
    date: CalendarDate
    slots: list[datetime] = Field(default_factory=list)

    def as_strings(self) -> dict[str, Any]:
        """Client-facing shape: ``{"date": "YYYY-MM-DD", "slots": ["YYYY-MM-DD HH:MM"]}``."""
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "slots": [s.strftime("%Y-%m-%d %H:%M") for s in self.slots],
        }


class HoursEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    hours_per_day: float | None = None
    total_weekly_hours: float | None = None


# ---------------------------------------------------------------------------
# Hiring pipeline records
# ---------------------------------------------------------------------------

class CandidateProfile(BaseModel):
    # Skill flags (cna, dementiaExperience, ...) arrive as extra boolean fields.
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    full_name: str = Field(default="", alias="fullName")
    email: str = ""
    phone: str = ""
    created_at: datetime | None = Field(default=None, alias="createdAt")

    def has_skill(self, skill: str) -> bool:
        return (self.model_extra or {}).get(skill) is True


class Interview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    caregiver_profile_id: str = Field(alias="caregiverProfileId")
    phone_screen_passed: str = Field(default="N/A", alias="phoneScreenPassed")
    final_interview_status: str | None = Field(default=None, alias="finalInterviewStatus")
    orientation_scheduled: bool | None = Field(default=None, alias="orientationScheduled")
    interview_date_time: datetime | None = Field(default=None, alias="interviewDateTime")
    orientation_date_time: datetime | None = Field(default=None, alias="orientationDateTime")
    interview_type: str | None = Field(default=None, alias="interviewType")
    candidate_rating: float | None = Field(default=None, alias="candidateRating")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_updated_at: datetime | None = Field(default=None, alias="lastUpdatedAt")
    cancel_date_time: datetime | None = Field(default=None, alias="cancelDateTime")
    rejection_reason: str | None = Field(default=None, alias="rejectionReason")
    rejection_date: datetime | None = Field(default=None, alias="rejectionDate")


class EmployeeRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    caregiver_profile_id: str = Field(alias="caregiverProfileId")
    interview_id: str = Field(default="", alias="interviewId")
    hire_date: datetime | None = Field(default=None, alias="hireDate")
    hiring_manager: str = Field(default="", alias="hiringManager")


class EnrichedCandidate(BaseModel):
    profile: CandidateProfile
    status: CandidateStatus
    interview: Interview | None = None
    employee: EmployeeRecord | None = None
