"""
Candidate Status Enumeration.
"""

import enum


class CandidateStatus(str, enum.Enum):
    """
    Recruitment pipeline status.

    Status flow (advisory, not enforced):
        Uploaded → Shortlisted → Interview Scheduled → Interview Done → Hired
        Any status can move to Rejected or On Hold
    """
    UPLOADED = "Uploaded"
    SHORTLISTED = "Shortlisted"
    INTERVIEW_SCHEDULED = "Interview Scheduled"
    INTERVIEW_DONE = "Interview Done"
    HIRED = "Hired"
    REJECTED = "Rejected"
    ON_HOLD = "On Hold"


class DateRangePreset(str, enum.Enum):
    """Rolling windows offered by dashboard filters."""
    ALL = "all"
    LAST_7_DAYS = "last7days"
    LAST_30_DAYS = "last30days"
    LAST_90_DAYS = "last90days"
    LAST_YEAR = "lastyear"

    @property
    def days(self):
        return {
            DateRangePreset.LAST_7_DAYS: 7,
            DateRangePreset.LAST_30_DAYS: 30,
            DateRangePreset.LAST_90_DAYS: 90,
            DateRangePreset.LAST_YEAR: 365,
        }.get(self)
