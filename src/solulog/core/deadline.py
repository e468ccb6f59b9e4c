"""Next-rotation instant for calendar rotation policies.

All boundaries are computed in local wall-clock time, matching the
timestamps written into backup file names.
"""

from datetime import datetime, timedelta

from solulog.core.models import RotationPolicy

# datetime.weekday() value of the day that closes a week
_WEEK_BOUNDARY_WEEKDAY = 6  # Sunday


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def next_rotation(now: datetime, policy: RotationPolicy) -> datetime | None:
    """Return the first rotation boundary strictly after ``now``.

    Args:
        now: Reference instant (naive local time or timezone-aware).
        policy: Calendar rotation policy.

    Returns:
        The boundary instant, or None for RotationPolicy.NONE.
    """
    if policy is RotationPolicy.HOURLY:
        return now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    if policy is RotationPolicy.DAILY:
        return _midnight(now) + timedelta(days=1)
    if policy is RotationPolicy.WEEKLY:
        days = (_WEEK_BOUNDARY_WEEKDAY - now.weekday()) % 7 or 7
        return _midnight(now) + timedelta(days=days)
    if policy is RotationPolicy.MONTHLY:
        if now.month == 12:
            return _midnight(now).replace(year=now.year + 1, month=1, day=1)
        return _midnight(now).replace(month=now.month + 1, day=1)
    return None


def next_deadline(now: float, policy: RotationPolicy) -> float:
    """Unix-seconds variant of ``next_rotation``; 0.0 means never rotate."""
    boundary = next_rotation(datetime.fromtimestamp(now), policy)
    if boundary is None:
        return 0.0
    return boundary.timestamp()
