"""Compliance reporting: gratuity eligibility from length of service."""

import logging
from datetime import date

import pandas as pd

from orgchart.employees.models import EmployeeSummary
from orgchart.employees.snapshot import Snapshot

logger = logging.getLogger(__name__)

# Gratuity is payable after five years of continuous service
GRATUITY_MIN_MONTHS = 60


def months_of_service(joined: pd.Series, today: date) -> pd.Series:
    """Whole calendar months elapsed since each joining date (NaN when unknown).

    A month only counts once its day of month has been reached, so 15 Jan to
    14 Mar is one month and 15 Jan to 15 Mar is two.
    """
    joined = pd.to_datetime(joined)
    months = (today.year - joined.dt.year) * 12 + (today.month - joined.dt.month)
    not_yet = (joined.dt.day > today.day).astype(int)
    return months - not_yet


def gratuity_eligible(
    snapshot: Snapshot,
    today: date | None = None,
    min_months: int = GRATUITY_MIN_MONTHS,
) -> list[EmployeeSummary]:
    """Employees whose service strictly exceeds ``min_months`` whole months."""
    today = today or date.today()
    frame = snapshot.frame
    if frame.empty:
        return []

    service = months_of_service(frame["date_of_joining"], today)
    eligible_ids = frame.loc[service > min_months, "employee_id"]

    logger.info(
        "%d of %d employees eligible for gratuity (> %d months)",
        len(eligible_ids),
        len(frame),
        min_months,
    )
    return [EmployeeSummary.from_record(snapshot.by_id[int(i)]) for i in eligible_ids]
