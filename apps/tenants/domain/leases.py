"""
Lease Rules

A lease starts on a date and runs for a whole number of months; the end
date is derived, never stored. Active leases block daily bookings on
the same property (see AvailabilityChecker).
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, List

from apps.bookings.domain.availability import LeasePeriod
from shared.domain.exceptions import InvalidArgumentError

DEFAULT_LEASE_DURATION_MONTHS = 12
EXPIRING_SOON_DAYS = 30


class TenantStatus(str, Enum):
    ACTIVE = 'Active'
    INACTIVE = 'Inactive'
    EVICTED = 'Evicted'
    LEASE_ENDED = 'LeaseEnded'


def add_months(start: date, months: int) -> date:
    """Same day-of-month `months` later, clamped to the month's last day."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def calculate_lease_end_date(lease_start: date, duration_months: int) -> date:
    if duration_months < 1:
        raise InvalidArgumentError(f"Lease duration must be at least one month, got {duration_months}")
    return add_months(lease_start, duration_months)


@dataclass(frozen=True)
class Lease:
    tenant_id: int
    property_id: int
    start_date: date
    duration_months: int = DEFAULT_LEASE_DURATION_MONTHS
    status: TenantStatus = TenantStatus.ACTIVE
    monthly_rent: Decimal = Decimal('0')
    tenant_name: str = ''

    @property
    def end_date(self) -> date:
        return calculate_lease_end_date(self.start_date, self.duration_months)

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def remaining_days(self, today: date) -> int:
        return (self.end_date - today).days

    def is_expired(self, today: date) -> bool:
        return self.end_date < today

    def is_expiring_soon(self, today: date, window_days: int = EXPIRING_SOON_DAYS) -> bool:
        return today <= self.end_date <= today + timedelta(days=window_days)

    def to_period(self) -> LeasePeriod:
        description = f"Annual lease by {self.tenant_name}" if self.tenant_name else ''
        return LeasePeriod(
            tenant_id=self.tenant_id,
            start_date=self.start_date,
            end_date=self.end_date,
            status=self.status.value,
            description=description,
        )


def expiring_leases(leases: Iterable[Lease], today: date, days_ahead: int = EXPIRING_SOON_DAYS) -> List[Lease]:
    """Active leases ending between today and today + days_ahead (inclusive)."""
    return [lease for lease in leases if lease.is_active and lease.is_expiring_soon(today, days_ahead)]


def expired_leases(leases: Iterable[Lease], today: date) -> List[Lease]:
    """Active leases whose end date has already passed."""
    return [lease for lease in leases if lease.is_active and lease.is_expired(today)]
