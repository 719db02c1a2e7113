"""
Availability Checker

Decides whether a property can take a new booking or lease for a date
range and lists everything standing in the way.

The checker is stateless; it reads bookings, leases, approved rental
requests and blocked periods through an AvailabilityRepository.
Serializing concurrent checks and inserts is the repository's job (see
DjangoAvailabilityRepository).

Overlap is half-open: [start, end) conflicts with [other_start, other_end)
iff start < other_end and end > other_start.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Collection, Iterable, List, Protocol, Tuple
import logging

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)


class RentalType(str, Enum):
    DAILY = 'Daily'
    MONTHLY = 'Monthly'


class ConflictType(str, Enum):
    BOOKING = 'Booking'
    LEASE = 'Lease'
    RENTAL_REQUEST = 'RentalRequest'
    BLOCKED = 'Blocked'
    MAINTENANCE = 'Maintenance'


CONFLICT_TYPE_ORDER = {
    ConflictType.BOOKING: 0,
    ConflictType.LEASE: 1,
    ConflictType.RENTAL_REQUEST: 2,
    ConflictType.BLOCKED: 3,
    ConflictType.MAINTENANCE: 4,
}

CANCELLED_BOOKING_STATUS = 'Cancelled'
ACTIVE_LEASE_STATUS = 'Active'
APPROVED_REQUEST_STATUS = 'Approved'


# ===== Repository records =====

@dataclass(frozen=True)
class BookedPeriod:
    booking_id: int
    start_date: date
    end_date: date | None
    status: str
    description: str = ''

    def as_range(self) -> DateRange:
        # A booking without an end date holds its start day only
        return DateRange(self.start_date, self.end_date or self.start_date + timedelta(days=1))


@dataclass(frozen=True)
class LeasePeriod:
    tenant_id: int
    start_date: date
    end_date: date | None
    status: str
    description: str = ''

    def as_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date or date.max)


@dataclass(frozen=True)
class RentalRequestPeriod:
    """A lease request the landlord has approved but not yet turned into a tenancy"""
    request_id: int
    start_date: date
    end_date: date
    status: str
    description: str = ''

    def as_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)


@dataclass(frozen=True)
class BlockedPeriod:
    availability_id: int
    start_date: date
    end_date: date
    is_maintenance: bool = False
    is_available: bool = False
    reason: str = ''

    def as_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)


class AvailabilityRepository(Protocol):
    """Read-only view of one property's occupancy"""

    def get_bookings(self, property_id: int) -> Iterable[BookedPeriod]: ...

    def get_leases(self, property_id: int) -> Iterable[LeasePeriod]: ...

    def get_approved_requests(self, property_id: int) -> Iterable[RentalRequestPeriod]: ...

    def get_blocked_periods(self, property_id: int) -> Iterable[BlockedPeriod]: ...

    def get_supported_rental_types(self, property_id: int) -> Collection[RentalType] | None:
        """None when the property does not exist"""
        ...


# ===== Results =====

@dataclass(frozen=True)
class ConflictInfo(ValueObject):
    conflict_type: ConflictType
    start_date: date
    end_date: date
    description: str
    source_id: int | None

    def sort_key(self):
        return (self.start_date, CONFLICT_TYPE_ORDER[self.conflict_type], self.source_id or 0)

    def to_dict(self) -> dict:
        return {
            'conflict_type': self.conflict_type.value,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'description': self.description,
            'source_id': self.source_id,
        }


@dataclass(frozen=True)
class AvailabilityResult(ValueObject):
    property_id: int
    start_date: date
    end_date: date
    rental_type: RentalType
    is_available: bool
    conflicts: Tuple[ConflictInfo, ...] = ()
    reason: str | None = None

    def to_dict(self) -> dict:
        return {
            'property_id': self.property_id,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'rental_type': self.rental_type.value,
            'is_available': self.is_available,
            'conflicts': [c.to_dict() for c in self.conflicts],
            'reason': self.reason,
        }


# ===== Checker =====

class AvailabilityChecker:
    """
    Usage:
        checker = AvailabilityChecker(DjangoAvailabilityRepository())
        result = checker.check_availability(property_id, start, end, RentalType.DAILY)
        if not result.is_available:
            return result.conflicts
    """

    def __init__(self, repository: AvailabilityRepository):
        self.repository = repository

    # --- conflict sources ---

    def _booking_conflicts(self, property_id: int, requested: DateRange) -> List[ConflictInfo]:
        conflicts = []
        for booking in self.repository.get_bookings(property_id):
            if booking.status == CANCELLED_BOOKING_STATUS:
                continue
            period = booking.as_range()
            if period.overlaps_with(requested):
                conflicts.append(ConflictInfo(
                    conflict_type=ConflictType.BOOKING,
                    start_date=period.start_date,
                    end_date=period.end_date,
                    description=booking.description or f"Existing booking #{booking.booking_id}",
                    source_id=booking.booking_id,
                ))
        return conflicts

    def _lease_conflicts(self, property_id: int, requested: DateRange) -> List[ConflictInfo]:
        conflicts = []
        for lease in self.repository.get_leases(property_id):
            if lease.status != ACTIVE_LEASE_STATUS:
                continue
            period = lease.as_range()
            if period.overlaps_with(requested):
                conflicts.append(ConflictInfo(
                    conflict_type=ConflictType.LEASE,
                    start_date=period.start_date,
                    end_date=period.end_date,
                    description=lease.description or f"Active tenant lease (Tenant ID: {lease.tenant_id})",
                    source_id=lease.tenant_id,
                ))
        return conflicts

    def _request_conflicts(self, property_id: int, requested: DateRange) -> List[ConflictInfo]:
        conflicts = []
        for request in self.repository.get_approved_requests(property_id):
            if request.status != APPROVED_REQUEST_STATUS:
                continue
            period = request.as_range()
            if period.overlaps_with(requested):
                conflicts.append(ConflictInfo(
                    conflict_type=ConflictType.RENTAL_REQUEST,
                    start_date=period.start_date,
                    end_date=period.end_date,
                    description=request.description or f"Approved rental request #{request.request_id}",
                    source_id=request.request_id,
                ))
        return conflicts

    def _blocked_conflicts(self, property_id: int, requested: DateRange) -> List[ConflictInfo]:
        conflicts = []
        for blocked in self.repository.get_blocked_periods(property_id):
            if blocked.is_available:
                continue
            period = blocked.as_range()
            if period.overlaps_with(requested):
                if blocked.is_maintenance:
                    conflict_type, fallback = ConflictType.MAINTENANCE, "Property under maintenance"
                else:
                    conflict_type, fallback = ConflictType.BLOCKED, "Property blocked"
                conflicts.append(ConflictInfo(
                    conflict_type=conflict_type,
                    start_date=period.start_date,
                    end_date=period.end_date,
                    description=blocked.reason or fallback,
                    source_id=blocked.availability_id,
                ))
        return conflicts

    # --- public API ---

    def supports_rental_type(self, property_id: int, rental_type: RentalType) -> bool:
        supported = self.repository.get_supported_rental_types(property_id)
        if supported is None:
            logger.warning(f"Property {property_id} not found or has no rental type")
            return False
        return RentalType(rental_type) in supported

    def has_blocked_periods(self, property_id: int, start_date: date, end_date: date) -> bool:
        requested = DateRange(start_date, end_date)
        if requested.is_empty:
            return False
        return bool(self._blocked_conflicts(property_id, requested))

    def is_property_available(self, property_id: int, start_date: date, end_date: date) -> bool:
        requested = DateRange(start_date, end_date)
        if requested.is_empty:
            return False
        if self._booking_conflicts(property_id, requested):
            return False
        return not self._blocked_conflicts(property_id, requested)

    def is_available_for_daily_rental(self, property_id: int, start_date: date, end_date: date) -> bool:
        return self.check_availability(property_id, start_date, end_date, RentalType.DAILY).is_available

    def is_available_for_annual_rental(self, property_id: int, start_date: date, end_date: date) -> bool:
        return self.check_availability(property_id, start_date, end_date, RentalType.MONTHLY).is_available

    def get_conflicts(self, property_id: int, start_date: date, end_date: date) -> List[ConflictInfo]:
        """Every booking, lease, approved request and block overlapping the range, by start date."""
        requested = DateRange(start_date, end_date)
        if requested.is_empty:
            return []
        conflicts = (
            self._booking_conflicts(property_id, requested)
            + self._lease_conflicts(property_id, requested)
            + self._request_conflicts(property_id, requested)
            + self._blocked_conflicts(property_id, requested)
        )
        return sorted(conflicts, key=ConflictInfo.sort_key)

    def check_availability(
        self,
        property_id: int,
        start_date: date,
        end_date: date,
        rental_type: RentalType,
    ) -> AvailabilityResult:
        """
        Both rental types are blocked by every conflict source: bookings,
        active leases, approved rental requests and blocked periods.
        """
        rental_type = RentalType(rental_type)
        label = rental_type.value.lower()
        requested = DateRange(start_date, end_date)

        def unavailable(reason: str, conflicts=()) -> AvailabilityResult:
            return AvailabilityResult(
                property_id=property_id,
                start_date=start_date,
                end_date=end_date,
                rental_type=rental_type,
                is_available=False,
                conflicts=tuple(conflicts),
                reason=reason,
            )

        if requested.is_empty:
            return unavailable("Requested date range is empty")

        supported = self.repository.get_supported_rental_types(property_id)
        if supported is None:
            logger.warning(f"Availability requested for unknown property {property_id}")
            return unavailable(f"Property {property_id} not found")

        conflicts = self.get_conflicts(property_id, start_date, end_date)

        if rental_type not in supported:
            return unavailable(f"Property does not support {label} rental", conflicts)

        if conflicts:
            logger.info(
                f"Property {property_id} unavailable for {label} rental {requested}: "
                f"{len(conflicts)} conflict(s)"
            )
            return unavailable(f"Conflicts found for {label} rental", conflicts)

        return AvailabilityResult(
            property_id=property_id,
            start_date=start_date,
            end_date=end_date,
            rental_type=rental_type,
            is_available=True,
            reason=f"Available for {label} rental",
        )
