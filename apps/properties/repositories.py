"""Read access to the property facts that pricing and refunds depend on."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from apps.bookings.domain.availability import RentalType
from apps.bookings.domain.cancellation import CancellationPolicy
from shared.domain.exceptions import PropertyNotFoundError
from shared.infrastructure.db import lock_queryset_if_possible

from .models import Property


@dataclass(frozen=True)
class PropertyProfile:
    property_id: int
    owner_id: int
    property_type: str
    location: str
    rental_types: frozenset[RentalType]
    nightly_rate: Decimal
    monthly_rent: Decimal
    currency: str
    max_guests: int
    cancellation_policy: CancellationPolicy


class DjangoPropertyRepository:
    def get(self, property_id: int, *, lock: bool = False) -> PropertyProfile:
        """
        Load a property profile.

        With lock=True the property row is locked for the rest of the
        transaction, which serializes booking inserts per property.
        """
        queryset = Property.objects.filter(pk=property_id)
        if lock:
            queryset = lock_queryset_if_possible(queryset)
        property_obj = queryset.first()
        if property_obj is None:
            raise PropertyNotFoundError(property_id)
        return self.to_profile(property_obj)

    @staticmethod
    def to_profile(property_obj: Property) -> PropertyProfile:
        return PropertyProfile(
            property_id=property_obj.pk,
            owner_id=property_obj.owner_id,
            property_type=property_obj.property_type,
            location=property_obj.location,
            rental_types=property_obj.supported_rental_types(),
            nightly_rate=property_obj.nightly_rate,
            monthly_rent=property_obj.monthly_rent,
            currency=property_obj.currency,
            max_guests=property_obj.max_guests,
            cancellation_policy=CancellationPolicy(property_obj.cancellation_policy),
        )
