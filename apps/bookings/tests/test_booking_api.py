"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.properties.models import Property, PropertyAvailability
from apps.tenants.models import RentalRequest, Tenant

User = get_user_model()


class BookingAPITests(APITestCase):
    """Covers booking creation, conflicts, quotes and cancellation refunds."""

    def setUp(self) -> None:
        self.renter = User.objects.create_user(
            username="amra",
            email="amra@example.com",
            password="RenterPass123",
        )
        self.owner = User.objects.create_user(
            username="emir",
            email="emir@example.com",
            password="OwnerPass123",
        )
        self.property = Property.objects.create(
            owner=self.owner,
            name="Apartment Bascarsija",
            property_type="apartment",
            location="Sarajevo",
            address="Sarači 12",
            renting_type=Property.RentingType.DAILY,
            nightly_rate=Decimal("100.00"),
            currency="BAM",
            max_guests=4,
            cancellation_policy=Property.CancellationPolicy.STANDARD,
        )
        self.client.force_authenticate(self.renter)
        self.list_url = reverse("booking-list")
        self.start = date.today() + timedelta(days=30)

    def _payload(self, start_date: date, end_date: date, guests: int = 2) -> dict[str, object]:
        return {
            "property_id": self.property.id,
            "start_date": str(start_date),
            "end_date": str(end_date),
            "guests_count": guests,
        }

    def _create(self, start_date: date, end_date: date, **extra) -> int:
        payload = {**self._payload(start_date, end_date), **extra}
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["id"]

    def test_renter_can_create_booking_with_price_breakdown(self) -> None:
        response = self.client.post(
            self.list_url, self._payload(self.start, self.start + timedelta(days=3)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "Pending")
        self.assertEqual(response.data["total_nights"], 3)
        self.assertEqual(response.data["subtotal"], "300.00")
        self.assertEqual(response.data["taxes"], "61.20")
        self.assertEqual(response.data["total_price"], "421.20")
        self.assertEqual(response.data["security_deposit"], "60.00")
        booking = Booking.objects.get()
        self.assertEqual(booking.renter, self.renter)
        self.assertEqual(booking.nightly_rate, Decimal("100.00"))

    def test_payment_reference_makes_booking_upcoming(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=2), payment_reference="pi_001")

        booking = Booking.objects.get(pk=booking_id)
        self.assertEqual(booking.status, Booking.Status.UPCOMING)
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.PAID)

    def test_prevent_double_booking_on_overlap(self) -> None:
        first_id = self._create(self.start, self.start + timedelta(days=3))

        response = self.client.post(
            self.list_url,
            self._payload(self.start + timedelta(days=2), self.start + timedelta(days=5)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        availability = response.data["availability"]
        self.assertFalse(availability["is_available"])
        self.assertEqual(availability["conflicts"][0]["conflict_type"], "Booking")
        self.assertEqual(availability["conflicts"][0]["source_id"], first_id)
        self.assertEqual(Booking.objects.count(), 1)

    def test_back_to_back_bookings_are_allowed(self) -> None:
        self._create(self.start, self.start + timedelta(days=2))
        self._create(self.start + timedelta(days=2), self.start + timedelta(days=4))

        self.assertEqual(Booking.objects.count(), 2)

    def test_cancelled_booking_frees_the_dates(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=2))
        self.client.post(reverse("booking-cancel", args=[booking_id]), {}, format="json")

        self._create(self.start, self.start + timedelta(days=2))

    def test_blocked_period_prevents_booking(self) -> None:
        PropertyAvailability.objects.create(
            property=self.property,
            start_date=self.start + timedelta(days=1),
            end_date=self.start + timedelta(days=2),
            kind=PropertyAvailability.Kind.MAINTENANCE,
            reason="Boiler replacement",
        )

        response = self.client.post(
            self.list_url, self._payload(self.start, self.start + timedelta(days=3)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        conflict = response.data["availability"]["conflicts"][0]
        self.assertEqual(conflict["conflict_type"], "Maintenance")
        self.assertEqual(conflict["description"], "Boiler replacement")

    def test_active_lease_prevents_booking(self) -> None:
        Tenant.objects.create(
            user=self.owner,
            property=self.property,
            lease_start_date=date.today(),
            lease_duration_months=12,
            monthly_rent=Decimal("900.00"),
        )

        response = self.client.post(
            self.list_url, self._payload(self.start, self.start + timedelta(days=3)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["availability"]["conflicts"][0]["conflict_type"], "Lease")

    def test_approved_rental_request_prevents_booking(self) -> None:
        request = RentalRequest.objects.create(
            user=self.owner,
            property=self.property,
            proposed_start_date=self.start + timedelta(days=1),
            lease_duration_months=6,
            proposed_monthly_rent=Decimal("850.00"),
            status=RentalRequest.Status.APPROVED,
        )

        response = self.client.post(
            self.list_url, self._payload(self.start, self.start + timedelta(days=3)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        conflict = response.data["availability"]["conflicts"][0]
        self.assertEqual(conflict["conflict_type"], "RentalRequest")
        self.assertEqual(conflict["source_id"], request.id)
        self.assertEqual(Booking.objects.count(), 0)

    def test_pending_rental_request_does_not_block_booking(self) -> None:
        RentalRequest.objects.create(
            user=self.owner,
            property=self.property,
            proposed_start_date=self.start,
            proposed_monthly_rent=Decimal("850.00"),
        )

        self._create(self.start, self.start + timedelta(days=3))

    def test_total_nights_on_the_model(self) -> None:
        booking = Booking.objects.get(pk=self._create(self.start, self.start + timedelta(days=4)))

        self.assertEqual(booking.total_nights, 4)

    def test_monthly_property_rejects_daily_booking(self) -> None:
        self.property.renting_type = Property.RentingType.MONTHLY
        self.property.save()

        response = self.client.post(
            self.list_url, self._payload(self.start, self.start + timedelta(days=3)), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["detail"], "Property does not support daily rental")

    def test_guests_over_capacity_are_rejected(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(self.start, self.start + timedelta(days=2), guests=5),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("capacity", response.data["detail"])

    def test_empty_stay_is_rejected(self) -> None:
        response = self.client.post(self.list_url, self._payload(self.start, self.start), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_unknown_property_is_not_found(self) -> None:
        payload = {**self._payload(self.start, self.start + timedelta(days=2)), "property_id": 9999}

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_anonymous_quote(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.post(
            reverse("booking-quote"),
            self._payload(self.start, self.start + timedelta(days=3)),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(
            response.data,
            {
                "subtotal": "300.00",
                "cleaning_fee": "30.00",
                "service_fee": "30.00",
                "taxes": "61.20",
                "security_deposit": "60.00",
                "total_price": "421.20",
                "total_with_deposit": "481.20",
                "currency": "BAM",
            },
        )
        self.assertEqual(Booking.objects.count(), 0)

    def test_renter_cancellation_well_ahead_is_fully_refunded(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=3))

        response = self.client.post(
            reverse("booking-cancel", args=[booking_id]), {"reason": "Change of plans"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "Cancelled")
        self.assertEqual(response.data["refund_amount"], "421.20")
        self.assertEqual(response.data["cancellation_reason"], "Change of plans")
        self.assertIsNotNone(response.data["cancelled_at"])

    def test_owner_cancellation_keeps_processing_fee(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=3))
        self.client.force_authenticate(self.owner)

        with self.assertLogs("apps.bookings.application.command_handlers", level="INFO") as logs:
            response = self.client.post(reverse("booking-cancel", args=[booking_id]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        # 421.20 * 0.97
        self.assertEqual(response.data["refund_amount"], "408.56")
        self.assertTrue(any("as Landlord under Standard policy" in line for line in logs.output), logs.output)

    def test_cancelling_twice_is_a_conflict(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=3))
        url = reverse("booking-cancel", args=[booking_id])
        self.client.post(url, {}, format="json")

        response = self.client.post(url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)

    def test_outsider_cannot_see_or_cancel(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=3))
        outsider = User.objects.create_user(username="outsider", password="OutsiderPass123")
        self.client.force_authenticate(outsider)

        response = self.client.post(reverse("booking-cancel", args=[booking_id]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(self.client.get(self.list_url).data["count"], 0)

    def test_refund_preview_does_not_cancel(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=3))
        self.client.force_authenticate(self.owner)

        response = self.client.get(reverse("booking-refund-preview", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["user_role"], "Landlord")
        self.assertEqual(response.data["cancellation_policy"], "Standard")
        self.assertEqual(response.data["refund_percentage"], "0.97")
        self.assertEqual(response.data["refund_amount"], "408.56")
        self.assertEqual(Booking.objects.get(pk=booking_id).status, Booking.Status.PENDING)

    def test_only_owner_can_approve(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=3))
        url = reverse("booking-approve", args=[booking_id])

        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

        self.client.force_authenticate(self.owner)
        response = self.client.post(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "Approved")

    def test_staff_confirms_payment(self) -> None:
        booking_id = self._create(self.start, self.start + timedelta(days=3))
        staff = User.objects.create_user(username="staff", password="StaffPass123", is_staff=True)
        url = reverse("booking-confirm-payment", args=[booking_id])

        response = self.client.post(url, {"payment_reference": "pi_777"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

        self.client.force_authenticate(staff)
        self.assertEqual(
            self.client.post(url, {}, format="json").status_code, status.HTTP_400_BAD_REQUEST
        )
        response = self.client.post(url, {"payment_reference": "pi_777"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "Upcoming")
        self.assertEqual(response.data["payment_status"], "Paid")

    def test_list_filters_by_status(self) -> None:
        self._create(self.start, self.start + timedelta(days=2))
        cancelled_id = self._create(self.start + timedelta(days=5), self.start + timedelta(days=7))
        self.client.post(reverse("booking-cancel", args=[cancelled_id]), {}, format="json")

        response = self.client.get(self.list_url, {"status": "Cancelled"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["id"], cancelled_id)

    def test_booking_created_notifications_are_sent_after_commit(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            self._create(self.start, self.start + timedelta(days=3))

        recipients = sorted(message.to[0] for message in mail.outbox)
        self.assertEqual(recipients, ["amra@example.com", "emir@example.com"])
