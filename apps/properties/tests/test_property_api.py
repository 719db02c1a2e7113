"""Tests for property listing, search and ownership rules."""

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import Property

User = get_user_model()


class PropertyAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(username="landlord", password="StrongPass123")
        self.other = User.objects.create_user(username="neighbour", password="StrongPass123")
        self.apartment = Property.objects.create(
            owner=self.owner,
            name="Apartment Bascarsija",
            property_type="apartment",
            location="Sarajevo",
            nightly_rate=Decimal("80.00"),
            max_guests=3,
        )
        self.house = Property.objects.create(
            owner=self.owner,
            name="Stone house",
            property_type="house",
            location="Mostar",
            renting_type=Property.RentingType.MONTHLY,
            monthly_rent=Decimal("750.00"),
            max_guests=6,
            cancellation_policy=Property.CancellationPolicy.FLEXIBLE,
        )

    def test_anonymous_can_list_properties(self) -> None:
        response = self.client.get(reverse("property-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["count"], 2)

    def test_filter_by_location_and_guests(self) -> None:
        response = self.client.get(reverse("property-list"), {"location": "saraj"})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["name"], "Apartment Bascarsija")

        response = self.client.get(reverse("property-list"), {"guests": 5})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["name"], "Stone house")

    def test_filter_by_renting_type_and_price(self) -> None:
        response = self.client.get(reverse("property-list"), {"renting_type": "Monthly"})
        self.assertEqual([item["id"] for item in response.data["results"]], [self.house.id])

        response = self.client.get(reverse("property-list"), {"price_min": "50", "price_max": "100"})
        self.assertEqual([item["id"] for item in response.data["results"]], [self.apartment.id])

    def test_property_detail(self) -> None:
        response = self.client.get(reverse("property-detail", args=[self.house.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["owner_id"], self.owner.id)
        self.assertEqual(response.data["cancellation_policy"], "Flexible")
        self.assertEqual(response.data["monthly_rent"], "750.00")

    def test_create_sets_owner_and_normalizes_currency(self) -> None:
        self.client.force_authenticate(self.other)
        payload = {
            "name": "Villa Neum",
            "property_type": "villa",
            "location": "Neum",
            "nightly_rate": "250.00",
            "currency": "eur",
            "max_guests": 8,
        }

        response = self.client.post(reverse("property-list"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        created = Property.objects.get(pk=response.data["id"])
        self.assertEqual(created.owner, self.other)
        self.assertEqual(created.currency, "EUR")

    @override_settings(ERENTS_CURRENCY="EUR")
    def test_currency_defaults_to_configured_setting(self) -> None:
        self.client.force_authenticate(self.other)
        payload = {"name": "Cabin", "location": "Jahorina", "nightly_rate": "90.00"}

        response = self.client.post(reverse("property-list"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Property.objects.get(pk=response.data["id"]).currency, "EUR")
        self.assertEqual(self.apartment.currency, "BAM")

    def test_create_rejects_unsupported_currency(self) -> None:
        self.client.force_authenticate(self.other)
        payload = {"name": "Cabin", "location": "Jahorina", "currency": "GBP"}

        response = self.client.post(reverse("property-list"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("currency", response.data)

    def test_anonymous_cannot_create(self) -> None:
        response = self.client.post(reverse("property-list"), {"name": "X", "location": "Y"}, format="json")

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_only_owner_can_update(self) -> None:
        url = reverse("property-detail", args=[self.apartment.id])

        self.client.force_authenticate(self.other)
        response = self.client.patch(url, {"nightly_rate": "1.00"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

        self.client.force_authenticate(self.owner)
        response = self.client.patch(url, {"nightly_rate": "95.00"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.apartment.refresh_from_db()
        self.assertEqual(self.apartment.nightly_rate, Decimal("95.00"))
