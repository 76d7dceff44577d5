"""Integration tests for reservation API endpoints."""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.reservations.models import Reservation
from apps.users.models import Coupon, User
from apps.workspaces.models import Coworking, Workspace


class ReservationAPITests(APITestCase):
    """Covers бронирование, конфликты, купоны и отмену."""

    def setUp(self) -> None:
        self.member = User.objects.create_user(email="member@example.com", password="MemberPass123")
        self.other = User.objects.create_user(email="other@example.com", password="OtherPass123")
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="AdminPass123",
            role=User.RoleChoices.ADMIN,
        )
        self.coworking = Coworking.objects.create(
            name="Hub Podil",
            address="вул. Сагайдачного, 1",
            description="Open space на Подоле.",
            opens_at=time(8, 0),
            closes_at=time(22, 0),
        )
        self.workspace = Workspace.objects.create(
            coworking=self.coworking,
            name="Desk 1",
            type=Workspace.Type.DESK,
            price_per_hour=Decimal("10.00"),
            discount_day=10,
        )
        self.coupon = Coupon.objects.create(
            user=self.member,
            code="SPRING15",
            discount_percent=15,
            expiry_date=timezone.now() + timedelta(days=30),
        )
        self.start = timezone.now().replace(minute=0, second=0, microsecond=0) + timedelta(days=1)
        self.client.force_authenticate(self.member)
        self.list_url = reverse("reservation-list")

    def _payload(self, start_hour: int, end_hour: int, coupon_code: str | None = None) -> dict:
        payload = {
            "workspace_id": self.workspace.id,
            "start_time": (self.start + timedelta(hours=start_hour)).isoformat(),
            "end_time": (self.start + timedelta(hours=end_hour)).isoformat(),
        }
        if coupon_code is not None:
            payload["coupon_code"] = coupon_code
        return payload

    def _book(self, start_hour: int, end_hour: int, coupon_code: str | None = None):
        return self.client.post(self.list_url, self._payload(start_hour, end_hour, coupon_code), format="json")

    def _cancel(self, reservation_id: int):
        return self.client.put(reverse("reservation-cancel", args=[reservation_id]), format="json")

    # Creation

    def test_member_can_book_with_tier_discount_and_coupon(self) -> None:
        response = self._book(0, 10, coupon_code="SPRING15")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["total_price"], "76.50")
        self.assertEqual(response.data["discount_applied"], 10)
        self.assertEqual(response.data["coupon_code"], "SPRING15")
        self.assertEqual(response.data["status"], Reservation.Status.CONFIRMED)
        self.assertEqual(response.data["user_id"], self.member.id)
        self.assertEqual(response.data["workspace_id"], self.workspace.id)
        self.assertEqual(response.data["workspace"]["coworking_name"], "Hub Podil")
        self.coupon.refresh_from_db()
        self.assertTrue(self.coupon.used)

    def test_committed_booking_is_reported_as_created(self) -> None:
        response = self._book(0, 10, coupon_code="SPRING15")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        stored = Reservation.objects.get()
        self.assertEqual(response.data["id"], stored.pk)
        self.assertEqual(response.data["total_price"], str(stored.total_price))
        self.assertEqual(response.data["user_email"], "member@example.com")

    def test_short_booking_without_coupon_has_no_discount(self) -> None:
        response = self._book(0, 2)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["total_price"], "20.00")
        self.assertEqual(response.data["discount_applied"], 0)
        self.assertIsNone(response.data["coupon_code"])

    def test_overlapping_booking_is_rejected(self) -> None:
        self.assertEqual(self._book(0, 3).status_code, status.HTTP_201_CREATED)

        self.client.force_authenticate(self.other)
        response = self._book(2, 4)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "slot_conflict")
        self.assertEqual(Reservation.objects.count(), 1)

    def test_back_to_back_bookings_are_allowed(self) -> None:
        self.assertEqual(self._book(0, 3).status_code, status.HTTP_201_CREATED)

        response = self._book(3, 5)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Reservation.objects.count(), 2)

    def test_end_before_start_is_rejected(self) -> None:
        response = self._book(4, 2)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_interval")

    def test_unavailable_workspace_cannot_be_booked(self) -> None:
        self.workspace.available = False
        self.workspace.save(update_fields=["available"])

        response = self._book(0, 2)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "resource_unavailable")

    def test_unknown_workspace_is_not_found(self) -> None:
        payload = self._payload(0, 2)
        payload["workspace_id"] = self.workspace.id + 999

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data["code"], "resource_not_found")

    def test_invalid_coupon_fails_whole_booking(self) -> None:
        response = self._book(0, 2, coupon_code="NOPE")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "coupon_invalid")
        self.assertFalse(Reservation.objects.exists())

    def test_coupon_of_another_user_is_invalid(self) -> None:
        self.client.force_authenticate(self.other)

        response = self._book(0, 2, coupon_code="SPRING15")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.coupon.refresh_from_db()
        self.assertFalse(self.coupon.used)

    def test_coupon_cannot_be_used_twice(self) -> None:
        self.assertEqual(self._book(0, 2, coupon_code="SPRING15").status_code, status.HTTP_201_CREATED)

        response = self._book(5, 7, coupon_code="SPRING15")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "coupon_invalid")

    def test_missing_fields_are_validation_errors(self) -> None:
        response = self.client.post(self.list_url, {"workspace_id": self.workspace.id}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("start_time", response.data)

    def test_anonymous_requests_are_rejected(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    # Cancellation

    def test_cancel_refunds_coupon_and_second_cancel_fails(self) -> None:
        reservation_id = self._book(0, 10, coupon_code="SPRING15").data["id"]

        response = self._cancel(reservation_id)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Reservation.Status.CANCELLED)
        self.assertIsNotNone(response.data["cancelled_at"])
        self.coupon.refresh_from_db()
        self.assertFalse(self.coupon.used)

        # The refunded coupon is spent again; a repeated cancel must not free it.
        self.assertEqual(self._book(20, 22, coupon_code="SPRING15").status_code, status.HTTP_201_CREATED)
        repeat = self._cancel(reservation_id)

        self.assertEqual(repeat.status_code, status.HTTP_400_BAD_REQUEST, repeat.data)
        self.assertEqual(repeat.data["code"], "already_cancelled")
        self.coupon.refresh_from_db()
        self.assertTrue(self.coupon.used)

    def test_cancelled_slot_can_be_booked_again(self) -> None:
        reservation_id = self._book(0, 3).data["id"]
        self.assertEqual(self._cancel(reservation_id).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(self.other)
        response = self._book(0, 3)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_other_user_cannot_cancel(self) -> None:
        reservation_id = self._book(0, 3).data["id"]

        self.client.force_authenticate(self.other)
        response = self._cancel(reservation_id)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(Reservation.objects.get(pk=reservation_id).status, Reservation.Status.CONFIRMED)

    def test_admin_cancel_refunds_owner_coupon(self) -> None:
        reservation_id = self._book(0, 3, coupon_code="SPRING15").data["id"]

        self.client.force_authenticate(self.admin)
        response = self._cancel(reservation_id)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.coupon.refresh_from_db()
        self.assertFalse(self.coupon.used)

    def test_cancel_unknown_reservation_is_not_found(self) -> None:
        response = self._cancel(12345)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    # Reading

    def test_owner_can_retrieve_reservation(self) -> None:
        reservation_id = self._book(0, 3).data["id"]

        response = self.client.get(reverse("reservation-detail", args=[reservation_id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["id"], reservation_id)

    def test_other_user_gets_forbidden_on_retrieve(self) -> None:
        reservation_id = self._book(0, 3).data["id"]

        self.client.force_authenticate(self.other)
        response = self.client.get(reverse("reservation-detail", args=[reservation_id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_shows_own_reservations_and_admin_sees_all(self) -> None:
        self._book(0, 2)
        self.client.force_authenticate(self.other)
        self._book(3, 5)

        own = self.client.get(self.list_url)
        self.client.force_authenticate(self.admin)
        everything = self.client.get(self.list_url)

        self.assertEqual(len(own.data), 1)
        self.assertEqual(own.data[0]["user_id"], self.other.id)
        self.assertEqual(own.data[0]["user_email"], "other@example.com")
        self.assertEqual(len(everything.data), 2)
        # Latest start first
        self.assertEqual(everything.data[0]["user_id"], self.other.id)
        self.assertEqual(
            {item["user_email"] for item in everything.data},
            {"member@example.com", "other@example.com"},
        )

    def test_list_can_be_filtered_by_status(self) -> None:
        cancelled_id = self._book(0, 2).data["id"]
        self._book(3, 5)
        self._cancel(cancelled_id)

        response = self.client.get(self.list_url, {"status": Reservation.Status.CANCELLED})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["id"] for item in response.data], [cancelled_id])

    def test_user_coupons_lists_only_valid_coupons(self) -> None:
        Coupon.objects.create(
            user=self.member,
            code="OLD",
            discount_percent=5,
            expiry_date=timezone.now() - timedelta(days=1),
        )
        Coupon.objects.create(
            user=self.member,
            code="USED",
            discount_percent=5,
            expiry_date=timezone.now() + timedelta(days=1),
            used=True,
        )

        response = self.client.get(reverse("reservation-coupons"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["code"] for item in response.data], ["SPRING15"])

    # Quote

    def test_quote_prices_without_consuming_coupon(self) -> None:
        response = self.client.post(
            reverse("reservation-quote"),
            self._payload(0, 10, coupon_code="SPRING15"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["hours"], "10.00")
        self.assertEqual(response.data["base_price"], "100.00")
        self.assertEqual(response.data["discount_percent"], 10)
        self.assertEqual(response.data["discount_amount"], "10.00")
        self.assertEqual(response.data["coupon_discount"], "13.50")
        self.assertEqual(response.data["final_price"], "76.50")
        self.coupon.refresh_from_db()
        self.assertFalse(self.coupon.used)
        self.assertFalse(Reservation.objects.exists())
