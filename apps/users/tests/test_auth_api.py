"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="member@example.com", password="StrongPass123")

    def test_token_pair_is_issued_for_email_login(self) -> None:
        payload = {"email": "member@example.com", "password": "StrongPass123"}

        response = self.client.post(reverse("auth:token_obtain_pair"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

    def test_wrong_password_is_rejected(self) -> None:
        payload = {"email": "member@example.com", "password": "wrong"}

        response = self.client.post(reverse("auth:token_obtain_pair"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_access_token_authenticates_reservation_api(self) -> None:
        tokens = self.client.post(
            reverse("auth:token_obtain_pair"),
            {"email": "member@example.com", "password": "StrongPass123"},
            format="json",
        ).data

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = self.client.get(reverse("reservation-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_superuser_gets_admin_role(self) -> None:
        admin = User.objects.create_superuser(email="admin@example.com", password="AdminPass123")

        self.assertEqual(admin.role, User.RoleChoices.ADMIN)
        self.assertTrue(admin.is_admin())
        self.assertFalse(self.user.is_admin())
