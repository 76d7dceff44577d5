"""API views for the reservation domain."""

from __future__ import annotations

import logging

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users import coupons as coupon_ledger
from apps.users.serializers import CouponSerializer
from shared.domain.exceptions import (
    DomainError,
    Forbidden,
    NotFound,
    SlotConflict,
    StorageFailure,
)

from .application.command_handlers import (
    CancelReservationCommand,
    CancelReservationHandler,
    CreateReservationCommand,
    CreateReservationHandler,
    quote_reservation,
)
from .filters import ReservationFilterSet
from .models import Reservation
from .serializers import QuoteSerializer, ReservationCreateSerializer, ReservationSerializer

logger = logging.getLogger(__name__)

# Checked in order; anything else is a client error.
DOMAIN_ERROR_STATUS = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (SlotConflict, status.HTTP_409_CONFLICT),
    (StorageFailure, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainError) -> int:
    for error_class, http_status in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def is_admin(user) -> bool:
    return bool(getattr(user, "is_admin", None) and user.is_admin())


class IsReservationOwnerOrAdmin(permissions.BasePermission):
    """Владелец брони и администраторы имеют доступ к бронированию."""

    message = "You can only access your own reservations."

    def has_object_permission(self, request, view, obj: Reservation):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return is_admin(user) or obj.user_id == user.id


class ReservationViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для бронирования рабочих мест, отмены и купонов пользователя."""

    queryset = Reservation.objects.select_related("user", "workspace", "workspace__coworking").all()
    permission_classes = [permissions.IsAuthenticated, IsReservationOwnerOrAdmin]
    filterset_class = ReservationFilterSet
    lookup_value_regex = r"\d+"

    def get_serializer_class(self):  # type: ignore
        if self.action in ("create", "quote"):
            return ReservationCreateSerializer
        if self.action == "coupons":
            return CouponSerializer
        return ReservationSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        # Detail lookups see every row so foreign reservations answer 403, not 404.
        if is_admin(user) or self.action == "retrieve":
            return qs
        return qs.filter(user=user)

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, DomainError):
            http_status = status_for(exc)
            logger.info(f"{self.action} rejected with {exc.code}: {exc}")
            return Response({"detail": str(exc), "code": exc.code}, status=http_status)
        return super().handle_exception(exc)

    def _command_from_request(self, request) -> CreateReservationCommand:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return CreateReservationCommand(
            user_id=request.user.id,
            workspace_id=data["workspace_id"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            coupon_code=data.get("coupon_code"),
        )

    def create(self, request, *args, **kwargs):  # type: ignore
        command = self._command_from_request(request)
        reservation = CreateReservationHandler().handle(command)
        read_serializer = ReservationSerializer(reservation, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["put"])
    def cancel(self, request, pk=None):  # type: ignore
        reservation = CancelReservationHandler().handle(
            CancelReservationCommand(
                reservation_id=int(pk),
                requester_id=request.user.id,
                requester_is_admin=is_admin(request.user),
            )
        )
        return Response(ReservationSerializer(reservation, context=self.get_serializer_context()).data)

    @action(detail=False, methods=["get"], url_path="user/coupons")
    def coupons(self, request):  # type: ignore
        valid = coupon_ledger.list_valid(coupon_ledger.coupons_for_user(request.user.id))
        return Response(CouponSerializer(valid, many=True).data)

    @action(detail=False, methods=["post"])
    def quote(self, request):  # type: ignore
        quote = quote_reservation(self._command_from_request(request))
        return Response(QuoteSerializer(quote).data)
