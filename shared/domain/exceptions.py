"""
Domain Errors

Every failure the booking engine reports to a caller is a DomainError with
a stable machine-readable ``code``. The API layer turns them into HTTP
responses; nothing in the domain knows about status codes.
"""


class DomainError(Exception):
    """Base class for user-displayable domain failures"""

    code = 'domain_error'
    default_message = 'Operation failed.'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class NotFound(DomainError):
    code = 'not_found'
    default_message = 'Object not found.'


class ResourceNotFound(NotFound):
    code = 'resource_not_found'
    default_message = 'Workspace not found.'


class ReservationNotFound(NotFound):
    code = 'reservation_not_found'
    default_message = 'Reservation not found.'


class Forbidden(DomainError):
    code = 'forbidden'
    default_message = 'Access denied.'


class InvalidInterval(DomainError, ValueError):
    code = 'invalid_interval'
    default_message = 'End time must be after start time.'


class ResourceUnavailable(DomainError):
    code = 'resource_unavailable'
    default_message = 'Workspace is not available.'


class SlotConflict(DomainError):
    code = 'slot_conflict'
    default_message = 'This workspace is already reserved for the selected time period.'


class CouponInvalid(DomainError):
    code = 'coupon_invalid'
    default_message = 'Invalid or expired coupon.'


class AlreadyCancelled(DomainError):
    code = 'already_cancelled'
    default_message = 'This reservation is already cancelled.'


class InvalidTransition(DomainError):
    code = 'invalid_transition'
    default_message = 'Reservation cannot move to the requested status.'


class StorageFailure(DomainError):
    code = 'storage_failure'
    default_message = 'Storage is temporarily unavailable, please retry.'
