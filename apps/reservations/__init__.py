"""Reservations app package.

Decides whether a workspace can be booked for a time slot, prices the
booking under the workspace's duration discount tiers, redeems and
refunds user coupons along the reservation lifecycle and grants loyalty
coupons once a user's confirmed spend passes the configured threshold.
Conflicting bookings are prevented by locking the workspace row inside
the booking transaction.
"""
