"""Users app package.

Defines the custom user model (email login, ``user``/``admin`` role) and
the user-owned coupons together with the coupon ledger that redeems and
refunds them. Use ``apps.users.models.CustomUser`` as the AUTH_USER_MODEL
throughout the project.
"""
