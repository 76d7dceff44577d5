"""Workspaces app package.

Catalogue of coworking spaces and their bookable workspaces (desks,
offices, meeting rooms). Each workspace carries its hourly rate, an
availability flag and optional duration discount tiers; the reservations
app reads them when pricing a booking.
"""
