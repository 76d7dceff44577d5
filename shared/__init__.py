"""
Shared Kernel

Value objects, domain errors, domain events and the transactional plumbing
(unit of work, message bus) shared by the users, workspaces and
reservations apps.
"""
