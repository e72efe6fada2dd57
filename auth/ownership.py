"""
auth/ownership.py -- Resource-level ownership check.

assert_owner() runs after the resource has been loaded (a missing resource
is a 404 decided by the caller) and before it is modified or deleted.

A non-owner gets the same 401 "Authentication error. Please log in again."
response an unauthenticated caller would, which is what existing clients
expect. Deployments that prefer the distinct 403 ForbiddenError set
OWNERSHIP_FORBIDDEN=true; the flag is passed in as `forbidden`.

Layer rule: no imports from api/ or notes/. Resources are matched
structurally: anything with a `user_id` attribute qualifies.
"""

from __future__ import annotations

import logging
from typing import Protocol

from core.exceptions import ForbiddenError, OwnershipError

logger = logging.getLogger("notekeeper.auth.ownership")


class Owned(Protocol):
    user_id: str


def assert_owner(user_id: str, resource: Owned, forbidden: bool = False) -> None:
    """Raise unless `user_id` owns `resource`.

    Raises:
        OwnershipError: mismatch, when forbidden is False (HTTP 401).
        ForbiddenError: mismatch, when forbidden is True (HTTP 403).
    """
    if resource.user_id == user_id:
        return
    logger.error("Ownership check failed for user %s", user_id)
    if forbidden:
        raise ForbiddenError()
    raise OwnershipError()
