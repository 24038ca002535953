"""Project-wide constant values."""
from __future__ import annotations

ROLE_STUDENT = "student"
ROLE_ALUMNI = "alumni"
ROLES = frozenset({ROLE_STUDENT, ROLE_ALUMNI})

FETCH_POSTS_FAILED = "Failed to load posts"
FETCH_POST_FAILED = "Failed to load post"
FETCH_REPLIES_FAILED = "Failed to load replies"
FETCH_PROFILE_FAILED = "Failed to load profile"
UPDATE_PROFILE_FAILED = "Failed to update profile"
PROFILE_UPDATED = "Profile updated successfully!"
MUTATION_IN_FLIGHT = "Another request for this item is still in progress"

__all__ = [
    "ROLE_STUDENT",
    "ROLE_ALUMNI",
    "ROLES",
    "FETCH_POSTS_FAILED",
    "FETCH_POST_FAILED",
    "FETCH_REPLIES_FAILED",
    "FETCH_PROFILE_FAILED",
    "UPDATE_PROFILE_FAILED",
    "PROFILE_UPDATED",
    "MUTATION_IN_FLIGHT",
]
