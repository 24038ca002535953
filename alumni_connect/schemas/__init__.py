"""Convenience exports for schema layer."""
from .posts import Author, Post, PostCreate, Reply, ReplyCreate
from .profiles import (
    AlumniProfileUpdate,
    Experience,
    ExperienceUpdate,
    Role,
    Skill,
    StudentProfileUpdate,
    UserProfile,
)

__all__ = [
    "Author",
    "Post",
    "PostCreate",
    "Reply",
    "ReplyCreate",
    "Role",
    "Experience",
    "ExperienceUpdate",
    "Skill",
    "UserProfile",
    "StudentProfileUpdate",
    "AlumniProfileUpdate",
]
