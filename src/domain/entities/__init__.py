"""
StudIQ Domain Entities

Each entity in its own file.
"""

from .user import User
from .password_reset_token import PasswordResetToken
from .course_material import CourseMaterial

__all__ = [
    "User",
    "PasswordResetToken",
    "CourseMaterial",
]
