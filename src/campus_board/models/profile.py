# src/campus_board/models/profile.py
"""Profiles mirrored from the identity service."""

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_board.core.roles import Role
from campus_board.db.session import Base

from .mixins import CreatedAtMixin, UuidPrimaryKeyMixin


class Profile(UuidPrimaryKeyMixin, CreatedAtMixin, Base):
    """A user's display data and role.

    The identity service owns these rows; the application only reads them.
    """

    __tablename__ = "profiles"

    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True, unique=True)
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=16),
        nullable=False,
        default=Role.MEMBER,
    )
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
