"""User database models."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from rolegate.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from rolegate.core.database.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """User model representing an externally authenticated identity.

    Accounts are created and authenticated upstream; this service only
    needs a stable id to hang role assignments on, plus enough profile
    data for the admin listing.

    Attributes:
        email: Unique email address
        name: Display name
        email_verified: Whether the upstream provider verified the email
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    name: Mapped[str | None] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=True,
    )
    email_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
