"""SQLAlchemy ORM model for the users table."""

from sqlalchemy import CheckConstraint, Identity, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, CreatedAtMixin


class UserModel(Base, CreatedAtMixin):
    """ORM model for the users table.

    Note: email carries the unique index ix_users_email. It is the only
    guard against two concurrent creates with the same address, so the
    repository relies on it rather than on a lookup before inserting.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("age >= 0 AND age <= 150", name="ck_users_age_range"),
        CheckConstraint("sex IN ('male', 'female', 'other')", name="ck_users_sex"),
    )

    id: Mapped[int] = mapped_column(Integer, Identity(), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    surname: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True
    )
    sex: Mapped[str | None] = mapped_column(String(16), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<UserModel(id={self.id}, email={self.email})>"
