"""SQLAlchemy declarative base and patient table."""

from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class PatientRecord(Base):
    """Row in the ``patients`` table."""

    __tablename__ = "patients"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # The unique index is what actually enforces one patient per email
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
