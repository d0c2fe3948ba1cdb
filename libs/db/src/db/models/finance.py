from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: categories
# ---------------------------


class CategoryRecord(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Owner scope; every query in the application filters on it.
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Presentation tags; unknown values fall back to defaults at render time.
    icon: Mapped[str] = mapped_column(String(32), nullable=False, server_default="wallet")
    color: Mapped[str] = mapped_column(String(32), nullable=False, server_default="green")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


# ---------------------------
# Core: transactions
# ---------------------------


class TransactionRecord(Base):
    """A transaction row from either schema iteration.

    - GraphQL/Prisma rows fill ``amount_cents`` and use ``INCOME``/``EXPENSE``.
    - Supabase rows fill ``amount`` (reais) and use ``entrada``/``saida``.

    ``date`` is kept as text: Prisma stored ISO timestamps there while
    Supabase stored bare ``YYYY-MM-DD`` values. The core parses both.
    """

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(String(40), nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    amount_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "type in ('INCOME','EXPENSE','entrada','saida')",
            name="ck_transactions_type",
        ),
        CheckConstraint(
            "amount_cents IS NULL OR amount_cents >= 0",
            name="ck_transactions_amount_cents",
        ),
        CheckConstraint(
            "amount IS NULL OR amount >= 0",
            name="ck_transactions_amount",
        ),
        CheckConstraint(
            "amount_cents IS NOT NULL OR amount IS NOT NULL",
            name="ck_transactions_has_amount",
        ),
    )


__all__ = [
    "Base",
    "CategoryRecord",
    "TransactionRecord",
]
