from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy import BigInteger, Date, DateTime, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


UTC_NOW = sa.text("CURRENT_TIMESTAMP")

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
BigId = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    pass


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("tg_user_id", name="uq_users_tg_user_id"),)

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    # Telegram user id is a signed 64-bit integer.
    tg_user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    username: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [x.value for x in e]),
        nullable=False,
        default=UserRole.USER,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=UTC_NOW, nullable=False)
    last_login: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=UTC_NOW, nullable=False)

    roster: Mapped[list[RosterMember]] = relationship(back_populates="user", passive_deletes=True)
    meetings: Mapped[list[Meeting]] = relationship(back_populates="user", passive_deletes=True)


class RosterMember(Base):
    """A name in the user's global roster, reused when creating meetings."""

    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_members_user_name"),)

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=UTC_NOW, nullable=False)

    user: Mapped[User] = relationship(back_populates="roster")


class Meeting(Base):
    __tablename__ = "meetings"

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=UTC_NOW, nullable=False)

    user: Mapped[User] = relationship(back_populates="meetings")
    members: Mapped[list[MeetingMember]] = relationship(
        back_populates="meeting",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MeetingMember.id",
    )
    expenses: Mapped[list[Expense]] = relationship(
        back_populates="meeting",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class MeetingMember(Base):
    __tablename__ = "meeting_members"
    __table_args__ = (Index("ix_meeting_members_meeting_id", "meeting_id"),)

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    meeting_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Membership is tracked by name, not by roster id.
    member_name: Mapped[str] = mapped_column(String(100), nullable=False)

    meeting: Mapped[Meeting] = relationship(back_populates="members")


class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = (Index("ix_expenses_meeting_date", "meeting_id", "date"),)

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    meeting_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("meetings.id", ondelete="CASCADE"),
        nullable=False,
    )
    spent_on: Mapped[date] = mapped_column("date", Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Smallest currency unit, no fractional subunits.
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payer: Mapped[str] = mapped_column(String(100), nullable=False)
    memo: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=UTC_NOW, nullable=False)

    meeting: Mapped[Meeting] = relationship(back_populates="expenses")
    splits: Mapped[list[ExpenseSplit]] = relationship(
        back_populates="expense",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ExpenseSplit.id",
    )


class ExpenseSplit(Base):
    __tablename__ = "expense_splits"
    __table_args__ = (Index("ix_expense_splits_expense_id", "expense_id"),)

    id: Mapped[int] = mapped_column(BigId, primary_key=True, autoincrement=True)
    expense_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("expenses.id", ondelete="CASCADE"),
        nullable=False,
    )
    member_name: Mapped[str] = mapped_column(String(100), nullable=False)

    expense: Mapped[Expense] = relationship(back_populates="splits")
