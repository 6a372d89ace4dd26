"""User domain model."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, func
from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """Registered account; email and alias are both unique handles."""

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True)
    )
    alias: str = Field(
        sa_column=Column(String(50), unique=True, nullable=False, index=True)
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False)
    )
    first_name: str = Field(
        sa_column=Column(String(80), nullable=False)
    )
    last_name: str = Field(
        sa_column=Column(String(80), nullable=False)
    )
    birth_date: date = Field(
        sa_column=Column(Date, nullable=False)
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )
    )
    updated_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )
    )
