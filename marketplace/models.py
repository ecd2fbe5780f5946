from __future__ import annotations

import enum
from typing import List, Optional

from sqlalchemy import BigInteger, Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.database import Base


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


# ---------------------------------------------------------------------------
# User (account)
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(20), nullable=False)
    last_name: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    role: Mapped[str] = mapped_column(String(10), nullable=False, default=Role.USER.value)
    image: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # Argon2 hash, never the plaintext
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # lazy="noload" everywhere; services load relationships explicitly
    ads: Mapped[List["Ad"]] = relationship(
        "Ad", back_populates="author", lazy="noload", passive_deletes=True
    )
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="author", lazy="noload", passive_deletes=True
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


# ---------------------------------------------------------------------------
# Ad (listing)
# ---------------------------------------------------------------------------
class Ad(Base):
    __tablename__ = "ads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Foreign key (fixed at creation)
    author_id: Mapped[int] = mapped_column(
        "author", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    author: Mapped["User"] = relationship("User", back_populates="ads", lazy="noload")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="ad", lazy="noload", passive_deletes=True
    )


# ---------------------------------------------------------------------------
# Comment
# ---------------------------------------------------------------------------
class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(String(64), nullable=False)
    # Epoch milliseconds
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    # Author display fields copied from the account when the comment is posted
    author_first_name: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    author_image: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    author_id: Mapped[int] = mapped_column(
        "author", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ad_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ads.id", ondelete="CASCADE"), nullable=False, index=True
    )

    author: Mapped["User"] = relationship("User", back_populates="comments", lazy="noload")
    ad: Mapped["Ad"] = relationship("Ad", back_populates="comments", lazy="noload")
