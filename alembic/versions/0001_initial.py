"""users, ads and comments

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(20), nullable=False),
        sa.Column("last_name", sa.String(20), nullable=True),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("role", sa.String(10), nullable=False),
        sa.Column("image", sa.String(100), nullable=True),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "ads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(50), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(64), nullable=True),
        sa.Column("image", sa.String(100), nullable=True),
        sa.Column(
            "author", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        ),
    )
    op.create_index("ix_ads_author", "ads", ["author"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("text", sa.String(64), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("author_first_name", sa.String(20), nullable=True),
        sa.Column("author_image", sa.String(100), nullable=True),
        sa.Column(
            "author", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "ad_id", sa.Integer(), sa.ForeignKey("ads.id", ondelete="CASCADE"), nullable=False
        ),
    )
    op.create_index("ix_comments_author", "comments", ["author"])
    op.create_index("ix_comments_ad_id", "comments", ["ad_id"])


def downgrade() -> None:
    op.drop_table("comments")
    op.drop_table("ads")
    op.drop_table("users")
