"""initial schema: authors, users, books, audit trails

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-09-16
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _auditable_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(length=100), nullable=False),
        sa.Column("updated_by", sa.String(length=100), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "authors",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        *_auditable_columns(),
    )
    op.create_index("ix_authors_name", "authors", ["name"])

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(length=200), nullable=False),
        *_auditable_columns(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_credentials",
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
    )

    op.create_table(
        "books",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("authors.id"), nullable=False),
        *_auditable_columns(),
    )
    op.create_index("ix_books_author_id", "books", ["author_id"])

    op.create_table(
        "audit_trails",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("trail_type", sa.String(length=16), nullable=False),
        sa.Column("timestamp_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("entity_name", sa.String(length=100), nullable=False),
        sa.Column("primary_key", sa.String(length=100), nullable=True),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("changed_field", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_audit_trails_entity_name", "audit_trails", ["entity_name"])
    op.create_index("ix_audit_trails_actor_id", "audit_trails", ["actor_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_trails_actor_id", table_name="audit_trails")
    op.drop_index("ix_audit_trails_entity_name", table_name="audit_trails")
    op.drop_table("audit_trails")

    op.drop_index("ix_books_author_id", table_name="books")
    op.drop_table("books")

    op.drop_table("user_credentials")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    op.drop_index("ix_authors_name", table_name="authors")
    op.drop_table("authors")
