"""Location hierarchy – continents, countries, states, districts

Revision ID: 0003_locations
Revises: 0002_audit_logs
Create Date: 2026-10-17

Parents cannot be removed while children reference them (RESTRICT).
"""

from alembic import op
import sqlalchemy as sa

revision = "0003_locations"
down_revision = "0002_audit_logs"
branch_labels = None
depends_on = None


def _common():
    return [
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(45), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.true()),
    ]


def _parent(column, table):
    return sa.Column(
        column,
        sa.Integer(),
        sa.ForeignKey(f"{table}.id", ondelete="RESTRICT"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "continents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        *_common(),
    )

    op.create_table(
        "countries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _parent("continent_id", "continents"),
        *_common(),
        sa.Column("currency", sa.String(45), nullable=True),
        sa.Column("flag", sa.Text(), nullable=True),
        sa.Column("phone_code", sa.String(100), nullable=True),
        sa.Column("nationality", sa.String(100), nullable=True),
    )
    op.create_index("ix_countries_continent_id", "countries", ["continent_id"])

    op.create_table(
        "states",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _parent("country_id", "countries"),
        *_common(),
    )
    op.create_index("ix_states_country_id", "states", ["country_id"])

    op.create_table(
        "districts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _parent("state_id", "states"),
        *_common(),
    )
    op.create_index("ix_districts_state_id", "districts", ["state_id"])


def downgrade() -> None:
    op.drop_table("districts")
    op.drop_table("states")
    op.drop_table("countries")
    op.drop_table("continents")
