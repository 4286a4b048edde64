"""Pick lists, hub apps and corporate content

Revision ID: 0004_content
Revises: 0003_locations
Create Date: 2026-10-17

Corporate rows keep their owner through account soft delete; a hard
delete of the account nulls owner_id.
"""

from alembic import op
import sqlalchemy as sa

revision = "0004_content"
down_revision = "0003_locations"
branch_labels = None
depends_on = None

_CORPORATE_TABLES = (
    "corporate_ads",
    "popup_ads",
    "terms_conditions",
    "about_us",
    "galleries",
    "contact_us",
    "social_links",
    "feedback",
    "awards",
)


def _id():
    return sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True)


def _active():
    return sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true())


def _created():
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def _owner():
    return sa.Column(
        "owner_id",
        sa.Integer(),
        sa.ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
    )


def upgrade() -> None:
    # -- pick lists ---------------------------------------------------------
    op.create_table(
        "categories",
        _id(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("code", sa.String(45), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        _active(),
        _created(),
    )
    op.create_table(
        "languages",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("code", sa.String(10), nullable=False, unique=True),
        sa.Column("speakers", sa.String(50), nullable=True),
        _active(),
        _created(),
    )
    op.create_table(
        "education_levels",
        _id(),
        sa.Column("level", sa.String(100), nullable=False, unique=True),
        _active(),
        _created(),
    )
    op.create_table(
        "professions",
        _id(),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("category", sa.String(100), nullable=False),
        _active(),
        _created(),
    )

    # -- hub apps -----------------------------------------------------------
    op.create_table(
        "app_groups",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("apps_name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(45), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        _created(),
    )
    op.create_table(
        "app_details",
        _id(),
        sa.Column(
            "app_group_id",
            sa.Integer(),
            sa.ForeignKey("app_groups.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("icon", sa.String(255), nullable=True),
        sa.Column("logo", sa.String(255), nullable=True),
        sa.Column("name_image", sa.String(255), nullable=True),
        sa.Column("background_color", sa.String(32), nullable=True),
        sa.Column("banner", sa.String(255), nullable=True),
        sa.Column("url", sa.String(255), nullable=True),
    )
    op.create_table(
        "app_accounts",
        _id(),
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "app_group_id",
            sa.Integer(),
            sa.ForeignKey("app_groups.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        _created(),
    )
    op.create_index("ix_app_accounts_app_group_id", "app_accounts", ["app_group_id"])

    # -- corporate content --------------------------------------------------
    op.create_table(
        "corporate_ads",
        _id(),
        _owner(),
        sa.Column("ad_type", sa.String(50), nullable=False),
        sa.Column("ad_position", sa.String(50), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("url", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        _active(),
        _created(),
    )
    op.create_index("ix_corporate_ads_ad_type", "corporate_ads", ["ad_type"])
    op.create_table(
        "popup_ads",
        _id(),
        _owner(),
        sa.Column("side_ads", sa.Text(), nullable=True),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        _active(),
        _created(),
    )
    op.create_table(
        "terms_conditions",
        _id(),
        _owner(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("version", sa.String(20), nullable=False, server_default="1.0"),
        _active(),
        _created(),
    )
    op.create_table(
        "about_us",
        _id(),
        _owner(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        _active(),
        _created(),
    )
    op.create_table(
        "galleries",
        _id(),
        _owner(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _active(),
        _created(),
    )
    op.create_table(
        "gallery_images",
        _id(),
        sa.Column(
            "gallery_id",
            sa.Integer(),
            sa.ForeignKey("galleries.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("image", sa.String(255), nullable=False),
        sa.Column("caption", sa.String(255), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        _created(),
    )
    op.create_index("ix_gallery_images_gallery_id", "gallery_images", ["gallery_id"])
    op.create_table(
        "contact_us",
        _id(),
        _owner(),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("website", sa.String(255), nullable=True),
        sa.Column("map_location", sa.Text(), nullable=True),
        sa.Column("working_hours", sa.String(255), nullable=True),
        _active(),
        _created(),
    )
    op.create_table(
        "social_links",
        _id(),
        _owner(),
        sa.Column("platform", sa.String(50), nullable=False),
        sa.Column("url", sa.String(255), nullable=False),
        sa.Column("icon", sa.String(255), nullable=True),
        _active(),
        _created(),
    )
    op.create_table(
        "feedback",
        _id(),
        _owner(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(100), nullable=False),
        sa.Column("feedback_type", sa.String(50), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        _created(),
    )
    op.create_table(
        "awards",
        _id(),
        _owner(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("tag_line", sa.String(255), nullable=True),
        _active(),
        _created(),
    )
    for table in _CORPORATE_TABLES:
        op.create_index(f"ix_{table}_owner_id", table, ["owner_id"])


def downgrade() -> None:
    op.drop_table("gallery_images")
    for table in reversed(_CORPORATE_TABLES):
        op.drop_table(table)
    op.drop_table("app_accounts")
    op.drop_table("app_details")
    op.drop_table("app_groups")
    op.drop_table("professions")
    op.drop_table("education_levels")
    op.drop_table("languages")
    op.drop_table("categories")
