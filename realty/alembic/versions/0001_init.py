"""init catalog schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa


revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

UNIT_KINDS = ("apartment", "villa", "twin-house", "town-house", "studio")
LIVE_ROWS = sa.text("deleted_at IS NULL")


def _auditable_columns():
    return [
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade():
    op.create_table(
        "working_areas",
        *_auditable_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("retired_name", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
    )
    op.create_index("ix_working_areas_deleted_at", "working_areas", ["deleted_at"])
    op.create_index(
        "uq_working_areas_live_name",
        "working_areas",
        ["name"],
        unique=True,
        postgresql_where=LIVE_ROWS,
        sqlite_where=LIVE_ROWS,
    )

    op.create_table(
        "properties",
        *_auditable_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("retired_name", sa.String(length=255), nullable=True),
        sa.Column("owner", sa.String(length=255), nullable=False),
        sa.Column("cover_url", sa.Text(), nullable=False),
        sa.Column("down_payment_percentage", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("number_of_year", sa.Integer(), nullable=False),
        sa.Column("working_area_id", sa.String(length=36), sa.ForeignKey("working_areas.id"), nullable=False),
    )
    op.create_index("ix_properties_deleted_at", "properties", ["deleted_at"])
    op.create_index("ix_properties_working_area_id", "properties", ["working_area_id"])
    op.create_index(
        "uq_properties_live_name",
        "properties",
        ["name"],
        unique=True,
        postgresql_where=LIVE_ROWS,
        sqlite_where=LIVE_ROWS,
    )

    op.create_table(
        "units",
        *_auditable_columns(),
        sa.Column("type", sa.Enum(*UNIT_KINDS, name="unit_kind"), nullable=False, server_default="apartment"),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("is_ready", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("delivery_date", sa.String(length=40), nullable=True),
        sa.Column("bedrooms", sa.Integer(), nullable=False),
        sa.Column("bathrooms", sa.Integer(), nullable=False),
        sa.Column("square_footage", sa.Float(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column(
            "property_id",
            sa.String(length=36),
            sa.ForeignKey("properties.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_units_deleted_at", "units", ["deleted_at"])
    op.create_index("ix_units_property_id", "units", ["property_id"])

    op.create_table(
        "supports",
        *_auditable_columns(),
        sa.Column("whatsapp_phone", sa.String(length=40), nullable=False),
        sa.Column("phone_number", sa.String(length=40), nullable=False),
        sa.Column("mail_us", sa.String(length=255), nullable=False),
    )
    op.create_index("ix_supports_deleted_at", "supports", ["deleted_at"])


def downgrade():
    op.drop_table("supports")
    op.drop_table("units")
    op.drop_table("properties")
    op.drop_table("working_areas")
    sa.Enum(name="unit_kind").drop(op.get_bind(), checkfirst=True)
