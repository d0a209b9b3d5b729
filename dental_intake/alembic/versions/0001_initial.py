"""Initial intake schema: leads, diagnosis events and second opinions."""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "funnel_leads",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("rut", sa.String(length=20)),
        sa.Column("reason", sa.String(length=1000)),
        sa.Column("origin", sa.String(length=50), nullable=False),
        sa.Column("route_key", sa.String(length=50)),
        sa.Column("utm_source", sa.String(length=100), nullable=False),
        sa.Column("utm_medium", sa.String(length=100)),
        sa.Column("utm_campaign", sa.String(length=100)),
        sa.Column("landing_path", sa.String(length=255)),
        sa.Column("dentalink_patient_id", sa.String(length=50)),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_funnel_leads_email", "funnel_leads", ["email"])

    op.create_table(
        "diagnosis_events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("input_key", sa.String(length=64), nullable=False),
        sa.Column("reason", sa.String(length=30), nullable=False),
        sa.Column("urgency", sa.String(length=30), nullable=False),
        sa.Column("has_photo", sa.Boolean(), nullable=False),
        sa.Column("symptom_ids", _json(), nullable=False),
        sa.Column("route_key", sa.String(length=50), nullable=False),
        sa.Column("result_json", _json(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_diagnosis_events_input_key", "diagnosis_events", ["input_key"])
    op.create_index("ix_diagnosis_events_route_key", "diagnosis_events", ["route_key"])

    op.create_table(
        "second_opinions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("current_diagnosis", sa.Text()),
        sa.Column("external_budget_amount", sa.Integer()),
        sa.Column("external_clinic_name", sa.String(length=200)),
        sa.Column("flow_type", sa.String(length=30), nullable=False),
        sa.Column("status", sa.String(length=30), nullable=False),
        sa.Column("ia_report", _json()),
        sa.Column("ia_completed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_second_opinions_email", "second_opinions", ["email"])

    op.create_table(
        "second_opinion_files",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "second_opinion_id",
            sa.String(length=36),
            sa.ForeignKey("second_opinions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=False),
        sa.Column("size_bytes", sa.Integer(), nullable=False),
        sa.Column("stored_name", sa.String(length=255), nullable=False),
        sa.Column("stored_path", sa.String(length=1024), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_second_opinion_files_second_opinion_id", "second_opinion_files", ["second_opinion_id"])


def downgrade():
    op.drop_index("ix_second_opinion_files_second_opinion_id", table_name="second_opinion_files")
    op.drop_table("second_opinion_files")
    op.drop_index("ix_second_opinions_email", table_name="second_opinions")
    op.drop_table("second_opinions")
    op.drop_index("ix_diagnosis_events_route_key", table_name="diagnosis_events")
    op.drop_index("ix_diagnosis_events_input_key", table_name="diagnosis_events")
    op.drop_table("diagnosis_events")
    op.drop_index("ix_funnel_leads_email", table_name="funnel_leads")
    op.drop_table("funnel_leads")
