"""create_users_and_patients

Revision ID: 5c1d2e7a9b40
Revises:
Create Date: 2026-10-17 10:12:41.118203

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5c1d2e7a9b40"
down_revision = None
branch_labels = None
depends_on = None


VITALS = (
    "body_weight_kg", "height_cm", "hemoglobin", "sbp", "dbp", "wbc", "rbc",
    "platelet", "bmi", "bfr_percent", "body_water_percent", "bone_mass_kg",
    "metabolic_age", "v_fat_percent", "protein_mass_kg", "muscle_mass_kg",
)


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "patients",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("date_of_appointment", sa.DateTime(timezone=True), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("aadhar_no", sa.String(length=12), nullable=False),
        sa.Column("contact_no", sa.String(length=15), nullable=False),
        sa.Column("diseases", sa.Text(), nullable=True),
        sa.Column("doctor_name", sa.String(length=200), nullable=True),
        sa.Column("blood_group", sa.String(length=10), nullable=True),
        *[sa.Column(name, sa.Float(), nullable=True) for name in VITALS],
        sa.Column("diabetes", sa.String(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(op.f("ix_patients_aadhar_no"), "patients", ["aadhar_no"], unique=True)
    op.create_index(op.f("ix_patients_name"), "patients", ["name"], unique=False)
    op.create_index(
        op.f("ix_patients_date_of_appointment"), "patients", ["date_of_appointment"], unique=False
    )


def downgrade():
    op.drop_index(op.f("ix_patients_date_of_appointment"), table_name="patients")
    op.drop_index(op.f("ix_patients_name"), table_name="patients")
    op.drop_index(op.f("ix_patients_aadhar_no"), table_name="patients")
    op.drop_table("patients")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
