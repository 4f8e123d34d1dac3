"""create polls, poll options and votes

Revision ID: 3f9c1a7d2b80
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1a7d2b80"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "polls",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("creator_name", sa.String(length=255), nullable=False),
        sa.Column("creator_email", sa.String(length=255), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("deadline", sa.DateTime(), nullable=False),
        sa.Column("show_realtime_results", sa.Boolean(), nullable=False),
        sa.Column("access_code", sa.String(length=8), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_polls_access_code", "polls", ["access_code"], unique=True)

    op.create_table(
        "poll_options",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("poll_id", sa.String(length=36), nullable=False),
        sa.Column("option_text", sa.String(length=500), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["poll_id"], ["polls.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_poll_options_poll_id", "poll_options", ["poll_id"])

    op.create_table(
        "votes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("poll_id", sa.String(length=36), nullable=False),
        sa.Column("poll_option_id", sa.String(length=36), nullable=False),
        sa.Column("voter_name", sa.String(length=255), nullable=False),
        sa.Column("voter_email", sa.String(length=255), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["poll_id"], ["polls.id"]),
        sa.ForeignKeyConstraint(["poll_option_id"], ["poll_options.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("poll_id", "voter_email", name="uq_votes_poll_voter_email"),
    )
    op.create_index("ix_votes_poll_id", "votes", ["poll_id"])
    op.create_index("ix_votes_poll_option_id", "votes", ["poll_option_id"])


def downgrade():
    op.drop_index("ix_votes_poll_option_id", table_name="votes")
    op.drop_index("ix_votes_poll_id", table_name="votes")
    op.drop_table("votes")
    op.drop_index("ix_poll_options_poll_id", table_name="poll_options")
    op.drop_table("poll_options")
    op.drop_index("ix_polls_access_code", table_name="polls")
    op.drop_table("polls")
