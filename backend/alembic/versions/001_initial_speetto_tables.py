"""Initial tables: games, game_readings, recipients, notification_logs.

games: one row per (name, round). game_readings: latest reading per game row (replaced on every fetch).
notification_logs: append-only SMS attempts; dedup on (phone_number, game_name, round, sent_on, status).
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(32), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("name", "round", name="uq_games_name_round"),
    )
    op.create_index("ix_games_name", "games", ["name"], unique=False)

    op.create_table(
        "game_readings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("game_id", sa.Integer(), sa.ForeignKey("games.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("as_of_date", sa.Date(), nullable=False),
        sa.Column("store_instock_rate", sa.Integer(), nullable=False),
        sa.Column("first_prize_amount", sa.String(32), nullable=False),
        sa.Column("first_prize_remaining", sa.Integer(), nullable=False),
        sa.Column("second_prize_amount", sa.String(32), nullable=False),
        sa.Column("second_prize_remaining", sa.Integer(), nullable=False),
        sa.Column("third_prize_amount", sa.String(32), nullable=False),
        sa.Column("third_prize_remaining", sa.Integer(), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_game_readings_recorded_at", "game_readings", ["recorded_at"], unique=False)

    op.create_table(
        "recipients",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("phone_number", sa.String(32), nullable=False, unique=True),
        sa.Column("target_games_json", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_recipients_phone_number", "recipients", ["phone_number"], unique=True)

    op.create_table(
        "notification_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("phone_number", sa.String(32), nullable=False),
        sa.Column("game_name", sa.String(32), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sent_on", sa.Date(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("provider_message_id", sa.String(64), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
    )
    op.create_index("ix_notification_logs_sent_at", "notification_logs", ["sent_at"], unique=False)
    op.create_index(
        "ix_notification_logs_dedup",
        "notification_logs",
        ["phone_number", "game_name", "round", "sent_on", "status"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_notification_logs_dedup", table_name="notification_logs")
    op.drop_index("ix_notification_logs_sent_at", table_name="notification_logs")
    op.drop_table("notification_logs")
    op.drop_index("ix_recipients_phone_number", table_name="recipients")
    op.drop_table("recipients")
    op.drop_index("ix_game_readings_recorded_at", table_name="game_readings")
    op.drop_table("game_readings")
    op.drop_index("ix_games_name", table_name="games")
    op.drop_table("games")
