"""
Forward-only schema migrations for the SQLite store.

Applied versions are recorded in the ``migrations`` ledger; the current
schema version is the highest recorded value (0 when the ledger is absent).
Each step is written against alembic's ``Operations`` API and guarded by
existence checks so it can run against a store whose tables already exist.
"""
import logging
from typing import Callable, List, Tuple

import sqlalchemy as sa
from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine import Connection

from app.core.database import Database
from app.models.migration import Migration
from app.models.goal import HEX_COLOR_GLOB
from app.models.transaction import MAX_AMOUNT

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 2


def _create_table_if_missing(op: Operations, name: str, *columns) -> None:
    if sa.inspect(op.get_bind()).has_table(name):
        logger.info(f"Table {name} already exists, skipping creation")
        return
    op.create_table(name, *columns)


def _create_index_if_missing(op: Operations, name: str, table: str, columns: list) -> None:
    existing = {index["name"] for index in sa.inspect(op.get_bind()).get_indexes(table)}
    if name in existing:
        return
    op.create_index(name, table, columns)


def upgrade_to_v1(op: Operations) -> None:
    """Create transactions and goals with their indexes and updated_at triggers."""
    _create_table_if_missing(
        op,
        "transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("source", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
        sa.CheckConstraint("length(category) >= 1 AND length(category) <= 50", name="ck_transactions_category_length"),
        sa.CheckConstraint(f"amount > 0 AND amount <= {MAX_AMOUNT}", name="ck_transactions_amount_range"),
        sa.CheckConstraint("length(description) <= 500", name="ck_transactions_description_length"),
        sa.CheckConstraint("length(source) <= 100", name="ck_transactions_source_length"),
    )
    _create_index_if_missing(op, "idx_transactions_type", "transactions", ["type"])
    _create_index_if_missing(op, "idx_transactions_date", "transactions", [sa.text("date DESC")])
    _create_index_if_missing(op, "idx_transactions_category", "transactions", ["category"])

    _create_table_if_missing(
        op,
        "goals",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("target_amount", sa.Float(), nullable=False),
        sa.Column("current_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("deadline", sa.Date(), nullable=False),
        sa.Column("color", sa.String(7), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.CheckConstraint("length(name) >= 1 AND length(name) <= 100", name="ck_goals_name_length"),
        sa.CheckConstraint(f"target_amount > 0 AND target_amount <= {MAX_AMOUNT}", name="ck_goals_target_amount_range"),
        sa.CheckConstraint(f"current_amount >= 0 AND current_amount <= {MAX_AMOUNT}", name="ck_goals_current_amount_range"),
        sa.CheckConstraint(f"color GLOB '{HEX_COLOR_GLOB}'", name="ck_goals_color_format"),
    )
    _create_index_if_missing(op, "idx_goals_deadline", "goals", ["deadline"])

    for table in ("transactions", "goals"):
        op.execute(sa.text(f"""
            CREATE TRIGGER IF NOT EXISTS update_{table}_timestamp
            AFTER UPDATE ON {table}
            BEGIN
                UPDATE {table} SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
            END
        """))


def upgrade_to_v2(op: Operations) -> None:
    """Add the notes column to goals."""
    columns = {column["name"] for column in sa.inspect(op.get_bind()).get_columns("goals")}
    if "notes" in columns:
        logger.info("Column goals.notes already exists, skipping")
        return
    # alembic's add_column drops column-level CHECKs on SQLite, so spell it out
    op.execute(sa.text(
        "ALTER TABLE goals ADD COLUMN notes TEXT "
        "CONSTRAINT ck_goals_notes_length CHECK(length(notes) <= 1000)"
    ))


MigrationStep = Tuple[int, str, Callable[[Operations], None]]

MIGRATIONS: List[MigrationStep] = [
    (1, "create transactions and goals tables", upgrade_to_v1),
    (2, "add notes column to goals", upgrade_to_v2),
]


def read_schema_version(connection: Connection) -> int:
    if not sa.inspect(connection).has_table(Migration.__tablename__):
        return 0
    version = connection.execute(sa.select(sa.func.max(Migration.version))).scalar()
    return version or 0


class Migrator:
    """Brings the store up to CURRENT_SCHEMA_VERSION. Never rolls back."""

    def __init__(self, database: Database):
        self.database = database

    async def current_version(self) -> int:
        async with self.database.engine.connect() as conn:
            return await conn.run_sync(read_schema_version)

    async def run(self) -> int:
        logger.info(f"Initializing database at {self.database.path}")
        async with self.database.engine.begin() as conn:
            version = await conn.run_sync(self._upgrade)
        logger.info(f"Database initialized successfully (schema version {version})")
        return version

    def _upgrade(self, connection: Connection) -> int:
        Migration.__table__.create(connection, checkfirst=True)
        version = read_schema_version(connection)
        op = Operations(MigrationContext.configure(connection))

        for step_version, description, step in MIGRATIONS:
            if version >= step_version:
                continue
            logger.info(f"Running migration {step_version}: {description}")
            step(op)
            connection.execute(sa.insert(Migration.__table__).values(version=step_version))
            logger.info(f"Migration {step_version} completed")
            version = step_version

        return version
