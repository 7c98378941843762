import sqlalchemy as sa
import pytest
from sqlalchemy.exc import IntegrityError

from app.core.migrations import CURRENT_SCHEMA_VERSION, Migrator
from verify_migration import verify_database


async def ledger_versions(database):
    async with database.engine.connect() as conn:
        result = await conn.execute(sa.text("SELECT version FROM migrations ORDER BY version"))
        return [row[0] for row in result]


async def inspect_schema(database, fn):
    async with database.engine.connect() as conn:
        return await conn.run_sync(lambda sync_conn: fn(sa.inspect(sync_conn)))


async def test_fresh_store_has_version_zero(database):
    assert await Migrator(database).current_version() == 0


async def test_migrates_empty_store_to_current_version(database):
    migrator = Migrator(database)

    assert await migrator.run() == CURRENT_SCHEMA_VERSION
    assert await migrator.current_version() == CURRENT_SCHEMA_VERSION
    assert await ledger_versions(database) == [1, 2]

    tables = await inspect_schema(database, lambda insp: set(insp.get_table_names()))
    assert {"transactions", "goals", "migrations"} <= tables

    goal_columns = await inspect_schema(database, lambda insp: {c["name"] for c in insp.get_columns("goals")})
    assert "notes" in goal_columns

    indexes = await inspect_schema(database, lambda insp: {i["name"] for i in insp.get_indexes("transactions")})
    assert {"idx_transactions_type", "idx_transactions_date", "idx_transactions_category"} <= indexes


async def test_running_twice_is_a_no_op(database):
    migrator = Migrator(database)
    await migrator.run()
    assert await migrator.run() == CURRENT_SCHEMA_VERSION
    assert await ledger_versions(database) == [1, 2]


async def test_tolerates_tables_created_outside_the_ledger(database):
    async with database.engine.begin() as conn:
        await conn.execute(sa.text(
            "CREATE TABLE goals (id TEXT PRIMARY KEY, name TEXT NOT NULL, target_amount REAL NOT NULL, "
            "current_amount REAL NOT NULL DEFAULT 0, deadline TEXT NOT NULL, color TEXT NOT NULL, "
            "notes TEXT, created_at TEXT, updated_at TEXT)"
        ))

    assert await Migrator(database).run() == CURRENT_SCHEMA_VERSION
    assert await ledger_versions(database) == [1, 2]


async def test_resumes_from_recorded_version(database):
    async with database.engine.begin() as conn:
        await conn.execute(sa.text("CREATE TABLE migrations (version INTEGER PRIMARY KEY, applied_at TEXT)"))
        await conn.execute(sa.text("INSERT INTO migrations (version) VALUES (1)"))
        await conn.execute(sa.text(
            "CREATE TABLE goals (id TEXT PRIMARY KEY, name TEXT NOT NULL, target_amount REAL NOT NULL, "
            "current_amount REAL NOT NULL DEFAULT 0, deadline TEXT NOT NULL, color TEXT NOT NULL, "
            "created_at TEXT, updated_at TEXT)"
        ))

    assert await Migrator(database).run() == 2
    assert await ledger_versions(database) == [1, 2]
    goal_columns = await inspect_schema(database, lambda insp: {c["name"] for c in insp.get_columns("goals")})
    assert "notes" in goal_columns


async def test_storage_layer_enforces_amount_bounds(migrated_database):
    with pytest.raises(IntegrityError):
        async with migrated_database.engine.begin() as conn:
            await conn.execute(sa.text(
                "INSERT INTO transactions (id, type, category, amount, date) "
                "VALUES ('t1', 'expense', 'food', 0, '2026-01-01')"
            ))


async def test_storage_layer_enforces_color_and_notes(migrated_database):
    with pytest.raises(IntegrityError):
        async with migrated_database.engine.begin() as conn:
            await conn.execute(sa.text(
                "INSERT INTO goals (id, name, target_amount, deadline, color) "
                "VALUES ('g1', 'Trip', 100, '2030-01-01', 'blue')"
            ))
    with pytest.raises(IntegrityError):
        async with migrated_database.engine.begin() as conn:
            await conn.execute(
                sa.text(
                    "INSERT INTO goals (id, name, target_amount, deadline, color, notes) "
                    "VALUES ('g2', 'Trip', 100, '2030-01-01', '#ffffff', :notes)"
                ),
                {"notes": "n" * 1001},
            )


async def test_update_trigger_refreshes_updated_at(migrated_database):
    async with migrated_database.engine.begin() as conn:
        await conn.execute(sa.text(
            "INSERT INTO transactions (id, type, category, amount, date, created_at, updated_at) "
            "VALUES ('t1', 'income', 'salary', 10, '2026-01-01', '2000-01-01 00:00:00', '2000-01-01 00:00:00')"
        ))
        await conn.execute(sa.text("UPDATE transactions SET amount = 20 WHERE id = 't1'"))
        updated_at = (await conn.execute(sa.text("SELECT updated_at FROM transactions WHERE id = 't1'"))).scalar_one()
    assert updated_at != "2000-01-01 00:00:00"


async def test_verify_database_reports_schema(database):
    report = await verify_database(database)
    assert report["version"] == CURRENT_SCHEMA_VERSION
    assert [entry["version"] for entry in report["ledger"]] == [1, 2]
    assert report["row_counts"] == {"goals": 0, "transactions": 0}


@pytest.mark.parametrize(
    "column, value",
    [("category", ""), ("category", "c" * 51), ("description", "d" * 501), ("source", "s" * 101)],
)
async def test_storage_layer_enforces_text_lengths(migrated_database, column, value):
    values = {"id": "t1", "type": "expense", "category": "food", "amount": 10, "date": "2026-01-01"}
    values[column] = value
    columns = ", ".join(values)
    params = ", ".join(f":{name}" for name in values)
    with pytest.raises(IntegrityError):
        async with migrated_database.engine.begin() as conn:
            await conn.execute(sa.text(f"INSERT INTO transactions ({columns}) VALUES ({params})"), values)
