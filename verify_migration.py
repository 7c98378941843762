#!/usr/bin/env python3
"""
Script to migrate the local finance database and verify the resulting schema
"""
import asyncio
import sys
from typing import Any, Dict

from sqlalchemy import inspect, select, text

from app.core.config import settings
from app.core.database import Database
from app.core.migrations import CURRENT_SCHEMA_VERSION, Migrator
from app.models.migration import Migration


def _collect(connection) -> Dict[str, Any]:
    inspector = inspect(connection)
    tables = sorted(inspector.get_table_names())
    ledger = [
        {"version": row.version, "applied_at": row.applied_at}
        for row in connection.execute(select(Migration.__table__).order_by(Migration.version))
    ]
    row_counts = {
        table: connection.execute(text(f'SELECT COUNT(*) FROM "{table}"')).scalar_one()
        for table in tables
        if table != Migration.__tablename__
    }
    return {"tables": tables, "ledger": ledger, "row_counts": row_counts}


async def verify_database(database: Database) -> Dict[str, Any]:
    """Run pending migrations, then report tables, ledger entries and row counts"""
    version = await Migrator(database).run()
    async with database.engine.connect() as conn:
        report = await conn.run_sync(_collect)
    report["version"] = version
    return report


async def main_async() -> int:
    database = Database(settings.database_file)
    try:
        print(f"🔗 Using database at {database.path}")
        report = await verify_database(database)

        print("\n📋 Tables in your database:")
        for table in report["tables"]:
            print(f"   ✅ {table}")

        print("\n🔄 Migration status:")
        for entry in report["ledger"]:
            print(f"   ✅ Version {entry['version']} applied at {entry['applied_at']}")
        if report["version"] != CURRENT_SCHEMA_VERSION:
            print(f"   ⚠️  Expected schema version {CURRENT_SCHEMA_VERSION}, found {report['version']}")
            return 1

        print("\n📊 Table statistics:")
        for table, count in report["row_counts"].items():
            print(f"   📈 {table}: {count} rows")

        print("\n✅ Database verification completed successfully!")
        return 0
    except Exception as e:
        print(f"❌ Database verification failed: {str(e)}")
        return 1
    finally:
        # Properly dispose of the engine
        await database.dispose()


def main():
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
