"""Copy callback requests from the JSON document into the SQL database.

Run once before switching STORAGE_BACKEND from ``json`` to ``sql``.
Records whose id is already in the database are skipped.
"""

import asyncio

from src.config import settings
from src.database import create_schema, make_engine, make_session_factory
from src.errors import NotFound
from src.repositories.json_store import JsonCallbackRepository
from src.repositories.sql_store import SqlCallbackRepository


async def import_callbacks(json_path=None, database_url=None) -> int:
    """Import every record and return how many were added."""
    source = JsonCallbackRepository(json_path or settings.callbacks_file)
    engine = make_engine(database_url or settings.database_url)
    await create_schema(engine)
    target = SqlCallbackRepository(make_session_factory(engine))

    added = 0
    # Oldest first so insertion order matches submission order
    for record in reversed(await source.list_all()):
        try:
            await target.get(record.id)
            print(f"  = Skipped: {record.id}")
            continue
        except NotFound:
            pass
        await target.append(record)
        added += 1
        print(f"  + Imported: {record.id} ({record.name})")

    await engine.dispose()
    return added


if __name__ == "__main__":
    count = asyncio.run(import_callbacks())
    print(f"\nImport completed: {count} record(s)")
