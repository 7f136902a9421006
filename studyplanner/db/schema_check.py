from __future__ import annotations

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine

from studyplanner.core.logging import log


class SchemaOutOfDateError(RuntimeError):
    pass


def _head_revision(alembic_ini_path: str) -> str | None:
    script = ScriptDirectory.from_config(Config(alembic_ini_path))
    return script.get_current_head()


async def ensure_schema_up_to_date(engine: AsyncEngine, alembic_ini_path: str = "alembic.ini") -> None:
    """Stage/prod startup gate: the database must sit on the Alembic head revision."""
    head = _head_revision(alembic_ini_path)

    def _current_revision(sync_conn) -> str | None:
        return MigrationContext.configure(sync_conn).get_current_revision()

    try:
        async with engine.connect() as conn:
            current = await conn.run_sync(_current_revision)
    except DBAPIError as exc:
        raise SchemaOutOfDateError("Could not read the schema revision. Run: alembic upgrade head") from exc

    if current is None:
        raise SchemaOutOfDateError("Database schema is not initialized via Alembic. Run: alembic upgrade head")
    if current != head:
        raise SchemaOutOfDateError(
            f"Database schema is out of date: current={current}, head={head}. Run: alembic upgrade head"
        )
    log.info("schema_check_passed", revision=current)
