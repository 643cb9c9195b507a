"""Database export / import"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import DateTime, Table, select
from sqlalchemy.ext.asyncio import AsyncSession

from .. import models  # noqa: F401  (registers every table)
from ..database import Base
from .library_service import InvalidInput
from .log_service import log_service

# Key a document must carry to be accepted as a backup
REQUIRED_KEY = "games"


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _restore_row(table: Table, row: Dict[str, Any]) -> Dict[str, Any]:
    """Keep known columns only; ISO strings go back to datetimes"""
    restored = {}
    for column in table.columns:
        if column.name not in row:
            continue
        value = row[column.name]
        if isinstance(column.type, DateTime) and isinstance(value, str):
            value = datetime.fromisoformat(value)
        restored[column.name] = value
    return restored


class BackupService:
    """Dump every table to one JSON document and load it back"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def tables() -> List[Table]:
        """Parents before children"""
        return list(Base.metadata.sorted_tables)

    async def export_all(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"exportedAt": datetime.now(timezone.utc).isoformat()}
        for table in self.tables():
            result = await self.db.execute(select(table))
            data[table.name] = [
                {key: _serialize(value) for key, value in row.items()}
                for row in result.mappings().all()
            ]
        return data

    async def import_all(self, document: Dict[str, Any]) -> Dict[str, int]:
        """Wipe every table and reload it from the document, all or nothing"""
        if not isinstance(document, dict) or not isinstance(document.get(REQUIRED_KEY), list):
            raise InvalidInput("Invalid backup format")

        tables = self.tables()
        imported = {}
        try:
            for table in reversed(tables):
                await self.db.execute(table.delete())

            for table in tables:
                rows = [_restore_row(table, row) for row in document.get(table.name) or []]
                if rows:
                    await self.db.execute(table.insert(), rows)
                imported[table.name] = len(rows)

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        log_service.info(f"Imported backup: {imported}")
        return imported
