"""Record source reading every row of a database table."""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import MetaData, Table, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..utils.logging import get_logger
from .base import FetchParams, RecordSourceError

logger = get_logger(__name__)


class SqlRecordSource:
    """
    Loads rows of one table as plain dicts.

    The table is reflected on first use. Listing params are ignored; the
    whole table is the working set.
    """

    def __init__(self, bind: Union[Engine, Session], table_name: str):
        self.bind = bind
        self.table_name = table_name
        self._table: Optional[Table] = None

    def _engine(self) -> Engine:
        if isinstance(self.bind, Session):
            return self.bind.get_bind()
        return self.bind

    def _reflect(self) -> Table:
        if self._table is None:
            try:
                self._table = Table(self.table_name, MetaData(), autoload_with=self._engine())
            except NoSuchTableError as e:
                raise RecordSourceError(f"Table not found: {self.table_name}") from e
        return self._table

    def fetch_records(self, params: Optional[FetchParams] = None) -> List[Dict[str, Any]]:
        table = self._reflect()
        stmt = select(table)
        try:
            if isinstance(self.bind, Session):
                rows = self.bind.execute(stmt).mappings().all()
            else:
                with self.bind.connect() as conn:
                    rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read table {self.table_name}: {e}", exc_info=True)
            raise RecordSourceError(f"Failed to read table {self.table_name}: {e}") from e

        records = [dict(row) for row in rows]
        logger.debug(f"Loaded {len(records)} rows from {self.table_name}")
        return records
