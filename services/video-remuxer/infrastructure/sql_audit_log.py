"""SQL implementation of the AuditRecorder interface."""

from collections.abc import Callable
from contextlib import AbstractContextManager

from remux_common import setup_logging
from sqlalchemy import Boolean, Column, Integer, MetaData, Table, insert
from sqlalchemy.types import Text
from sqlmodel import Session, SQLModel

from domain import AuditRecord
from exceptions import AuditLogError

from .interfaces import AuditRecorder

logger = setup_logging()


def build_remux_log_table(table_name: str, metadata: MetaData | None = None) -> Table:
    """
    Returns the audit table definition registered under ``table_name``.

    Column names are part of the persisted schema and must stay stable.
    """
    if metadata is None:
        metadata = SQLModel.metadata
    if table_name in metadata.tables:
        return metadata.tables[table_name]

    return Table(
        table_name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("input_key", Text, nullable=False, index=True),
        Column("timestamp", Integer, nullable=False),
        Column("duration", Integer, nullable=False),
        Column("request_id", Text, nullable=False),
        Column("output_key", Text, nullable=False),
        Column("successful", Boolean, nullable=False),
        Column("error", Text, nullable=False),
    )


class SqlAuditRecorder(AuditRecorder):
    """
    Appends remux outcomes to a relational table.

    Rows are only ever inserted; nothing in the service updates or deletes
    them.
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractContextManager[Session]],
        table: Table,
    ):
        """
        Initializes the recorder.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
            table: Audit table built by ``build_remux_log_table``.
        """
        self._session_factory = session_factory
        self._table = table

    def log_event(
        self,
        input_key: str,
        duration_ms: int,
        request_id: str,
        output_key: str,
        error_message: str,
    ) -> None:
        record = AuditRecord(
            input_key=input_key,
            output_key=output_key,
            duration_ms=duration_ms,
            request_id=request_id,
            error_message=error_message,
        )
        statement = insert(self._table).values(
            input_key=record.input_key,
            timestamp=record.timestamp,
            duration=record.duration_ms,
            request_id=record.request_id,
            output_key=record.output_key,
            successful=record.successful,
            error=record.error_message,
        )

        try:
            with self._session_factory() as db_session:
                db_session.exec(statement)
                db_session.commit()
        except Exception as e:
            logger.warning(
                "Unable to store remux record",
                exc_info=True,
                extra={"input_key": input_key, "output_key": output_key},
            )
            raise AuditLogError(input_key, e) from e

        logger.info(
            "Remux record stored",
            extra={
                "input_key": input_key,
                "output_key": output_key,
                "successful": record.successful,
            },
        )
