"""Connection provisioning and the default SQL executor.

Redshift speaks the PostgreSQL wire protocol, so connections go through
SQLAlchemy's postgresql+psycopg2 dialect. The connection returned by
create_db_connection belongs to the caller, who must close it.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection

from omoprel.config import ConnectionConfig

logger = logging.getLogger(__name__)

# (connection, sql) -> rows, each row a mapping of column name to value
Executor = Callable[[Any, str], Sequence[Mapping[str, Any]]]


def build_connection_url(config: ConnectionConfig) -> URL:
    """Build the SQLAlchemy URL for a config. The password is escaped by URL.create."""
    return URL.create(
        config.drivername,
        username=config.username,
        password=config.password,
        host=config.server,
        port=int(config.port),
        database=config.database,
    )


def create_db_connection(config: Optional[ConnectionConfig] = None, **engine_kwargs: Any) -> Connection:
    """Open a connection to the CDM database.

    Args:
        config: Connection settings (default: ConnectionConfig.from_env())
        **engine_kwargs: Passed through to sqlalchemy.create_engine

    Returns:
        An open SQLAlchemy Connection
    """
    if config is None:
        config = ConnectionConfig.from_env()
    engine = create_engine(build_connection_url(config), **engine_kwargs)
    connection = engine.connect()
    logger.info("Successfully connected to database %s:%s", config.server, config.port)
    return connection


def sqlalchemy_executor(connection: Connection, sql: str) -> List[Dict[str, Any]]:
    """Run SQL text on a SQLAlchemy connection and return the rows as dicts.

    The text goes to the driver as-is: no bind parameter parsing, and no
    parameter collection, so pyformat drivers (psycopg2) leave the % of
    LIKE patterns alone. Driver errors propagate unchanged.
    """
    result = connection.exec_driver_sql(sql, execution_options={"no_parameters": True})
    return [dict(row) for row in result.mappings()]


__all__ = ["Executor", "build_connection_url", "create_db_connection", "sqlalchemy_executor"]
