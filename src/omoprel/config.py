"""Connection configuration.

Credentials are passed around as an explicit ConnectionConfig. Only
ConnectionConfig.from_env reads the environment (and an optional .env file);
the query builders never do.

Environment variables:
- SERVER_SERVERLESS: "host/database" (or just "host" with DATABASE set)
- USERNAME
- PASSWORD
- PORT (optional, defaults to 5439)
- DATABASE (optional, overrides the database part of SERVER_SERVERLESS)
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from omoprel.core.errors import InvalidArgument

REQUIRED_ENV_VARS = ("SERVER_SERVERLESS", "USERNAME", "PASSWORD")

DEFAULT_PORT = "5439"


@dataclass
class ConnectionConfig:
    """Everything needed to open a connection to the CDM database."""

    server: str
    username: str
    password: str = field(repr=False)
    port: str = DEFAULT_PORT
    database: Optional[str] = None
    drivername: str = "postgresql+psycopg2"

    def __post_init__(self) -> None:
        # DatabaseConnector style "host/database"
        if "/" in self.server:
            host, _, database = self.server.partition("/")
            self.server = host
            if self.database is None and database:
                self.database = database

    @classmethod
    def from_env(
        cls,
        env_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ConnectionConfig":
        """Build a config from environment variables.

        Args:
            env_file: Optional .env file to load first (default: nearest .env
                from the working directory, if any). Existing variables win.
            environ: Mapping to read instead of os.environ; no .env is loaded

        Raises:
            InvalidArgument: If any required variable is missing or empty
        """
        if environ is None:
            dotenv_path = env_file or find_dotenv(usecwd=True)
            if dotenv_path:
                load_dotenv(dotenv_path=dotenv_path)
            environ = os.environ

        missing = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
        if missing:
            raise InvalidArgument(
                f"Required environment variables not set: {', '.join(missing)}. "
                f"Please set {', '.join(REQUIRED_ENV_VARS)}."
            )

        return cls(
            server=environ["SERVER_SERVERLESS"],
            username=environ["USERNAME"],
            password=environ["PASSWORD"],
            port=environ.get("PORT") or DEFAULT_PORT,
            database=environ.get("DATABASE") or None,
        )


__all__ = ["ConnectionConfig", "REQUIRED_ENV_VARS", "DEFAULT_PORT"]
