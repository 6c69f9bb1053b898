"""Tests for ConnectionConfig and the connection helpers."""

import os
import tempfile
import unittest
from unittest import mock

from omoprel.config import DEFAULT_PORT, REQUIRED_ENV_VARS, ConnectionConfig
from omoprel.connection import build_connection_url, sqlalchemy_executor
from omoprel.core.errors import InvalidArgument
from omoprel.queries import build_icd_to_snomed_query

from cdm_fixture import create_vocabulary_connection

ENVIRON = {
    "SERVER_SERVERLESS": "cluster.example.com/omop",
    "USERNAME": "analyst",
    "PASSWORD": "s3cret",
}


class ConnectionConfigTests(unittest.TestCase):
    """Tests for ConnectionConfig.from_env."""

    def test_from_environ(self) -> None:
        config = ConnectionConfig.from_env(environ=ENVIRON)
        self.assertEqual(config.server, "cluster.example.com")
        self.assertEqual(config.database, "omop")
        self.assertEqual(config.username, "analyst")
        self.assertEqual(config.password, "s3cret")
        self.assertEqual(config.port, DEFAULT_PORT)

    def test_port_and_database_override(self) -> None:
        environ = dict(ENVIRON, PORT="5432", DATABASE="cdm_v54")
        config = ConnectionConfig.from_env(environ=environ)
        self.assertEqual(config.port, "5432")
        self.assertEqual(config.database, "cdm_v54")

    def test_missing_variables(self) -> None:
        with self.assertRaises(InvalidArgument) as ctx:
            ConnectionConfig.from_env(environ={"USERNAME": "analyst", "PASSWORD": ""})
        message = str(ctx.exception)
        self.assertIn("SERVER_SERVERLESS, PASSWORD", message)
        for name in REQUIRED_ENV_VARS:
            self.assertIn(name, message)

    def test_password_not_in_repr(self) -> None:
        self.assertNotIn("s3cret", repr(ConnectionConfig.from_env(environ=ENVIRON)))

    def test_env_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            env_file = os.path.join(tmp, ".env")
            with open(env_file, "w", encoding="utf-8") as f:
                f.write("SERVER_SERVERLESS=dotenv-host/dotenv_db\n")
                f.write("USERNAME=dotenv_user\n")
                f.write("PASSWORD=dotenv_pass\n")
            with mock.patch.dict(os.environ, {}, clear=True):
                config = ConnectionConfig.from_env(env_file=env_file)
        self.assertEqual(config.server, "dotenv-host")
        self.assertEqual(config.database, "dotenv_db")
        self.assertEqual(config.username, "dotenv_user")

    def test_existing_environment_wins_over_env_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            env_file = os.path.join(tmp, ".env")
            with open(env_file, "w", encoding="utf-8") as f:
                f.write("SERVER_SERVERLESS=dotenv-host\nUSERNAME=dotenv_user\nPASSWORD=x\n")
            with mock.patch.dict(os.environ, ENVIRON, clear=True):
                config = ConnectionConfig.from_env(env_file=env_file)
        self.assertEqual(config.username, "analyst")


class ConnectionTests(unittest.TestCase):
    """Tests for URL building and the SQLAlchemy executor."""

    def test_build_connection_url(self) -> None:
        url = build_connection_url(ConnectionConfig.from_env(environ=ENVIRON))
        self.assertEqual(url.drivername, "postgresql+psycopg2")
        self.assertEqual(url.host, "cluster.example.com")
        self.assertEqual(url.port, 5439)
        self.assertEqual(url.database, "omop")
        self.assertEqual(url.username, "analyst")
        self.assertEqual(url.password, "s3cret")

    def test_executor_returns_mappings(self) -> None:
        connection = create_vocabulary_connection()
        try:
            rows = sqlalchemy_executor(
                connection,
                "SELECT concept_id, concept_code FROM main.concept WHERE concept_code LIKE 'C16%' "
                "ORDER BY concept_id",
            )
        finally:
            connection.close()
        self.assertEqual([r["concept_code"] for r in rows], ["C16.0", "C16.1", "C16.2"])
        self.assertIsInstance(rows[0], dict)

    def test_executor_passes_no_parameters_to_cursor(self) -> None:
        # pyformat drivers (psycopg2) %-format the text whenever a parameter
        # collection is passed, which breaks on LIKE 'C16%'
        sql = build_icd_to_snomed_query("main", "like", "C16%")
        connection = create_vocabulary_connection()
        dialect = connection.dialect
        try:
            with mock.patch.object(
                dialect, "do_execute", side_effect=AssertionError("parameters passed")
            ) as do_execute, mock.patch.object(
                dialect, "do_execute_no_params", wraps=dialect.do_execute_no_params
            ) as do_execute_no_params:
                rows = sqlalchemy_executor(connection, sql)
        finally:
            connection.close()

        do_execute.assert_not_called()
        do_execute_no_params.assert_called_once()
        self.assertEqual(do_execute_no_params.call_args.args[1], sql)
        self.assertEqual(sorted(r["icd_code"] for r in rows), ["C16.0", "C16.1"])

    def test_executor_leaves_connection_options_alone(self) -> None:
        connection = create_vocabulary_connection()
        try:
            sqlalchemy_executor(connection, "SELECT 1 AS one")
            self.assertNotIn("no_parameters", connection.get_execution_options())
        finally:
            connection.close()


if __name__ == "__main__":
    unittest.main()
