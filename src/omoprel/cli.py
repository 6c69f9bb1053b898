"""Command line interface for building and running the vocabulary queries."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Sequence

from omoprel.config import ConnectionConfig
from omoprel.connection import create_db_connection
from omoprel.core.errors import InvalidArgument
from omoprel.core.helpers import parse_sql
from omoprel.core.registry import list_categories
from omoprel.queries import build_icd_to_snomed_query, build_relationship_query
from omoprel.schemas import DEFAULT_SOURCE_VOCABS, DEFAULT_TARGET_VOCAB, MAPS_TO_RELATIONSHIP
from omoprel.workflow import WorkflowState, icd_to_concept_relationships


def _add_mapping_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--pattern-type",
        choices=["like", "in"],
        required=True,
        help="'like' for one LIKE pattern (e.g. C16%%), 'in' for exact codes.",
    )
    parser.add_argument("pattern_values", nargs="+", help="ICD pattern or codes.")
    parser.add_argument(
        "--source-vocab",
        nargs="+",
        default=list(DEFAULT_SOURCE_VOCABS),
        help=f"Source vocabulary IDs (default: {' '.join(DEFAULT_SOURCE_VOCABS)}).",
    )
    parser.add_argument(
        "--target-vocab",
        default=DEFAULT_TARGET_VOCAB,
        help=f"Target vocabulary ID (default: {DEFAULT_TARGET_VOCAB}).",
    )
    parser.add_argument(
        "--relationship",
        default=MAPS_TO_RELATIONSHIP,
        help=f"Relationship ID (default: {MAPS_TO_RELATIONSHIP}).",
    )


def _add_relationship_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--all-concepts",
        action="store_true",
        help="Include non-standard related concepts.",
    )
    parser.add_argument(
        "--only-direct",
        action="store_true",
        help="Keep only direct parent/child hierarchy edges.",
    )


def _add_check_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--check",
        action="store_true",
        help="Parse the generated SQL and fail if it is not a single statement.",
    )
    parser.add_argument(
        "--dialect",
        default="redshift",
        help="SQL dialect used by --check (default: redshift).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Map ICD codes to SNOMED and expand OMOP concept relationships."
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    mapping = subparsers.add_parser("mapping-sql", help="Print the ICD to SNOMED mapping SQL.")
    mapping.add_argument("--schema", required=True, help="CDM schema name.")
    _add_mapping_arguments(mapping)
    _add_check_arguments(mapping)

    relationships = subparsers.add_parser(
        "relationships-sql", help="Print the concept relationship SQL."
    )
    relationships.add_argument("--schema", required=True, help="CDM schema name.")
    relationships.add_argument("snomed_ids", nargs="+", type=int, help="Seed concept IDs.")
    relationships.add_argument(
        "--categories",
        nargs="+",
        choices=sorted(list_categories()),
        help="Relationship categories to include (default: all).",
    )
    _add_relationship_flags(relationships)
    _add_check_arguments(relationships)

    run = subparsers.add_parser("run", help="Run the full workflow against the database.")
    run.add_argument("--schema", required=True, help="CDM schema name.")
    _add_mapping_arguments(run)
    _add_relationship_flags(run)
    run.add_argument("--env-file", help="Path to a .env file with the connection settings.")
    run.add_argument("--print-sql", action="store_true", help="Print SQL before executing it.")
    run.add_argument(
        "--output",
        "-o",
        default="output/relationships.json",
        help="Output JSON report file path (default: output/relationships.json).",
    )

    return parser


def _emit_sql(sql: str, check: bool, dialect: str) -> int:
    if check:
        trees, error = parse_sql(sql, dialect)
        if error or len(trees) != 1:
            print(error or f"Expected one statement, parsed {len(trees)}", file=sys.stderr)
            return 1
    print(sql)
    return 0


def _run_workflow(args: argparse.Namespace) -> int:
    config = ConnectionConfig.from_env(env_file=args.env_file)
    connection = create_db_connection(config)
    try:
        result = icd_to_concept_relationships(
            connection=connection,
            cdm_schema=args.schema,
            pattern_type=args.pattern_type,
            pattern_values=args.pattern_values,
            source_vocabulary_id=args.source_vocab,
            target_vocabulary_id=args.target_vocab,
            relationship_id=args.relationship,
            only_standard=not args.all_concepts,
            only_direct=args.only_direct,
            print_sql=args.print_sql,
            return_mappings=True,
        )
    finally:
        connection.close()

    report: Dict[str, Any] = {
        "cdm_schema": args.schema,
        "pattern_type": args.pattern_type,
        "pattern_values": args.pattern_values,
        "mapping_count": len(result.mappings),
        "relationship_count": len(result.relationships),
    }
    report.update(result.to_dict())

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2), encoding="utf-8")

    print(f"Workflow {result.state.value}")
    print(f"  Mappings: {report['mapping_count']}")
    print(f"  Relationships: {report['relationship_count']}")
    print(f"  Report saved to: {output_path.absolute()}")

    return 1 if result.state == WorkflowState.EMPTY_RESULT else 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "mapping-sql":
            sql = build_icd_to_snomed_query(
                cdm_schema=args.schema,
                pattern_type=args.pattern_type,
                pattern_values=args.pattern_values,
                source_vocabulary_id=args.source_vocab,
                target_vocabulary_id=args.target_vocab,
                relationship_id=args.relationship,
            )
            return _emit_sql(sql, args.check, args.dialect)

        if args.command == "relationships-sql":
            sql = build_relationship_query(
                snomed_ids=args.snomed_ids,
                cdm_schema=args.schema,
                only_standard=not args.all_concepts,
                only_direct=args.only_direct,
                categories=args.categories,
            )
            return _emit_sql(sql, args.check, args.dialect)

        return _run_workflow(args)
    except InvalidArgument as e:
        print(f"Invalid argument: {e}", file=sys.stderr)
        return 2


__all__ = ["build_parser", "main"]
