"""CLI entry point for OMOP ICD to SNOMED relationship queries."""

from omoprel.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
