#!/usr/bin/env python3
# =============================================================================
# scripts/table_counts.py - Table Row Count Report
# =============================================================================
# Connects with the service key and prints the row count of every managed
# table. Useful as a quick database check after a deploy or a migration.
#
# Usage:
#   python scripts/table_counts.py            # every managed table
#   python scripts/table_counts.py posts leads
#
# Exits with status 1 if any table could not be counted.
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.exceptions import ConsoleException
from core.schemas import PRIORITY_TABLES, get_available_tables
from core.services.entity_client import describe_error, get_entity


def count_tables(names: list[str]) -> tuple[dict[str, int], dict[str, str]]:
    """Count rows per table. Returns (counts, errors) keyed by table name."""
    counts = {}
    errors = {}
    for name in names:
        try:
            counts[name] = get_entity(name).count()
        except ConsoleException as e:
            errors[name] = describe_error(e)
    return counts, errors


def main():
    names = sys.argv[1:] or [table.value for table in get_available_tables()]

    print("=" * 60)
    print("Managed Table Row Counts")
    print("=" * 60)

    counts, errors = count_tables(names)
    for name in names:
        marker = "*" if name in {t.value for t in PRIORITY_TABLES} else " "
        if name in counts:
            print(f" {marker} {name:<24} {counts[name]:>8}")
        else:
            print(f" {marker} {name:<24} {'ERROR':>8}  {errors[name]}")

    print("-" * 60)
    print(f"   {len(counts)} ok, {len(errors)} failed  (* = console tab)")

    if errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
