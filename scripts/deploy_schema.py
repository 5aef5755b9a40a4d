#!/usr/bin/env python
# ============================================================================
# SCHEMA DEPLOYMENT SCRIPT
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# PURPOSE: Deploy the integration_health_checks table using PydanticToSQL
# USAGE:
#   python scripts/deploy_schema.py --dry-run    # Preview SQL
#   python scripts/deploy_schema.py              # Execute deployment
# ============================================================================

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import psycopg

from core.schema import PydanticToSQL
from repositories.database import SCHEMA, get_connection_string, mask_connection_string


def main():
    parser = argparse.ArgumentParser(
        description="Deploy the integration health schema to PostgreSQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deploy_schema.py --dry-run     # Preview DDL without executing
  python scripts/deploy_schema.py               # Deploy schema

Environment Variables:
  DATABASE_URL          Full PostgreSQL connection string
  POSTGRES_HOST         Database host (default: localhost)
  POSTGRES_DB           Database name (default: postgres)
  POSTGRES_USER         Database user (default: postgres)
  POSTGRES_PASSWORD     Database password
  POSTGRES_PORT         Database port (default: 5432)
  POSTGRES_SSLMODE      SSL mode (default: prefer)
  DB_SCHEMA             Target schema (default: public)
        """
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print DDL without executing"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()

    # Configure logging
    from core.logging import configure_logging
    configure_logging(level="DEBUG" if args.verbose else "INFO")

    conninfo = args.connection or get_connection_string()

    print("=" * 70)
    print("INTEGRATION HEALTH MONITOR - Schema Deployment")
    print("=" * 70)
    print(f"Connection: {mask_connection_string(conninfo)}")
    print(f"Schema: {SCHEMA}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'EXECUTE'}")
    print("=" * 70)

    generator = PydanticToSQL(schema_name=SCHEMA)

    try:
        with psycopg.connect(conninfo, autocommit=True) as conn:
            count = generator.execute(conn, dry_run=args.dry_run)
    except psycopg.Error as e:
        print(f"\nDeployment failed: {e}")
        sys.exit(1)

    print(f"\n{count} statements {'previewed' if args.dry_run else 'executed'}")
    print("=" * 70)


if __name__ == "__main__":
    main()
