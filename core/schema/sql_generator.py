# ============================================================================
# PYDANTIC TO SQL GENERATOR
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - DDL generation from Pydantic models
# PURPOSE: Generate PostgreSQL CREATE statements for the health tables
# CREATED: 12 OCT 2026
# EXPORTS: PydanticToSQL
# DEPENDENCIES: pydantic, psycopg
# ============================================================================
"""
Pydantic to PostgreSQL Schema Generator.

Pydantic models are the single source of truth for the tables this
service owns (only integration_health_checks today). Provider tables are
owned by the integration modules and are never generated here.

Model Metadata Convention:
    - __sql_table__: Table name
    - __sql_schema__: Schema name (overridable per generator)
    - __sql_primary_key__: Primary key column(s)
    - __sql_unique__: List of (name, columns) unique constraints
    - __sql_indexes__: List of (name, columns[, partial_where]) indexes

Enum columns are rendered as VARCHAR with a CHECK constraint so new
integration types only need a constraint swap, not an ALTER TYPE.

Usage:
    generator = PydanticToSQL(schema_name="public")
    with psycopg.connect(url) as conn:
        generator.execute(conn)
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Type, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel
from pydantic.fields import FieldInfo
from psycopg import sql

from core.models.health import IntegrationHealthRecord

logger = logging.getLogger(__name__)


class PydanticToSQL:
    """
    Convert Pydantic models to PostgreSQL DDL statements.

    Analyzes Pydantic models with __sql_* metadata and generates
    CREATE TABLE / CREATE INDEX / trigger statements.
    """

    TYPE_MAP = {
        str: "VARCHAR",
        int: "INTEGER",
        float: "NUMERIC(5,2)",
        bool: "BOOLEAN",
        datetime: "TIMESTAMPTZ",
        UUID: "UUID",
        dict: "JSONB",
        list: "JSONB",
    }

    MODELS: List[Type[BaseModel]] = [IntegrationHealthRecord]

    def __init__(self, schema_name: str = "public"):
        self.schema_name = schema_name

    # =========================================================================
    # METADATA EXTRACTION
    # =========================================================================

    @staticmethod
    def get_model_metadata(model: Type[BaseModel]) -> Dict[str, Any]:
        """
        Extract SQL DDL metadata from a Pydantic model.

        Returns:
            Dict with table, primary_key, unique, indexes
        """
        def get_attr(name: str, default):
            # Double-underscore ClassVars may be name-mangled
            mangled = f"_{model.__name__}__{name}"
            return getattr(model, mangled, getattr(model, f"__{name}", default))

        primary_key = get_attr("sql_primary_key__", [])
        if isinstance(primary_key, str):
            primary_key = [primary_key]

        return {
            "table": get_attr("sql_table__", None),
            "primary_key": list(primary_key),
            "unique": list(get_attr("sql_unique__", [])),
            "indexes": list(get_attr("sql_indexes__", [])),
        }

    # =========================================================================
    # TYPE CONVERSION
    # =========================================================================

    @staticmethod
    def _unwrap_optional(field_type: Any) -> tuple:
        """Return (inner_type, is_optional)."""
        if get_origin(field_type) is Union:
            args = [a for a in get_args(field_type) if a is not type(None)]
            return (args[0] if args else Any), len(args) != len(get_args(field_type))
        return field_type, False

    def python_type_to_sql(self, field_type: Any) -> str:
        """Map a (non-optional) Python annotation to a PostgreSQL type."""
        origin = get_origin(field_type)
        if origin in (dict, Dict):
            return "JSONB"
        if origin in (list, List):
            return "JSONB"
        if isinstance(field_type, type) and issubclass(field_type, Enum):
            return "VARCHAR(32)"
        return self.TYPE_MAP.get(field_type, "JSONB")

    # =========================================================================
    # TABLE GENERATION
    # =========================================================================

    def _column(self, name: str, field_info: FieldInfo, primary_key: List[str]) -> sql.Composed:
        inner_type, is_optional = self._unwrap_optional(field_info.annotation)
        sql_type = self.python_type_to_sql(inner_type)

        parts = [sql.Identifier(name), sql.SQL(" " + sql_type)]

        if not is_optional and name not in primary_key:
            parts.append(sql.SQL(" NOT NULL"))

        default = field_info.default
        if name in primary_key and inner_type is UUID:
            parts.append(sql.SQL(" DEFAULT gen_random_uuid()"))
        elif name in ("created_at", "updated_at", "checked_at"):
            parts.append(sql.SQL(" DEFAULT NOW()"))
        elif sql_type == "JSONB" and field_info.default_factory is not None:
            parts.append(sql.SQL(" DEFAULT '{}'::jsonb"))
        elif isinstance(default, Enum):
            parts.append(sql.SQL(" DEFAULT {}").format(sql.Literal(default.value)))
        elif isinstance(default, bool):
            parts.append(sql.SQL(" DEFAULT true" if default else " DEFAULT false"))
        elif isinstance(default, (int, float, str)):
            parts.append(sql.SQL(" DEFAULT {}").format(sql.Literal(default)))

        if isinstance(inner_type, type) and issubclass(inner_type, Enum):
            values = sql.SQL(", ").join(sql.Literal(m.value) for m in inner_type)
            parts.append(sql.SQL(" CHECK ({} IN ({}))").format(sql.Identifier(name), values))

        return sql.Composed(parts)

    def generate_table(self, model: Type[BaseModel]) -> sql.Composed:
        """
        Generate CREATE TABLE DDL from a Pydantic model.

        Raises:
            ValueError: If the model has no __sql_table__
        """
        meta = self.get_model_metadata(model)
        table_name = meta["table"]
        if not table_name:
            raise ValueError(f"Model {model.__name__} missing __sql_table__ attribute")

        logger.debug(f"Generating table {self.schema_name}.{table_name} from {model.__name__}")

        parts = [
            self._column(name, info, meta["primary_key"])
            for name, info in model.model_fields.items()
        ]

        if meta["primary_key"]:
            parts.append(sql.SQL("PRIMARY KEY ({})").format(
                sql.SQL(", ").join(sql.Identifier(c) for c in meta["primary_key"])
            ))

        for constraint_name, columns in meta["unique"]:
            parts.append(sql.SQL("CONSTRAINT {} UNIQUE ({})").format(
                sql.Identifier(constraint_name),
                sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            ))

        return sql.SQL("CREATE TABLE IF NOT EXISTS {}.{} ({})").format(
            sql.Identifier(self.schema_name),
            sql.Identifier(table_name),
            sql.SQL(", ").join(parts),
        )

    def generate_indexes(self, model: Type[BaseModel]) -> List[sql.Composed]:
        """Generate CREATE INDEX statements from __sql_indexes__."""
        meta = self.get_model_metadata(model)
        statements = []

        for idx_def in meta["indexes"]:
            name, columns = idx_def[0], idx_def[1]
            partial_where = idx_def[2] if len(idx_def) > 2 else None

            stmt = sql.SQL("CREATE INDEX IF NOT EXISTS {} ON {}.{} ({})").format(
                sql.Identifier(name),
                sql.Identifier(self.schema_name),
                sql.Identifier(meta["table"]),
                sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            )
            if partial_where:
                stmt = sql.SQL("{} WHERE {}").format(stmt, sql.SQL(partial_where))
            statements.append(stmt)

        return statements

    def generate_updated_at_trigger(self, table_name: str) -> List[sql.Composed]:
        """Function plus DROP/CREATE trigger keeping updated_at current."""
        function = sql.SQL("""
            CREATE OR REPLACE FUNCTION {schema}.touch_updated_at()
            RETURNS TRIGGER
            LANGUAGE plpgsql
            AS $$
            BEGIN
                NEW.updated_at = NOW();
                RETURN NEW;
            END;
            $$
        """).format(schema=sql.Identifier(self.schema_name))

        trigger_name = f"trg_{table_name}_updated_at"
        drop = sql.SQL("DROP TRIGGER IF EXISTS {} ON {}.{}").format(
            sql.Identifier(trigger_name),
            sql.Identifier(self.schema_name),
            sql.Identifier(table_name),
        )
        create = sql.SQL(
            "CREATE TRIGGER {} BEFORE UPDATE ON {}.{} "
            "FOR EACH ROW EXECUTE FUNCTION {}.touch_updated_at()"
        ).format(
            sql.Identifier(trigger_name),
            sql.Identifier(self.schema_name),
            sql.Identifier(table_name),
            sql.Identifier(self.schema_name),
        )
        return [function, drop, create]

    # =========================================================================
    # COMPLETE SCHEMA GENERATION
    # =========================================================================

    def generate_all(self) -> List[sql.Composed]:
        """Generate complete DDL for every model this service owns."""
        statements: List[sql.Composed] = [
            sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(self.schema_name)),
        ]

        for model in self.MODELS:
            statements.append(self.generate_table(model))
            statements.extend(self.generate_indexes(model))
            statements.extend(
                self.generate_updated_at_trigger(self.get_model_metadata(model)["table"])
            )

        logger.info(f"Generated {len(statements)} DDL statements for schema {self.schema_name}")
        return statements

    def execute(self, conn, dry_run: bool = False) -> int:
        """
        Execute all DDL statements.

        Args:
            conn: psycopg connection
            dry_run: If True, log statements but don't execute

        Returns:
            Number of statements executed
        """
        statements = self.generate_all()

        if dry_run:
            for stmt in statements:
                logger.info(f"[DRY RUN] {stmt.as_string(conn)[:120]}...")
            return len(statements)

        with conn.cursor() as cur:
            for stmt in statements:
                cur.execute(stmt)

        logger.info(f"Executed {len(statements)} DDL statements")
        return len(statements)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["PydanticToSQL"]
