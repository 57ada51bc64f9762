from __future__ import annotations

from dbml_agent.model import ColumnMetadata

# 소스 타입 토큰 -> DBML 타입 (PostgreSQL / MySQL / SQL Server / Oracle)
TYPE_MAP = {
    # string
    "varchar": "varchar",
    "character varying": "varchar",
    "char": "char",
    "character": "char",
    "text": "text",
    "string": "varchar",
    # numeric
    "int": "integer",
    "integer": "integer",
    "int2": "smallint",
    "int4": "integer",
    "int8": "bigint",
    "smallint": "smallint",
    "bigint": "bigint",
    "decimal": "decimal",
    "numeric": "numeric",
    "real": "real",
    "float": "float",
    "float4": "real",
    "float8": "double precision",
    "double": "double precision",
    "double precision": "double precision",
    "money": "money",
    "number": "number",
    # boolean
    "boolean": "boolean",
    "bool": "boolean",
    # date/time
    "date": "date",
    "time": "time",
    "time without time zone": "time",
    "time with time zone": "timetz",
    "timestamp": "timestamp",
    "timestamp without time zone": "timestamp",
    "timestamp with time zone": "timestamptz",
    "timestamptz": "timestamptz",
    "datetime": "timestamp",
    "interval": "interval",
    "uuid": "uuid",
    # binary
    "bytea": "bytea",
    "blob": "bytea",
    "binary": "bytea",
    "varbinary": "bytea",
    # json / xml
    "json": "json",
    "jsonb": "jsonb",
    "xml": "xml",
    # network
    "inet": "inet",
    "cidr": "cidr",
    "macaddr": "macaddr",
    # geometric
    "point": "point",
    "line": "line",
    "lseg": "lseg",
    "box": "box",
    "path": "path",
    "polygon": "polygon",
    "circle": "circle",
    # range
    "int4range": "int4range",
    "int8range": "int8range",
    "numrange": "numrange",
    "tsrange": "tsrange",
    "tstzrange": "tstzrange",
    "daterange": "daterange",
    # other postgres
    "tsvector": "tsvector",
    "tsquery": "tsquery",
    "bit": "bit",
    "varbit": "varbit",
    "bit varying": "varbit",
    # mysql
    "tinyint": "tinyint",
    "mediumint": "mediumint",
    "year": "year",
    "tinytext": "tinytext",
    "mediumtext": "mediumtext",
    "longtext": "longtext",
    "enum": "enum",
    "set": "set",
    # sql server
    "nvarchar": "nvarchar",
    "nchar": "nchar",
    "ntext": "ntext",
    "uniqueidentifier": "uuid",
    # oracle
    "varchar2": "varchar2",
    "nvarchar2": "nvarchar2",
    "clob": "clob",
    "nclob": "nclob",
    "raw": "raw",
    "long": "long",
}

LENGTH_TYPES = {
    "varchar",
    "character varying",
    "char",
    "character",
    "nvarchar",
    "nchar",
    "varchar2",
    "nvarchar2",
    "bit",
    "varbit",
    "binary",
    "varbinary",
}


def base_type(source_type: str) -> str:
    t = source_type.lower()
    return TYPE_MAP.get(t, t)


def supports_length(source_type: str) -> bool:
    return source_type.lower() in LENGTH_TYPES


def map_type(column: ColumnMetadata) -> str:
    if column.enum_name:
        return column.enum_name

    dbml_type = base_type(column.type)
    if column.is_array:
        dbml_type += "[]"

    if column.length and supports_length(column.type):
        dbml_type += f"({column.length})"
    elif column.precision is not None:
        if column.scale is not None:
            dbml_type += f"({column.precision},{column.scale})"
        else:
            dbml_type += f"({column.precision})"

    return dbml_type
