from __future__ import annotations
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

TableGrouping = Literal["schema", "none"]


class GeneratorOptions(BaseModel):
    include_schemas: bool = True
    include_indexes: bool = True
    include_notes: bool = True
    include_enums: bool = True
    table_grouping: TableGrouping = "schema"
    project_name: Optional[str] = "Database Schema"
    database_type: str = "PostgreSQL"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    input_patterns: List[str] = Field(default=["./src/entities/**/*.entity.ts"], alias="DBML_INPUT")
    exclude_patterns: List[str] = Field(default_factory=list, alias="DBML_EXCLUDE")
    output: Path = Field(default=Path("./schema.dbml"), alias="DBML_OUTPUT")

    project_name: str = Field(default="Database Schema", alias="DBML_PROJECT_NAME")
    database_type: str = Field(default="PostgreSQL", alias="DBML_DATABASE_TYPE")
    table_grouping: TableGrouping = Field(default="schema", alias="DBML_TABLE_GROUPING")

    watch_debounce: float = Field(default=0.5, alias="DBML_WATCH_DEBOUNCE")

    def generator_options(self, **overrides) -> GeneratorOptions:
        values = {
            "project_name": self.project_name or None,
            "database_type": self.database_type,
            "table_grouping": self.table_grouping,
        }
        values.update(overrides)
        return GeneratorOptions(**values)


settings = Settings()
