from dbml_agent.extractors.metadata import assemble_schema

__all__ = ["assemble_schema"]
