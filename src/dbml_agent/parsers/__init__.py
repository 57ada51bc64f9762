from dbml_agent.parsers.base import Parser
from dbml_agent.parsers.typeorm import TypeOrmParser

__all__ = ["Parser", "TypeOrmParser"]
