"""Query execution over named relations."""

from sqlprimer.executor.environment import Environment
from sqlprimer.executor.errors import (
    QueryError,
    QuerySyntaxError,
    TypeMismatchError,
    UnknownColumnError,
    UnknownRelationError,
)
from sqlprimer.executor.runner import QueryRunner, execute

__all__ = [
    "Environment",
    "QueryError",
    "QueryRunner",
    "QuerySyntaxError",
    "TypeMismatchError",
    "UnknownColumnError",
    "UnknownRelationError",
    "execute",
]
