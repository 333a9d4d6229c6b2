"""Data model: Column and Relation."""

from sqlprimer.model.relation import Relation
from sqlprimer.model.types import Column, Value

__all__ = ["Column", "Relation", "Value"]
