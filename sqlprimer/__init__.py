"""sqlprimer: learn SQL by querying a table of house sales."""

__version__ = "0.1.0"
