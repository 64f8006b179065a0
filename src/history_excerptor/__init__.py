"""History excerptor: audit trail excerpts for operational history tables."""

__version__ = "0.1.0"
