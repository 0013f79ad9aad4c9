"""taskboard: optimistic task list reconciliation engine."""

__version__ = "0.1.0"
