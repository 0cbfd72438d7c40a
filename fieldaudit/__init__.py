"""Field-level change auditing for revisioned records."""

__version__ = "0.1.0"
