"""modelctl — validate YAML domain model hierarchies."""

__version__ = "0.1.0"
