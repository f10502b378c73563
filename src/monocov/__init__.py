"""MonoCov - per-project coverage aggregation and diff reports for monorepos."""

__version__ = "0.1.0"
