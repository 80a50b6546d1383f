"""Document store binding for a load-generation harness."""

__version__ = "0.1.0"
