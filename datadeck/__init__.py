"""datadeck: upload a CSV or JSON table, get per-column statistics and charts."""

__version__ = "0.1.0"
