"""NRE task tracker: REST API, record stores, CSV import/export and dashboard helpers."""

__version__ = "1.1.0"
