"""Switch Library Manager: settings, catalog freshness and application bootstrap."""

__version__ = "1.9.0"
