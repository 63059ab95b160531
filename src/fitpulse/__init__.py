"""fitpulse — health export ingestion and normalization."""

__version__ = "0.1.0"
