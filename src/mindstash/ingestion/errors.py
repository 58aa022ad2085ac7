"""Ingestion errors."""


class IngestionError(Exception):
    """Base exception for ingestion sessions."""


class IngestionBusyError(IngestionError):
    """Raised when a session is started while another is still running."""
