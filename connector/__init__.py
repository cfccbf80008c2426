"""Client interfaces for the clinical records service."""

from .records_client import RecordsAPIError, RecordsClient, RecordsClientError

__all__ = ["RecordsAPIError", "RecordsClient", "RecordsClientError"]
