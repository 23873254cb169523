"""NetSuite FileCabinet storage adapter over the SuiteTalk REST API."""

__version__ = "0.1.0"
