"""SuiteTalk REST transport with OAuth 1.0 request signing."""
