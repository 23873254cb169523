"""FileCabinet path resolution and storage adapter."""
