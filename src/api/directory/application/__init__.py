"""Application layer for the directory bounded context."""
