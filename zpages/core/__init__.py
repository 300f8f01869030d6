"""Core enums, logging context and error types."""
