"""Core configuration, roles and error types."""
