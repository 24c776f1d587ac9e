"""Core infrastructure: configuration, logging, errors."""
