"""Shared utilities: address validation, retry policy and error types."""
