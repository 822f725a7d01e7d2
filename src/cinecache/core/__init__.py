"""Core infrastructure: logging and the error hierarchy."""
