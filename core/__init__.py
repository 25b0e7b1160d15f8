"""Errors and health checks."""
