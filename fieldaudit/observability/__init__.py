"""Logging and metrics for fieldaudit."""
