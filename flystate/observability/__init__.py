"""Logging and metrics for flystate."""
