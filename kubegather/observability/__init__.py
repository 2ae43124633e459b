"""Logging and metrics for kubegather."""
