"""Logging, event feed and replay helpers."""
