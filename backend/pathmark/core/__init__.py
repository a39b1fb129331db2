"""Core configuration, database and shared helpers."""
