"""Configuration and validation helpers."""
