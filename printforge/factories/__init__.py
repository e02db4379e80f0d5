"""Factories wiring settings into service instances."""
