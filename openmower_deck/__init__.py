"""Telemetry ingestion and command dispatch for OpenMower dashboards."""

__version__ = "0.1.0"
