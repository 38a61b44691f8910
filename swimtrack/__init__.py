"""
swimtrack - swim activity ingestion and performance statistics.

This package contains the complete core:
- core: Framework-agnostic domain logic (sessions, derived metrics, statistics)
- infrastructure: File format parsers and the async ingestion service
- reporting: JSON-ready payload models for external consumers
- config: Application configuration
"""

__version__ = "0.1.0"
