"""
Core Module

Core functionality including:
- Logging (structured logging)
- Metrics (Prometheus)
- Exceptions (custom exceptions)
"""

__all__ = [
    "logging",
    "metrics",
    "exceptions",
]
