# websolve_leads/core/__init__.py
"""
Core package for configuration, logging, and shared errors.
"""

from websolve_leads.core.config import Settings, settings
from websolve_leads.core.logging import configure_structlog, get_structlog_logger

__all__ = [
    "Settings",
    "settings",
    "configure_structlog",
    "get_structlog_logger",
]
