"""
Core infrastructure.

Shared components used across all modules:
- Configuration management
- Structured logging
- Database engine and sessions
"""

from app.core.config import Settings, get_settings
from app.core.logging import LogContext, configure_logging, get_logger

__all__ = [
    'Settings',
    'get_settings',
    'LogContext',
    'configure_logging',
    'get_logger',
]
