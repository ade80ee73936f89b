"""
Structured logging for Backend SOS.

JSON logs with timestamp, level and event_type. Use get_logger() in all modules.
"""

from backend_sos.sos_logging.logger import get_logger

__all__ = ["get_logger"]
