"""Package-wide logger for argtrellis; handlers are left to the host application."""
import logging

logger = logging.getLogger("argtrellis")
