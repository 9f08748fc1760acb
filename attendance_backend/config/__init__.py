from .settings import Settings, load_settings, parse_duration
from .log_setup import setup_logging

__all__ = ["Settings", "load_settings", "parse_duration", "setup_logging"]
