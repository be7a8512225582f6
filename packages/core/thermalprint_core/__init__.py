"""Core services for settings, logging, and queued printing."""

from .config import AppConfig, load_config, printer_config, save_config
from .logging_setup import configure_logging, get_logger
from .print_queue import PrintQueue, QueueState, QueueStatus

__all__ = [
    "AppConfig",
    "PrintQueue",
    "QueueState",
    "QueueStatus",
    "configure_logging",
    "get_logger",
    "load_config",
    "printer_config",
    "save_config",
]
