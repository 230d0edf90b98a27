from .logging_config import setup_logging, get_logger, JSONFormatter, DevelopmentFormatter

__all__ = ['setup_logging', 'get_logger', 'JSONFormatter', 'DevelopmentFormatter']
