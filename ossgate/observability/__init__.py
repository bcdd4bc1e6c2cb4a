from ossgate.observability.log_format import JsonLogFormatter, configure_logging

__all__ = ["JsonLogFormatter", "configure_logging"]
