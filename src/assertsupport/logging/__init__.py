import logging as _logging

from assertsupport.logging.logger import ROOT_LOGGER, LogConfig, get_logger, setup_logging

# Silent until the host application (or setup_logging) attaches handlers.
_logging.getLogger(ROOT_LOGGER).addHandler(_logging.NullHandler())

__all__ = ["LogConfig", "get_logger", "setup_logging", "ROOT_LOGGER"]
