from .logger import Logger as Logger
from .logger_context import LoggerContext as LoggerContext
from .logger_stream import LoggerStream as LoggerStream, parse_log_path as parse_log_path
