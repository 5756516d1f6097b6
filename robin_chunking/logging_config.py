"""
Logging configuration for the robin_chunking library.

This module centralizes logging setup with support for:
- User-facing status messages (minimal, essential information)
- Developer debug logs for tracing chunking runs
- Console and rotating file output, as text or JSON
- Performance and metrics records collected per session
"""

import json
import logging
import logging.handlers
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# LogRecord attributes that are not user-supplied ``extra`` fields
_STANDARD_RECORD_FIELDS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'stack_info',
    'exc_info', 'exc_text', 'taskName', 'message', 'asctime',
])


class LogLevel(Enum):
    """Logging levels with user-friendly names."""
    SILENT = "silent"      # Only critical errors
    MINIMAL = "minimal"    # Bare status messages
    NORMAL = "normal"      # Standard logging for users
    VERBOSE = "verbose"    # Adds performance and metrics lines
    DEBUG = "debug"        # Full debugging information
    TRACE = "trace"        # Maximum verbosity for development


@dataclass
class LogConfig:
    """Configuration for logging behavior."""
    level: LogLevel = LogLevel.NORMAL
    console_output: bool = True
    file_output: bool = False
    log_file: Optional[Path] = None
    collect_performance: bool = True
    collect_metrics: bool = True
    format_json: bool = False
    include_module_names: bool = True
    max_file_size: str = "10MB"
    backup_count: int = 3

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = asdict(self)
        result['level'] = self.level.value
        if self.log_file:
            result['log_file'] = str(self.log_file)
        return result


class ChunkingLogger:
    """Process-wide logging manager for robin_chunking."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self.config = LogConfig()
        self.performance_logs: List[Dict[str, Any]] = []
        self.metrics_logs: List[Dict[str, Any]] = []
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self._handlers: List[logging.Handler] = []

    def configure(self, config: Optional[LogConfig] = None, **kwargs) -> None:
        """
        Configure logging behavior.

        Args:
            config: LogConfig object with settings
            **kwargs: Individual config fields overriding ``config``
        """
        base = config or self.config
        config_dict = {
            'level': base.level,
            'console_output': base.console_output,
            'file_output': base.file_output,
            'log_file': base.log_file,
            'collect_performance': base.collect_performance,
            'collect_metrics': base.collect_metrics,
            'format_json': base.format_json,
            'include_module_names': base.include_module_names,
            'max_file_size': base.max_file_size,
            'backup_count': base.backup_count,
        }

        for key, value in kwargs.items():
            if key not in config_dict:
                continue
            if key == 'level' and isinstance(value, str):
                value = LogLevel(value.lower())
            elif key == 'log_file' and value:
                value = Path(value)
            config_dict[key] = value

        self.config = LogConfig(**config_dict)
        self._configure_logging()

    def _configure_logging(self) -> None:
        """Install handlers on the package logger according to the current configuration."""
        package_logger = logging.getLogger('robin_chunking')
        for handler in self._handlers:
            package_logger.removeHandler(handler)
            handler.close()
        self._handlers = []

        level = self._get_python_log_level(self.config.level)
        package_logger.setLevel(level)

        formatter = JsonFormatter() if self.config.format_json else self._create_text_formatter()

        if self.config.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            console_handler.setLevel(level)
            self._handlers.append(console_handler)

        if self.config.file_output and self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                self.config.log_file,
                maxBytes=parse_size(self.config.max_file_size),
                backupCount=self.config.backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            file_handler.setLevel(level)
            self._handlers.append(file_handler)

        for handler in self._handlers:
            package_logger.addHandler(handler)

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger for the given module name."""
        return logging.getLogger(name)

    def user_info(self, message: str, **kwargs) -> None:
        """Log user-facing informational message."""
        if self.config.level != LogLevel.SILENT:
            logger = self.get_logger('robin_chunking.user')
            logger.info(message, extra={'user_message': True, **kwargs})

    def user_success(self, message: str, **kwargs) -> None:
        """Log user-facing success message."""
        if self.config.level != LogLevel.SILENT:
            logger = self.get_logger('robin_chunking.user')
            logger.info(f"✅ {message}", extra={'user_message': True, **kwargs})

    def user_warning(self, message: str, **kwargs) -> None:
        """Log user-facing warning message."""
        logger = self.get_logger('robin_chunking.user')
        logger.warning(f"⚠️  {message}", extra={'user_message': True, **kwargs})

    def user_error(self, message: str, **kwargs) -> None:
        """Log user-facing error message."""
        logger = self.get_logger('robin_chunking.user')
        logger.error(f"❌ {message}", extra={'user_message': True, **kwargs})

    def debug_operation(self, operation: str, details: Dict[str, Any], **kwargs) -> None:
        """Log detailed operation information for debugging."""
        if self.config.level in (LogLevel.DEBUG, LogLevel.TRACE):
            logger = self.get_logger('robin_chunking.debug')
            logger.debug(f"🔧 {operation}: {details}", extra={'operation': operation, **kwargs})

    def performance_log(self, operation: str, duration: float, **kwargs) -> None:
        """Record a timing and log it at verbose levels."""
        if not self.config.collect_performance:
            return

        perf_data = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation,
            'duration_seconds': duration,
            'session_id': self.session_id,
            **kwargs
        }
        self.performance_logs.append(perf_data)

        if self.config.level in (LogLevel.VERBOSE, LogLevel.DEBUG, LogLevel.TRACE):
            logger = self.get_logger('robin_chunking.performance')
            logger.info(f"⏱️  {operation}: {duration:.3f}s")

    def metrics_log(self, metrics: Dict[str, Any], **kwargs) -> None:
        """Record chunking metrics and log them at verbose levels."""
        if not self.config.collect_metrics:
            return

        metrics_data = {
            'timestamp': datetime.now().isoformat(),
            'session_id': self.session_id,
            'metrics': metrics,
            **kwargs
        }
        self.metrics_logs.append(metrics_data)

        if self.config.level in (LogLevel.VERBOSE, LogLevel.DEBUG, LogLevel.TRACE):
            logger = self.get_logger('robin_chunking.metrics')
            logger.info(f"📊 {json.dumps(metrics, default=str)}")

    def _get_python_log_level(self, level: LogLevel) -> int:
        """Convert our log level to a Python logging level."""
        mapping = {
            LogLevel.SILENT: logging.CRITICAL,
            LogLevel.MINIMAL: logging.INFO,
            LogLevel.NORMAL: logging.INFO,
            LogLevel.VERBOSE: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.TRACE: logging.DEBUG
        }
        return mapping.get(level, logging.INFO)

    def _create_text_formatter(self) -> logging.Formatter:
        """Create human-readable text formatter."""
        if self.config.level == LogLevel.MINIMAL:
            fmt = '%(message)s'
        elif self.config.include_module_names and self.config.level in (LogLevel.DEBUG, LogLevel.TRACE):
            fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        else:
            fmt = '%(asctime)s - %(levelname)s - %(message)s'

        return logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'filename': record.filename,
            'line_number': record.lineno,
            'function': record.funcName
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        extra_fields = {k: v for k, v in record.__dict__.items()
                        if k not in _STANDARD_RECORD_FIELDS}
        if extra_fields:
            log_data.update(extra_fields)

        return json.dumps(log_data, default=str)


def parse_size(size: Union[str, int]) -> int:
    """
    Parse a size such as '10MB', '512K' or '4096' into bytes.

    Raises:
        ValueError: If the size cannot be parsed
    """
    if isinstance(size, int):
        return size

    text = size.strip().upper()
    multipliers = [('GB', 1024**3), ('MB', 1024**2), ('KB', 1024), ('G', 1024**3),
                   ('M', 1024**2), ('K', 1024), ('B', 1)]
    for suffix, multiplier in multipliers:
        if text.endswith(suffix):
            return int(float(text[:-len(suffix)]) * multiplier)
    return int(text)


# Global logger instance
_logger = ChunkingLogger()


def get_logger(name: str = 'robin_chunking') -> logging.Logger:
    """Get a logger for the library (usually called with ``__name__``)."""
    return _logger.get_logger(name)


def configure_logging(level: Union[str, LogLevel] = LogLevel.NORMAL, **kwargs) -> None:
    """
    Configure library-wide logging.

    Args:
        level: Logging level
        **kwargs: Additional LogConfig fields
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())

    _logger.configure(level=level, **kwargs)


def get_log_config() -> LogConfig:
    """Current logging configuration."""
    return _logger.config


def user_info(message: str, **kwargs) -> None:
    """Log user-facing informational message."""
    _logger.user_info(message, **kwargs)


def user_success(message: str, **kwargs) -> None:
    """Log user-facing success message."""
    _logger.user_success(message, **kwargs)


def user_warning(message: str, **kwargs) -> None:
    """Log user-facing warning message."""
    _logger.user_warning(message, **kwargs)


def user_error(message: str, **kwargs) -> None:
    """Log user-facing error message."""
    _logger.user_error(message, **kwargs)


def debug_operation(operation: str, details: Dict[str, Any], **kwargs) -> None:
    """Log detailed operation information for debugging."""
    _logger.debug_operation(operation, details, **kwargs)


def performance_log(operation: str, duration: float, **kwargs) -> None:
    """Log performance metrics."""
    _logger.performance_log(operation, duration, **kwargs)


def metrics_log(metrics: Dict[str, Any], **kwargs) -> None:
    """Log quality and processing metrics."""
    _logger.metrics_log(metrics, **kwargs)


def get_performance_logs() -> List[Dict[str, Any]]:
    """Timings recorded in this session."""
    return list(_logger.performance_logs)


def get_metrics_logs() -> List[Dict[str, Any]]:
    """Metrics recorded in this session."""
    return list(_logger.metrics_logs)


def enable_debug_mode(log_file: Optional[Union[str, Path]] = None) -> None:
    """
    Enable debug logging, optionally mirrored to a file.

    Args:
        log_file: Optional path for the debug log file
    """
    _logger.configure(LogConfig(
        level=LogLevel.DEBUG,
        console_output=True,
        file_output=bool(log_file),
        log_file=Path(log_file) if log_file else None,
        collect_performance=True,
        collect_metrics=True,
    ))
    _logger.user_info(f"Debug mode enabled (session {_logger.session_id})")
