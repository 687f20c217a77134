import logging
import os
from pathlib import Path
from datetime import datetime

# Module-level logger
logger = logging.getLogger(__name__)

# Constants
MAX_LOG_FILES = 7
MAX_LOG_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class SessionLogHandler(logging.Handler):
    """
    Proxy handler that ensures all logs go to the current session's file handler.
    """
    def __init__(self):
        super().__init__()
        self.file_handler = None
        self.current_log_path = None

    def setup_file_logging(self, log_dir):
        """Sets up the file handler for the current session."""
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        self._cleanup_old_logs(log_dir)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.current_log_path = log_dir / f"IconCraft_Session_{timestamp}.log"

        if self.file_handler:
            self.file_handler.close()

        self.file_handler = self._create_file_handler()
        self.file_handler.stream.write(f"# IconCraft Log Session Started: {datetime.now().isoformat()}\n")
        self.file_handler.stream.flush()
        return self.current_log_path

    def _create_file_handler(self):
        handler = logging.FileHandler(self.current_log_path, encoding='utf-8')
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(self.level if self.level else logging.DEBUG)
        return handler

    def _cleanup_old_logs(self, log_dir):
        """Keeps only the latest MAX_LOG_FILES."""
        files = sorted(log_dir.glob("IconCraft_Session_*.log"), key=os.path.getmtime, reverse=True)
        existing_to_keep = MAX_LOG_FILES - 1
        for f in files[existing_to_keep:]:
            try:
                f.unlink()
            except OSError as e:
                logger.debug(f"Could not remove old log {f}: {e}")

    def emit(self, record):
        if not self.file_handler:
            return
        # Rotate: rename to .bak (overwrite) and restart
        if self.current_log_path.exists() and self.current_log_path.stat().st_size > MAX_LOG_SIZE_BYTES:
            self.file_handler.close()
            bak = self.current_log_path.with_suffix(".log.bak")
            if bak.exists():
                bak.unlink()
            self.current_log_path.rename(bak)
            self.file_handler = self._create_file_handler()

        self.file_handler.emit(record)

    def close(self):
        if self.file_handler:
            self.file_handler.close()
            self.file_handler = None
        super().close()

    def set_debug_mode(self, enabled: bool):
        level = logging.DEBUG if enabled else logging.INFO
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        self.setLevel(level)
        if self.file_handler:
            self.file_handler.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        if enabled:
            root_logger.info("Debug mode enabled - all log levels will be captured")
        else:
            root_logger.info("Debug mode disabled - only INFO and above will be captured")


_session_handler = None


def get_session_handler():
    global _session_handler
    if _session_handler is None:
        _session_handler = SessionLogHandler()
        # Default Level
        _session_handler.setLevel(logging.INFO)
    return _session_handler


def setup_session_logging(log_dir=None, root_logger=None, debug: bool = False):
    """
    Attaches the session handler to the root logger and opens a new session log file.
    Returns the path of the log file.
    """
    if root_logger is None:
        root_logger = logging.getLogger()

    handler = get_session_handler()

    if log_dir is None:
        log_dir = Path.home() / ".iconcraft" / "logs"

    path = handler.setup_file_logging(log_dir)

    if handler not in root_logger.handlers:
        root_logger.addHandler(handler)

    # Ensure root logger captures INFO by default so our handlers receive it
    if root_logger.level == logging.NOTSET or root_logger.level > logging.INFO:
        root_logger.setLevel(logging.INFO)

    if debug:
        handler.set_debug_mode(True)

    return path
