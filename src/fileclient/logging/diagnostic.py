import logging
import sys

LOGGER_NAME = "fileclient"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(level: str = "WARNING") -> None:
    """Send diagnostics to stderr so they never mix with command output."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        stream=sys.stderr,
    )


class DiagnosticLogger:
    @staticmethod
    def warn(msg: str):
        logger.warning(f"[DIAG_WARN] {msg}")

    @staticmethod
    def debug(msg: str):
        logger.debug(f"[DIAG_DEBUG] {msg}")

    @staticmethod
    def error(msg: str):
        logger.error(f"[DIAG_ERROR] {msg}")

    @staticmethod
    def info(msg: str):
        logger.info(f"[DIAG_INFO] {msg}")

diagnostic_logger = DiagnosticLogger()

def log_command(name: str, args: list[str], cwd: str):
    diagnostic_logger.debug(f"Command {name} {args} in {cwd}")

def log_command_failure(name: str, err: BaseException):
    diagnostic_logger.warn(f"Command {name} failed: {type(err).__name__}: {err}")

def log_backend_event(kind: str, root: str, event: str):
    diagnostic_logger.info(f"Backend {kind} {event}. Root: {root}")
