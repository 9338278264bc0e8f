import logging
from typing import Any, Dict

class APILogger:
    """Request/response logging helper for endpoints"""

    SEPARATOR = "=" * 50

    @staticmethod
    def _format_log_data(**kwargs) -> str:
        return " | ".join(f"{k}={v}" for k, v in kwargs.items() if v is not None)

    @staticmethod
    def _get_logger() -> logging.Logger:
        return logging.getLogger("api")

    @classmethod
    def _log_with_separator(cls, logger: logging.Logger, level: int, msg: str) -> None:
        logger.log(level, f"\n{cls.SEPARATOR}\n{msg}\n{cls.SEPARATOR}")

    @classmethod
    def log_request(cls, operation: str, **kwargs) -> None:
        """Log an incoming request"""
        logger = cls._get_logger()
        log_data = cls._format_log_data(**kwargs)
        msg = f"[{operation}] request | {log_data}"
        cls._log_with_separator(logger, logging.INFO, msg)

    @classmethod
    def log_response(cls, operation: str, **kwargs) -> None:
        """Log a successful response"""
        logger = cls._get_logger()
        log_data = cls._format_log_data(**kwargs)
        msg = f"[{operation}] response | {log_data}"
        cls._log_with_separator(logger, logging.INFO, msg)

    @classmethod
    def log_warning(cls, operation: str, message: str, **kwargs) -> None:
        """Log a rejected request"""
        logger = cls._get_logger()
        log_data = cls._format_log_data(**kwargs)
        msg = f"[{operation}] warning | {message} | {log_data}"
        cls._log_with_separator(logger, logging.WARNING, msg)

    @classmethod
    def log_error(cls, operation: str, error: Exception, **kwargs) -> None:
        """Log an unexpected failure"""
        logger = cls._get_logger()
        log_data = cls._format_log_data(**kwargs)
        msg = f"[{operation}] error | {str(error)} | {log_data}"
        cls._log_with_separator(logger, logging.ERROR, msg)

    @staticmethod
    def format_friendship_info(edge: Any) -> Dict[str, Any]:
        """Loggable summary of a friendship edge"""
        return {
            "id": edge.id,
            "requester": edge.user_id,
            "recipient": edge.friend_id,
            "accepted": edge.accepted,
            "rejected": edge.rejected,
            "cancelled": edge.cancelled
        }
