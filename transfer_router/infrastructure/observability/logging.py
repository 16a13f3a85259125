"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from transfer_router.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # httpx logs every transfer data request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_routing_outcome(
    request_id: str,
    target_account_id: str,
    outcome: str,
    route_count: int,
    duration_ms: float,
    all_routes_risky: Optional[bool] = None,
) -> None:
    """Log structured routing outcome for analysis"""
    logging.info(
        "Routing completed",
        extra={
            "request_id": request_id,
            "target_account_id": target_account_id,
            "step": "routing_complete",
            "outcome": outcome,
            "route_count": route_count,
            "all_routes_risky": all_routes_risky,
            "duration_ms": duration_ms,
        },
    )
