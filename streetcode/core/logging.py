import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

request_id_ctx_var: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    return request_id_ctx_var.get()


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Un seul handler stdout, lignes JSON, avec l'id de requête courant."""
    logger = logging.getLogger()
    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    formatter = JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s")
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    logger.handlers = [handler]


def ensure_request_id(value: Optional[str]) -> str:
    return value or str(uuid.uuid4())
