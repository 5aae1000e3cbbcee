import json
import logging
import sys
from typing import Any

from cleanclick.core.config import settings


class StructuredAdapter(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        if isinstance(msg, dict):
            msg = json.dumps(msg, default=str)
        return msg, kwargs


def get_logger(name: str) -> StructuredAdapter:
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return StructuredAdapter(logger, {})


logger = get_logger("cleanclick")
