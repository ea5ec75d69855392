import os
import sys
from logging.config import dictConfig

from whmapping.core.config import APP_ENV

LOG_LEVEL = os.getenv("LOG_LEVEL") or ("DEBUG" if APP_ENV == "development" else "INFO")


def setup_logging():
    """Console logging plus a dedicated access stream.

    Ledger services log one INFO line per committed mutation and one WARNING
    per rejected one, whatever the root level is.
    """
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS | %(request_id)s | "
                        "%(client_addr)s | %(actor)s | %(method)s | "
                        "%(path)s | %(status_code)s | %(process_time_ms)sms"
                    ),
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
                "access_console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                },
            },
            "loggers": {
                "access": {
                    "handlers": ["access_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                # replaced by the access logger above
                "uvicorn.access": {
                    "handlers": [],
                    "propagate": False,
                },
                "whmapping.services.inventory": {
                    "level": "INFO",
                },
                "sqlalchemy.engine": {
                    "level": "WARNING",
                },
            },
            "root": {
                "level": LOG_LEVEL,
                "handlers": ["console"],
            },
        }
    )
