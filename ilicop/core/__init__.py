"""Settings and logging setup shared by the runner modules."""

from ilicop.core.config import Settings, get_settings
from ilicop.core.logging import bind_job_id, configure_structlog, get_job_id

__all__ = [
    "Settings",
    "get_settings",
    "bind_job_id",
    "configure_structlog",
    "get_job_id",
]
