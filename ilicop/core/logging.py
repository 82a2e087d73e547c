"""Structured logging via structlog.

Configures structlog once at runner startup. Modules keep using
`logging.getLogger(__name__)`; the stdlib bridge renders those records with
the same processors and the same renderer as structlog events.

Renderer selection:
  debug=True:  `ConsoleRenderer` with colours for local development.
  debug=False: `JSONRenderer` for machine-parseable logs in production.

ContextVar injection:
  The `job_id` field is injected into every log line, structlog or stdlib,
  from a ContextVar. `ValidatorService.run` binds it for the duration of a job, so
  nested calls (executor, GWP processor, bundler) do not pass it around.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import structlog

_HANDLER_NAME = "ilicop"

_job_id_var: ContextVar[str] = ContextVar("job_id", default="")


def get_job_id() -> str:
    """Return the current job ID, or empty string if not set."""
    return _job_id_var.get()


@contextmanager
def bind_job_id(job_id: str) -> Iterator[None]:
    """Bind `job_id` to the logging context for the enclosed block."""
    token = _job_id_var.set(str(job_id))
    try:
        yield
    finally:
        _job_id_var.reset(token)


def _inject_context_vars(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: inject job_id from the ContextVar."""
    job_id = get_job_id()
    if job_id:
        event_dict["job_id"] = job_id
    return event_dict


def configure_structlog(debug: bool = True) -> None:
    """Configure structlog for the process lifetime.

    Module loggers stay stdlib loggers. Their records are rendered by a
    `ProcessorFormatter` on one root handler, which runs the same
    processors as structlog's own events, so `job_id` appears on both.

    Calling multiple times is safe; the previous handler is replaced.
    """
    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_context_vars,
        structlog.processors.StackInfoRenderer(),
    ]

    if debug:
        renderers: list = [structlog.dev.ConsoleRenderer()]
    else:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta] + renderers,
    )

    # Bridge stdlib logging → structlog rendering so SQLAlchemy and our own
    # module loggers end up in the same stream with the same fields.
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
