"""Job entry point: validation followed by GWP post-processing."""

from ilicop.validation.service import ValidatorService
from ilicop.validation.types import JobOutcome

__all__ = ["ValidatorService", "JobOutcome"]
