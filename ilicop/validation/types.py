"""Types for the job entry point."""

from dataclasses import dataclass
from typing import Optional

from ilicop.gwp.types import GwpOutcome
from ilicop.ilitools.types import ProcessResult


@dataclass
class JobOutcome:
    """Validation result plus GWP post-processing result, if it ran.

    gwp is None when validation did not succeed.
    """

    job_id: str
    validation: ProcessResult
    gwp: Optional[GwpOutcome] = None

    @property
    def is_success(self) -> bool:
        return self.validation.is_success and (self.gwp is None or self.gwp.is_success)

    def to_dict(self) -> dict:
        return {
            "job_id": self.job_id,
            "exit_code": self.validation.exit_code,
            "error": self.validation.error,
            "is_success": self.is_success,
            "gwp": self.gwp.to_dict() if self.gwp else None,
        }
