"""Pipeline orchestration for salary estimation runs."""

from .models import PipelineRunResult, StageStats
from .runner import SalaryPipeline

__all__ = ["SalaryPipeline", "PipelineRunResult", "StageStats"]
