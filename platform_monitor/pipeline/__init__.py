"""Pipeline orchestration and run reporting."""

from .models import PipelineRunResult, SourceRunStats
from .runner import DiscoveryPipeline

__all__ = ["DiscoveryPipeline", "PipelineRunResult", "SourceRunStats"]
