"""Data preparation and end-to-end orchestration."""

from .orchestrator import (
    PerformancePoint,
    PipelineResult,
    RegimeAllocationPipeline,
    run_pipeline,
)
from .transform import build_observation_windows, observations_from_frame

__all__ = [
    "PerformancePoint",
    "PipelineResult",
    "RegimeAllocationPipeline",
    "run_pipeline",
    "build_observation_windows",
    "observations_from_frame",
]
