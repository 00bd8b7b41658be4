"""Value objects package."""
from .recognition import CycleOutcome, CycleReport, DetectionResult, MatchResult

__all__ = ["CycleOutcome", "CycleReport", "DetectionResult", "MatchResult"]
