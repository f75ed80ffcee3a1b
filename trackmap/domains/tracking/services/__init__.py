"""
Tracking services module.
Contains field extraction, track building and liveness evaluation.
"""

from .field_extractor import FieldExtractor
from .track_builder import TrackBuilder
from .liveness_evaluator import LivenessEvaluator

__all__ = [
    'FieldExtractor',
    'TrackBuilder',
    'LivenessEvaluator'
]
