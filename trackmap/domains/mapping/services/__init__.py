"""
Mapping services module.
"""

from .bounds_calculator import BoundsCalculator
from .viewport_synchronizer import ViewportSynchronizer

__all__ = [
    'BoundsCalculator',
    'ViewportSynchronizer'
]
