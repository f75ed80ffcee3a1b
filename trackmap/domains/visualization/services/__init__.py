"""
Visualization services module.
"""

from .style_overrides import StyleOverrideTable, StyleOverrides
from .view_projector import ViewProjector

__all__ = [
    'StyleOverrideTable',
    'StyleOverrides',
    'ViewProjector'
]
