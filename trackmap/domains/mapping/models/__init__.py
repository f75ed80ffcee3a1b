"""
Mapping models module.
Contains the map widget port and its headless implementation.
"""

from .map_widget import MapWidget, HeadlessMapWidget

__all__ = [
    'MapWidget',
    'HeadlessMapWidget'
]
