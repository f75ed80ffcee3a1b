"""
Visualization domain for map view datasets.

This domain handles:
- Per-entity style override tables
- Marker, ant path, heatmap and hexbin projections
"""
