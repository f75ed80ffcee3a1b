"""
Mapping domain for viewport handling.

This domain handles:
- Bounding boxes over track subsets
- Map center resolution
- Fit-to-data and publishing the visible bounds to the host
"""
