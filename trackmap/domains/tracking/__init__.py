"""
Tracking domain for reconstructing entity tracks from columnar input.

This domain handles:
- Field probing under accepted aliases
- Grouping samples into ordered per-track position sequences
- Live/stale classification of tracks
"""
