"""Track map backend: track aggregation and view projection for map panels."""
