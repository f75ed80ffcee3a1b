"""
Domain layer for the track map backend.

This layer contains the business logic organized by domain:
- tracking: Field extraction, track building and liveness
- visualization: Style overrides and per-mode view projection
- mapping: Bounds, map widget port and viewport synchronization

Each domain follows the structure:
- entities: Domain objects and value objects
- services: Business logic and use cases
- models: Technical implementations and adapters
"""
