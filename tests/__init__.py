"""
ArtiDB Test Suite.

This package contains:
- unit/: Unit tests (in-memory fakes, temporary SQLite files)
- integration/: Service and CLI tests over real local transports
"""
