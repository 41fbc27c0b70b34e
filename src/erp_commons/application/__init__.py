"""Application – search, cache-aside and per-entity services."""
