"""Adapters – SQLAlchemy persistence, Redis cache store, FastAPI binding."""
