"""API HTTP (FastAPI)."""
