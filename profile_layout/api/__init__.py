"""API HTTP — app FastAPI + routes."""
