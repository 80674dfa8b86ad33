"""Integrações externas (analytics)."""
