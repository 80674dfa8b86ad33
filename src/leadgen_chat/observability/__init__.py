"""Observabilidade: logging JSON e correlation-id."""
