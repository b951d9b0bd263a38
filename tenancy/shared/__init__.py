"""Shared helpers used across layers (logging, time, ids, redaction, request metadata)."""
