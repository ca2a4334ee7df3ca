"""Ingestion layer.

Helpers that turn untrusted telemetry payloads into normalized values
before they reach the typed models and the state layer.
"""

__all__: list[str] = []
