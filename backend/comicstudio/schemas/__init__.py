"""
Comic Studio Backend — Pydantic Request/Response Schemas
==========================================================

API payloads use camelCase field names (the editor frontend's convention);
every schema also accepts snake_case on input.
"""
