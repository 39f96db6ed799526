"""Lookup source selection."""

from __future__ import annotations

from .env import optional_env_var


def lookup_uri_env_name(kind: str) -> str:
    return f"CURATORIAL_LOOKUP_URI_{kind.upper()}"


def get_lookup_uri(kind: str) -> str:
    """Return the configured source URI for ``kind``, defaulting to the embedded snapshot."""

    return optional_env_var(lookup_uri_env_name(kind), f"{kind}://")
