"""
Cache key derivation.

Keys are a short hash of a canonical JSON serialization. Object keys are
sorted and sets are ordered before hashing, so logically equal inputs always
map to the same key regardless of construction order.

Dependencies: hashlib, json (stdlib), pydantic
System role: Deterministic keys for every cache tier
"""

import hashlib
import json
from typing import Any

from pydantic import BaseModel

KEY_HASH_LENGTH = 16


def _canonicalize(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return _canonicalize(value.model_dump(mode="json"))
    if isinstance(value, dict):
        return {str(key): _canonicalize(item) for key, item in value.items()}
    if isinstance(value, (set, frozenset)):
        items = [_canonicalize(item) for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True, default=str))
    if isinstance(value, (list, tuple)):
        return [_canonicalize(item) for item in value]
    return value


def canonical_json(data: Any) -> str:
    """Serialize data with sorted object keys and compact separators."""
    return json.dumps(
        _canonicalize(data),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def hash_text(text: str) -> str:
    """Full SHA-256 hex digest of exact text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def create_cache_key(prefix: str, data: Any) -> str:
    """
    Build a namespaced cache key.

    Strings are hashed verbatim; anything else is canonicalized first.

    Args:
        prefix: Tier namespace (search, resp, docs, ...)
        data: Lookup input

    Returns:
        str: Key of the form "prefix:hash"
    """
    serialized = data if isinstance(data, str) else canonical_json(data)
    return f"{prefix}:{hash_text(serialized)[:KEY_HASH_LENGTH]}"
