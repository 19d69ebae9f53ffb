"""Centralized canonical JSON serialization.

Every JSON payload the CLI prints goes through here, so the same query on the
same document prints byte-identical output. Field order of a type lives in its
``order`` list; mapping keys are always sorted.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization.

    Rules:
    - UTF-8 output (no ASCII escaping)
    - Sorted keys
    - Stable separators (",", ":")
    - Tuples and lists keep their order

    Args:
        obj: Python object to serialize

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )
