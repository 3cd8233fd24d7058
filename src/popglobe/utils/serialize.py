# SPDX-License-Identifier: Apache-2.0
"""Lightweight serializers for popglobe payloads (dataclasses, tuples, enums).

Scene, tooltip and detail payloads are frozen dataclasses; the CLI and the
HTTP layer both need plain JSON-ready structures from them.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any


def to_obj(x: Any) -> Any:
    """Convert a value to a JSON-serializable object when possible.

    - Dataclasses → dict of converted fields
    - Enums → their value
    - Tuples/lists → lists of converted items
    - Mappings → dicts of converted values
    - Primitives are returned as-is
    """
    if is_dataclass(x) and not isinstance(x, type):
        return {f.name: to_obj(getattr(x, f.name)) for f in fields(x)}
    if isinstance(x, Enum):
        return x.value
    if isinstance(x, (list, tuple)):
        return [to_obj(i) for i in x]
    if isinstance(x, dict):
        return {str(k): to_obj(v) for k, v in x.items()}
    return x
