"""
Lox Control Flow - Completion record for `return`

Statement execution returns either None (completed normally) or an `Unwind`
carrying the returned value. Blocks and loops pass an `Unwind` straight up;
the function-call boundary consumes it. Runtime failures travel on the
separate exception channel and never look like an `Unwind`.
"""

from typing import Any
from dataclasses import dataclass


@dataclass(frozen=True)
class Unwind:
    """`return` in flight toward the nearest call boundary"""
    value: Any = None


__all__ = ['Unwind']
