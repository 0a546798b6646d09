"""Function nodes, function types and symbol weights for gene construction."""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any


class FuncType(enum.Enum):
    """The kind of value that a gene's expression works on."""

    BOOL = "bool"
    INT = "int"
    FLOAT64 = "float64"
    VECTOR_INTS = "vector_ints"


@dataclass(frozen=True)
class FunctionNode:
    """A named function of fixed arity that can appear in a Karva expression."""

    symbol: str
    terminals: int
    func: Callable[[Sequence[Any]], Any]

    def __call__(self, args: Sequence[Any]) -> Any:
        return self.func(args)


@dataclass(frozen=True)
class FuncWeight:
    """A symbol and its relative likelihood of being chosen.

    A symbol with weight 5 is five times more likely to be used than a
    symbol with weight 1.
    """

    symbol: str
    weight: int


def all_symbols_equal_weights(functions: Mapping[str, Any]) -> list[FuncWeight]:
    """Return every symbol of ``functions`` with a weight of 1."""
    return [FuncWeight(symbol=symbol, weight=1) for symbol in functions]