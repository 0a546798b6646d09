"""Evaluation of Karva expressions: argument layout and evaluator construction."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from gep.weights import FuncType, FunctionNode

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"[+-]?[0-9]+")

Evaluator = Callable[[Sequence[Any]], Any]


def _default(func_type: FuncType) -> Any:
    """The value an expression yields when it cannot be evaluated."""
    if func_type is FuncType.BOOL:
        return False
    if func_type is FuncType.INT:
        return 0
    if func_type is FuncType.VECTOR_INTS:
        return []
    return 0.0


def _parse_index(symbol: str) -> int | None:
    text = symbol[1:]
    if not _INDEX_RE.fullmatch(text):
        return None
    index = int(text)
    return index if index >= 0 else None


def _broadcast(inputs: Sequence[Sequence[int]], value: int) -> list[int]:
    """A vector holding ``value`` once for each element of the longest input."""
    length = max((len(vector) for vector in inputs), default=0)
    return [value] * length


def arg_order(
    symbols: Sequence[str], functions: Mapping[str, FunctionNode]
) -> list[tuple[int, ...]]:
    """Return, for each symbol, the indices of the symbols that are its arguments.

    Terminals and unknown symbols take no arguments and get an empty tuple.
    For example ``+.*.-./`` gives ``[(1, 2), (3, 4), (5, 6), (7, 8)]``.
    """
    order: list[tuple[int, ...]] = []
    count = 0
    for symbol in symbols:
        node = functions.get(symbol)
        if node is None or node.terminals <= 0:
            order.append(())
            continue
        order.append(tuple(range(count + 1, count + node.terminals + 1)))
        count += node.terminals
    return order


def build_evaluator(
    symbols: Sequence[str],
    constants: Sequence[float],
    functions: Mapping[str, FunctionNode],
    func_type: FuncType,
) -> tuple[Evaluator, dict[str, int]]:
    """Build a callable for the expression and count how often each symbol is used.

    The callable takes the inputs ``d0, d1, ...`` as a sequence.  The counts
    cover only the symbols that are actually reached from the root of the
    expression, not every symbol of the Karva string.
    """
    symbols = list(symbols)
    order = arg_order(symbols, functions)
    counts: dict[str, int] = {}

    def input_fetcher(symbol: str, index: int) -> Evaluator:
        def fetch(inputs: Sequence[Any]) -> Any:
            if index >= len(inputs):
                logger.error(
                    "error evaluating gene symbol %r: index %d >= d length (%d)",
                    symbol, index, len(inputs),
                )
                return _default(func_type)
            return inputs[index]

        return fetch

    def constant_fetcher(symbol: str, index: int) -> Evaluator:
        def fetch(inputs: Sequence[Any]) -> Any:
            if index >= len(constants):
                logger.error(
                    "error evaluating gene symbol %r: index %d >= c length (%d)",
                    symbol, index, len(constants),
                )
                return _default(func_type)
            value = constants[index]
            if func_type is FuncType.INT:
                return int(value)
            if func_type is FuncType.VECTOR_INTS:
                return _broadcast(inputs, int(value))
            return value

        return fetch

    def fallback(inputs: Sequence[Any]) -> Any:
        return _default(func_type)

    def build(index: int) -> Evaluator:
        if index >= len(symbols):
            if func_type is FuncType.BOOL:
                logger.error("bad symbol index %d for symbols: %s", index, symbols)
                return fallback
            raise ValueError(f"bad symbol index {index} for symbols: {symbols}")
        symbol = symbols[index]
        counts[symbol] = counts.get(symbol, 0) + 1

        node = functions.get(symbol)
        if node is not None:
            children = [build(arg) for arg in order[index]]

            def apply(inputs: Sequence[Any]) -> Any:
                return node([child(inputs) for child in children])

            return apply

        if symbol.startswith("d"):
            position = _parse_index(symbol)
            if position is None:
                logger.error("unable to parse variable index: sym=%r", symbol)
            else:
                return input_fetcher(symbol, position)
        elif symbol.startswith("c") and func_type is not FuncType.BOOL:
            position = _parse_index(symbol)
            if position is None:
                logger.error("unable to parse constant index: sym=%r", symbol)
            else:
                return constant_fetcher(symbol, position)

        logger.error("unable to return function: unknown gene symbol %r", symbol)
        return fallback

    return build(0), counts