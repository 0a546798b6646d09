"""A single gene: a Karva expression with its constants and mutation rules."""

from __future__ import annotations

import logging
import math
import random
import re
from collections.abc import Iterable, Mapping, MutableMapping, Sequence
from decimal import Decimal
from typing import Any

from gep.grammars import Grammar
from gep.karva import Evaluator, arg_order, build_evaluator
from gep.weights import FuncType, FunctionNode, FuncWeight

logger = logging.getLogger(__name__)

CONST_RANGE = 100

_INDEX_RE = re.compile(r"[+-]?[0-9]+")


def _format_float(value: float) -> str:
    """Render a float the short way: 0.5, 50, 1e+06, 1e-05."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(float(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped
    point = len(digits) + exponent
    exp = point - 1
    prefix = "-" if sign else ""
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{'+' if exp >= 0 else '-'}{abs(exp):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{prefix}{digits}{'0' * (point - len(digits))}"
    return f"{prefix}{digits[:point]}.{digits[point:]}"


def _symbol_index(symbol: str) -> int:
    """The numeric index of a terminal symbol such as ``d3`` or ``c0``."""
    text = symbol[1:]
    if not _INDEX_RE.fullmatch(text):
        raise ValueError(f"unable to parse index of symbol {symbol!r}")
    return int(text)


class Gene:
    """One gene of a genome: a head of any symbols followed by a tail of terminals.

    ``choices`` lists the symbols a mutation may pick from.  Its first
    ``num_terminals`` entries are inputs (``d*``) and constants (``c*``);
    all later entries are function symbols, repeated by weight.
    """

    def __init__(
        self,
        symbols: Iterable[str],
        constants: Iterable[float],
        functions: Mapping[str, FunctionNode],
        func_type: FuncType,
        *,
        head_size: int = 0,
        choices: Iterable[str] = (),
        num_terminals: int = 0,
    ) -> None:
        self._symbols = list(symbols)
        self._constants = [float(c) for c in constants]
        self.functions = functions
        self.func_type = func_type
        self.head_size = head_size
        self.choices = list(choices)
        self.num_terminals = num_terminals
        self._evaluator: Evaluator | None = None
        self._counts: dict[str, int] | None = None

    @property
    def symbols(self) -> list[str]:
        """The Karva symbols of the gene."""
        return self._symbols

    @symbols.setter
    def symbols(self, value: Iterable[str]) -> None:
        self._symbols = list(value)
        self._invalidate()

    @property
    def constants(self) -> list[float]:
        """The constants available as ``c0, c1, ...``."""
        return self._constants

    @constants.setter
    def constants(self, value: Iterable[float]) -> None:
        self._constants = [float(c) for c in value]
        self._invalidate()

    def _invalidate(self) -> None:
        self._evaluator = None
        self._counts = None

    @classmethod
    def parse(
        cls,
        karva: str,
        functions: Mapping[str, FunctionNode],
        func_type: FuncType,
    ) -> Gene:
        """Create a gene from its Karva string, e.g. ``"+.d0.c1"``.

        Constants are sized from the highest ``c`` index and set to zero.
        """
        symbols = karva.split(".")
        num_inputs = num_constants = 0
        for symbol in symbols:
            if not symbol:
                raise ValueError(f"empty symbol in Karva string {karva!r}")
            if symbol in functions:
                continue
            if symbol[0] == "d":
                num_inputs = max(num_inputs, _symbol_index(symbol) + 1)
            elif symbol[0] == "c":
                num_constants = max(num_constants, _symbol_index(symbol) + 1)
        return cls(
            symbols,
            [0.0] * num_constants,
            functions,
            func_type,
            num_terminals=num_inputs + num_constants,
        )

    @classmethod
    def random(
        cls,
        head_size: int,
        tail_size: int,
        num_terminals: int,
        num_constants: int,
        weights: Sequence[FuncWeight],
        functions: Mapping[str, FunctionNode],
        func_type: FuncType,
    ) -> Gene:
        """Create a random gene.

        The head may hold any symbol; the tail holds only inputs and constants.
        Constants are random whole numbers from 0 to 100.
        """
        choices = [f"d{i}" for i in range(num_terminals)]
        choices += [f"c{i}" for i in range(num_constants)]
        constants = [math.floor(CONST_RANGE * random.random() + 0.5) for _ in range(num_constants)]
        for weight in weights:
            choices += [weight.symbol] * weight.weight
        terminals = num_terminals + num_constants
        if terminals <= 0:
            raise ValueError("a gene needs at least one input or constant")
        order = random.sample(range(len(choices)), len(choices))
        head = [choices[order[i % len(order)]] for i in range(head_size)]
        tail = [choices[order[i % len(order)] % terminals] for i in range(tail_size)]
        return cls(
            head + tail,
            constants,
            functions,
            func_type,
            head_size=head_size,
            choices=choices,
            num_terminals=terminals,
        )

    def __str__(self) -> str:
        """The Karva string, with each constant's value shown after its symbol."""
        parts = []
        for symbol in self._symbols:
            if symbol.startswith("c") and symbol not in self.functions:
                index = _symbol_index(symbol)
                if not 0 <= index < len(self._constants):
                    raise ValueError(f"bad constant name: {symbol}")
                parts.append(f"{symbol}({_format_float(self._constants[index])})")
            else:
                parts.append(symbol)
        return ".".join(parts)

    def __repr__(self) -> str:
        return f"Gene({'.'.join(self._symbols)!r}, constants={self._constants!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gene):
            return NotImplemented
        return (
            self._symbols == other._symbols
            and self._constants == other._constants
            and self.choices == other.choices
            and self.head_size == other.head_size
            and self.num_terminals == other.num_terminals
        )

    __hash__ = None  # type: ignore[assignment]

    def arg_order(self) -> list[tuple[int, ...]]:
        """The indices of each symbol's arguments; terminals get an empty tuple."""
        return arg_order(self._symbols, self.functions)

    def _build(self) -> tuple[Evaluator, dict[str, int]]:
        if self._evaluator is None or self._counts is None:
            self._evaluator, self._counts = build_evaluator(
                self._symbols, self._constants, self.functions, self.func_type
            )
        return self._evaluator, self._counts

    def evaluate(self, inputs: Sequence[Any]) -> Any:
        """Evaluate the expression with ``inputs`` as ``d0, d1, ...``."""
        evaluator, _ = self._build()
        return evaluator(inputs)

    def symbol_count(self, symbol: str) -> int:
        """How often ``symbol`` is actually used by the expression.

        This usually differs from how often it appears in the Karva string.
        """
        return self.symbol_counts().get(symbol, 0)

    def symbol_counts(self) -> dict[str, int]:
        """The usage count of every symbol reached by the expression."""
        _, counts = self._build()
        return dict(counts)

    def mutate(self) -> None:
        """Replace one random symbol with a different one.

        In the head any choice may be used; in the tail only terminals.
        """
        position = random.randrange(len(self._symbols))
        if self.num_terminals < 2:
            if self.head_size <= 0:
                raise ValueError("cannot mutate: gene has no head and too few terminals")
            position %= self.head_size
        current = self._symbols[position]
        if position < self.head_size:
            if len(self.choices) < 2:
                raise ValueError("cannot mutate: must have a choice of more than one symbol")
            pool = self.choices
        else:
            pool = self.choices[: self.num_terminals]
            if not pool:
                raise ValueError("cannot mutate: gene has no terminal choices")
        alternatives = [symbol for symbol in pool if symbol != current]
        if not alternatives:
            raise ValueError(f"cannot mutate: no symbol differs from {current!r}")
        self._symbols[position] = random.choice(alternatives)
        self._invalidate()

    def copy(self) -> Gene:
        """Return an independent duplicate of the gene."""
        return Gene(
            self._symbols,
            self._constants,
            self.functions,
            self.func_type,
            head_size=self.head_size,
            choices=self.choices,
            num_terminals=self.num_terminals,
        )

    def expression(
        self,
        grammar: Grammar,
        helpers: MutableMapping[str, str] | None = None,
    ) -> str:
        """Render the gene in the grammar's language.

        Helper definitions needed by the rendered functions are added to
        ``helpers`` unless already present.
        """
        if helpers is None:
            helpers = {}
        order = self.arg_order()

        def build(index: int) -> str:
            if index >= len(self._symbols):
                raise ValueError(f"bad symbol index {index} for symbols: {self._symbols}")
            symbol = self._symbols[index]
            func = grammar.functions.get(symbol)
            if func is not None:
                if func.symbol not in helpers and func.symbol in grammar.helpers:
                    helpers[func.symbol] = grammar.helpers[func.symbol]
                args = order[index]
                if len(args) < func.terminals:
                    raise ValueError(
                        f"symbol {symbol!r} args length mismatch: "
                        f"len(args)={len(args)}, want {func.terminals}; check function type"
                    )
                text = func.chardata
                for i, arg in enumerate(args[: func.terminals]):
                    text = text.replace(f"x{i}", build(arg))
                return text

            if symbol.startswith("d"):
                position = _symbol_index(symbol)
                limit = self.num_terminals - len(self._constants)
                if position > limit:
                    raise ValueError(
                        f"terminal symbol name {symbol!r} exceeds number of terminals ({limit})"
                    )
                return f"d[{position}]"

            if symbol.startswith("c"):
                position = _symbol_index(symbol)
                if not 0 <= position < len(self._constants):
                    raise ValueError(
                        f"constant symbol name {symbol!r} exceeds length of constants "
                        f"({len(self._constants)})"
                    )
                return _format_float(self._constants[position])

            raise ValueError(f"unable to render function: sym={symbol} for gene {self!r}")

        return build(0)