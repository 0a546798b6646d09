"""A genome: the genes of one individual and the function that links them."""

from __future__ import annotations

import random
from collections import Counter
from collections.abc import Callable, Iterable, MutableMapping, Sequence
from typing import Any, TextIO

from gep.gene import Gene, _format_float
from gep.grammars import Grammar
from gep.weights import FunctionNode

ScoringFunc = Callable[["Genome"], float]


class Genome:
    """One individual of a population, made of one or more genes.

    The link function combines the results of the genes into the result of
    the genome.  ``score`` holds the fitness from the last evaluation.
    """

    def __init__(self, genes: Iterable[Gene], link_func: str) -> None:
        self.genes = list(genes)
        self.link_func = link_func
        self.score = 0.0

    def __str__(self) -> str:
        """The Karva strings of the genes joined by the link function, and the score."""
        body = f"|{self.link_func}|".join(str(gene) for gene in self.genes)
        return f"{body}, score={_format_float(self.score)}"

    def __repr__(self) -> str:
        return f"Genome({self.genes!r}, {self.link_func!r}, score={self.score!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        return (
            self.genes == other.genes
            and self.link_func == other.link_func
            and self.score == other.score
        )

    __hash__ = None  # type: ignore[assignment]

    def _link(self) -> FunctionNode:
        if not self.genes:
            raise ValueError("genome has no genes")
        node = self.genes[0].functions.get(self.link_func)
        if node is None:
            raise ValueError(f"unable to find linking function: {self.link_func}")
        return node

    def symbol_count(self, symbol: str) -> int:
        """How often ``symbol`` is actually used across the genome.

        The link function counts once for every pair of adjacent genes.
        """
        counts: Counter[str] = Counter({self.link_func: len(self.genes) - 1})
        for gene in self.genes:
            counts.update(gene.symbol_counts())
        return counts[symbol]

    def evaluate(self, inputs: Sequence[Any]) -> Any:
        """Evaluate every gene and fold the results together with the link function."""
        link = self._link()
        first, *rest = self.genes
        result = first.evaluate(inputs)
        for gene in rest:
            result = link([result, gene.evaluate(inputs)])
        return result

    def evaluate_tuple(self, inputs: Sequence[Any]) -> list[Any]:
        """Evaluate each gene on its own; one result per gene."""
        return [gene.evaluate(inputs) for gene in self.genes]

    def act(self, observations: Sequence[int]) -> list[int]:
        """The action for the observations: one value for each gene."""
        return list(self.evaluate_tuple(observations))

    def expression(
        self,
        grammar: Grammar,
        helpers: MutableMapping[str, str] | None = None,
    ) -> str:
        """Render the genes in the grammar's language, joined by the link function."""
        if helpers is None:
            helpers = {}
        parts = [gene.expression(grammar, helpers) for gene in self.genes]
        body = f" {self.link_func} ".join(parts)
        return f"{body}, score={_format_float(self.score)}"

    def mutate(self, num_mutations: int) -> None:
        """Mutate a randomly chosen gene ``num_mutations`` times."""
        if num_mutations > 0 and not self.genes:
            raise ValueError("genome has no genes")
        for _ in range(num_mutations):
            random.choice(self.genes).mutate()

    def copy(self) -> Genome:
        """Return an independent duplicate of the genome, score included."""
        duplicate = Genome((gene.copy() for gene in self.genes), self.link_func)
        duplicate.score = self.score
        return duplicate

    def evaluate_with_score(self, scoring_func: ScoringFunc | None) -> float:
        """Score the genome with ``scoring_func``, store and return the score."""
        if scoring_func is None:
            raise ValueError("scoring function must not be None")
        self.score = float(scoring_func(self))
        return self.score

    def generate_code(self, grammar: Grammar) -> str:
        """Render a complete source file for the genome in the grammar's language."""
        link = grammar.functions.get(self.link_func)
        if link is None:
            raise ValueError(f"unable to find grammar linking function: {self.link_func}")

        subs = {"CHARX": "X"}
        out: list[str] = []

        def write(text: str) -> None:
            text = text.replace("{CRLF}", "\n").replace("{TAB}", "\t")
            for key, value in subs.items():
                text = text.replace(f"{{{key}}}", value)
            out.append(text)

        write(grammar.open)
        for header in grammar.headers:
            if header.type == "default":
                write(header.chardata)
                write(grammar.endline)
        for tempvar in grammar.tempvars:
            if tempvar.type != "default":
                continue
            write(tempvar.chardata)
            subs["tempvarname"] = tempvar.varname
            write(grammar.endline)

        tempvar_name = subs.get("tempvarname", "")
        helpers: dict[str, str] = {}
        lines = [""]
        for i, gene in enumerate(self.genes):
            exp = gene.expression(grammar, helpers)
            if i == 0:
                lines.append(f"{tempvar_name} = {exp}")
            else:
                merged = link.uniontype.replace("{tempvarname}", tempvar_name)
                merged = merged.replace("{member}", exp)
                merged = merged.replace("{symbol}", link.symbol)
                lines.append(merged)
        lines.append("")
        out.append("\n".join(lines) + "\n")

        for footer in grammar.footers:
            if footer.type == "default":
                write(footer.chardata)
                write(grammar.endline)

        for name in sorted(helpers):
            write(grammar.endline)
            write(helpers[name])

        return "".join(out)

    def write(self, stream: TextIO, grammar: Grammar) -> None:
        """Write the generated source file for the genome to ``stream``."""
        stream.write(self.generate_code(grammar))