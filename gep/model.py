"""A generation of genomes and the evolutionary operators that drive it."""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping, Sequence

from gep.gene import Gene
from gep.genome import Genome, ScoringFunc
from gep.weights import FuncType, FunctionNode, FuncWeight

logger = logging.getLogger(__name__)

PERFECT_SCORE = 1000.0


def max_arity(weights: Sequence[FuncWeight], functions: Mapping[str, FunctionNode]) -> int:
    """The largest number of input terminals among the weighted symbols."""
    arity = 0
    for weight in weights:
        node = functions.get(weight.symbol)
        if node is None:
            logger.warning("unable to find symbol %s in function map", weight.symbol)
            continue
        arity = max(arity, node.terminals)
    return arity


class Generation:
    """One complete generation of the model: a population of genomes."""

    def __init__(
        self,
        weights: Sequence[FuncWeight],
        functions: Mapping[str, FunctionNode],
        func_type: FuncType,
        num_individuals: int,
        head_size: int,
        num_genes_per_genome: int,
        num_terminals: int,
        num_constants: int,
        link_func: str,
        scoring_func: ScoringFunc | None = None,
        debug: bool = False,
    ) -> None:
        """Create a population of ``num_individuals`` random genomes.

        Each genome holds ``num_genes_per_genome`` genes whose tails are
        long enough for a head made entirely of the widest function.
        """
        self.weights = list(weights)
        self.functions = functions
        self.func_type = func_type
        self.scoring_func = scoring_func
        self.debug = debug
        arity = max_arity(self.weights, functions)
        tail_size = head_size * (arity - 1) + 1
        self.individuals: list[Genome] = [
            Genome(
                (
                    Gene.random(
                        head_size,
                        tail_size,
                        num_terminals,
                        num_constants,
                        self.weights,
                        functions,
                        func_type,
                    )
                    for _ in range(num_genes_per_genome)
                ),
                link_func,
            )
            for _ in range(num_individuals)
        ]

    def evolve(self, iterations: int) -> Genome:
        """Run the algorithm for ``iterations`` generations or until a perfect score.

        The best genome of each generation is carried over unchanged.
        """
        for i in range(iterations):
            best = self.get_best()
            if best.score >= PERFECT_SCORE:
                logger.info("Stopping after generation #%d", i)
                return best
            saved = best.copy()
            self.replication()
            self.mutation()
            self.individuals[0] = saved
        logger.info("Stopping after generation #%d", iterations)
        return self.get_best()

    def replication(self) -> None:
        """Replace the population by roulette-wheel selection weighted by score.

        Scores may have any range; they are mapped onto 0.1 to 1.1 so that
        every individual keeps a nonzero chance of being selected.
        """
        population = self.individuals
        if not population:
            return
        scores = [individual.score for individual in population]
        low, high = min(scores), max(scores)
        scale = high - low
        if scale <= 0:
            scale = 1.0

        def scaled(value: float) -> float:
            return 0.1 + (value - low) / scale

        size = len(population)
        index = random.randrange(size)
        beta = 0.0
        result: list[Genome] = []
        for _ in range(size):
            beta += random.random() * 2.0
            weight = scaled(population[index].score)
            while beta > weight:
                beta -= weight
                index = (index + 1) % size
            result.append(population[index].copy())
        self.individuals = result

    def _single_mutation(self, index: int) -> None:
        self.individuals[index].mutate(1 + random.randrange(2))

    def mutation(self) -> None:
        """Mutate a random number of randomly chosen individuals."""
        size = len(self.individuals)
        if size < 2:
            raise ValueError("mutation needs at least two individuals")
        for _ in range(1 + random.randrange(size - 1)):
            self._single_mutation(random.randrange(size))

    def _single_crossover(self, idx1: int, idx2: int) -> None:
        genome1 = self.individuals[idx1]
        genome2 = self.individuals[idx2]
        gene_idx1 = random.randrange(len(genome1.genes))
        gene_idx2 = random.randrange(len(genome2.genes))
        gene1 = genome1.genes[gene_idx1]
        gene2 = genome2.genes[gene_idx2]

        if len(gene1.symbols) != len(gene2.symbols) or gene1.head_size != gene2.head_size:
            raise ValueError(
                f"gene1: {len(gene1.symbols)} symbols (head_size={gene1.head_size}), "
                f"gene2: {len(gene2.symbols)} symbols (head_size={gene2.head_size})"
            )

        head_size = gene1.head_size
        cut = random.randrange(head_size)
        head1, tail1 = gene1.symbols[:head_size], gene1.symbols[head_size:]
        head2, tail2 = gene2.symbols[:head_size], gene2.symbols[head_size:]
        new1 = head2[cut:] + head1[:cut] + tail1
        new2 = head1[cut:] + head2[:cut] + tail2

        if self.debug:
            logger.debug(
                "crossover:\nbefore genome[%d].gene[%d]=%s\nbefore genome[%d].gene[%d]=%s\n"
                "after genome[%d].gene[%d]=%s\nafter genome[%d].gene[%d]=%s",
                idx1, gene_idx1, ".".join(gene1.symbols),
                idx2, gene_idx2, ".".join(gene2.symbols),
                idx1, gene_idx1, ".".join(new1),
                idx2, gene_idx2, ".".join(new2),
            )

        gene1.symbols = new1
        gene2.symbols = new2

    def crossover(self) -> None:
        """Swap head segments between genes of random pairs of individuals."""
        size = len(self.individuals)
        if size < 2:
            return
        for _ in range(1 + random.randrange(size - 1)):
            first = random.randrange(size)
            second = random.choice([i for i in range(size) if i != first])
            self._single_crossover(first, second)

    def get_best(self) -> Genome:
        """Score every individual and return the one with the highest positive score.

        The first individual is returned when no score exceeds zero.
        """
        if not self.individuals:
            raise ValueError("generation has no individuals")
        best = self.individuals[0]
        best_score = 0.0
        for individual in self.individuals:
            individual.evaluate_with_score(self.scoring_func)
            if individual.score > best_score:
                best = individual
                best_score = individual.score
        return best