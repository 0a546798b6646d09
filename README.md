# gep

A library for Gene Expression Programming (GEP). It parses genes written in
Karva notation and evaluates them as boolean, integer, floating-point or
integer-vector expressions. It joins genes into genomes through a linking
function and evolves populations of genomes toward a scoring function. It can
also render genomes as source code by way of an XML grammar.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Function tables

Genes look up every symbol that is not an input or a constant in a table of
functions that you provide. A table is a mapping from symbol to
`gep.weights.FunctionNode`. A node holds its symbol, its arity (`terminals`)
and a callable that takes the list of argument values:

```python
from gep.weights import FunctionNode

functions = {
    "Not": FunctionNode("Not", 1, lambda a: not a[0]),
    "And": FunctionNode("And", 2, lambda a: a[0] and a[1]),
    "Or": FunctionNode("Or", 2, lambda a: a[0] or a[1]),
}
```

`gep.weights.all_symbols_equal_weights(functions)` returns a `FuncWeight` of
weight 1 for every symbol in a table.

## Genes

`gep.gene.Gene.parse(karva, functions, func_type)` builds a gene from a Karva
string. The symbols `d0`, `d1`, … are inputs. The symbols `c0`, `c1`, … are
constants, and they start at zero. `func_type` is a `gep.weights.FuncType`:
`BOOL`, `INT`, `FLOAT64` or `VECTOR_INTS`.

```python
from gep.gene import Gene
from gep.weights import FuncType

nand = Gene.parse("Or.And.Not.Not.Or.And.And.d0.d1.d1.d1.d0.d1.d1.d0",
                  functions, FuncType.BOOL)
nand.evaluate([True, True])   # False
nand.symbol_counts()          # {'Or': 2, 'And': 3, 'Not': 2, 'd0': 2, 'd1': 4}
```

A gene has these members:

- `arg_order()` gives, for each symbol, the indices of its arguments.
- `symbol_count(symbol)` and `symbol_counts()` count only the symbols that
  the expression actually reaches.
- `mutate()` swaps one random symbol for a different one.
- `copy()` returns an independent duplicate.
- `expression(grammar, helpers)` renders the gene in a grammar's language.

`Gene.random(head_size, tail_size, num_terminals, num_constants, weights,
functions, func_type)` builds a random gene. Its head may hold any symbol. Its
tail holds only inputs and constants. The constants are whole numbers from 0
to 100.

The low-level helpers `gep.karva.arg_order` and `gep.karva.build_evaluator`
work directly on lists of symbols.

## Genomes

`gep.genome.Genome(genes, link_func)` joins genes. The linking function is
looked up in the first gene's function table. Its members are:

- `evaluate(inputs)` folds the gene results together with the linking function.
- `evaluate_tuple(inputs)` and `act(observations)` return one result per gene.
- `symbol_count(symbol)` counts usage across the genome. The linking function
  counts once for each pair of adjacent genes.
- `mutate(num_mutations)` and `copy()` change or duplicate the genome.
- `evaluate_with_score(scoring_func)` stores the score in `score` and returns it.
- `expression(grammar, helpers)`, `generate_code(grammar)` and
  `write(stream, grammar)` render the genome.

## Evolving a population

`gep.model.Generation` holds a population of random genomes. Each call to
`evolve(iterations)` runs that many rounds. Every round scores all individuals,
then performs roulette-wheel replication and mutation. The best genome of each
round is kept unchanged. Evolution stops early once a genome scores 1000 or
more. Progress is reported through the `logging` module.

```python
from gep.model import Generation
from gep.weights import FuncWeight, FuncType

cases = [
    ([False, False], True),
    ([False, True], True),
    ([True, False], True),
    ([True, True], False),
]

def score(genome):
    correct = sum(genome.evaluate(inputs) == want for inputs, want in cases)
    return 1000.0 * correct / len(cases)

weights = [FuncWeight("Not", 1), FuncWeight("And", 5), FuncWeight("Or", 5)]
generation = Generation(
    weights, functions, FuncType.BOOL,
    30,     # individuals
    7,      # head size
    1,      # genes per genome
    2,      # inputs
    0,      # constants
    "Or",   # linking function
    score,
)
best = generation.evolve(1000)
print(best)
```

Each operator can also be called on its own: `replication()`, `mutation()`,
`crossover()` and `get_best()`. `gep.model.max_arity(weights, functions)`
returns the widest arity among the weighted symbols.

## Environments and agents

`gep.gymnasium.make("Blackjack-v1")` returns a `gep.blackjack.BlackjackEnv`.
`gep.gymnasium.get_spaces(name)` returns that environment's action space and
observation space. Every environment implements `gep.envs.Environment`, which
offers `reset()`, `step(action)`, `sample_action()`, `action_space()`,
`observation_space()` and `close()`. It can also be used as a context
manager. Spaces are `gep.envs.Space` values.

`gep.agents.GymnasiumAgents(action_space, obs_space, functions, ...)` builds a
population of integer-valued genomes that fit the two spaces. It supports
`Discrete` and `Tuple` spaces. Its members are:

- `evaluate_agent(agent_idx, episode_steps, obs)` returns an action clamped
  into the action space. The result is an int for a discrete space and a list
  for a tuple space.
- `reward_agent(agent_idx, reward)` sets an agent's score.
- `evolve()` sorts the agents by score, then applies mutation and crossover.
  The best agent is kept in place of the worst, and all scores are reset.

## Code generation

`gep.grammars.load_grammar(path)` and `gep.grammars.parse_grammar(data)` read an
XML grammar into a `Grammar`. A malformed document raises `GrammarError`.
`Genome.generate_code(grammar)` returns the rendered program text.
`Genome.write(stream, grammar)` writes that text to a file-like object. Helper
definitions that the rendered functions need are appended in sorted order.

## What is not included

- No ready-made function tables, such as boolean gates or math functions. You
  supply every `FunctionNode` yourself.
- No grammar files. You provide your own XML grammar documents.
- Only one environment, `Blackjack-v1`.
- No command-line program. The package is used as a library.