"""Gene Expression Programming: Karva genes, genomes, evolution, environments and code generation."""

__version__ = "2.0.0"

__all__ = [
    "weights",
    "grammars",
    "karva",
    "envs",
    "blackjack",
    "gene",
    "genome",
    "gymnasium",
    "model",
    "agents",
]