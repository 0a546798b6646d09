"""Creation of training environments by name."""

from __future__ import annotations

from gep.blackjack import BlackjackEnv
from gep.envs import Environment, Space


def make(environment: str) -> Environment:
    """Return a new environment for the given name, such as ``"Blackjack-v1"``."""
    if environment == "Blackjack-v1":
        return BlackjackEnv(natural=False, sab=False)
    raise ValueError(f"unknown environment {environment!r}")


def get_spaces(environment: str) -> tuple[Space, Space]:
    """Return the action space and observation space of the named environment."""
    with make(environment) as env:
        return env.action_space(), env.observation_space()