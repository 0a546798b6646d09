"""Agents that learn to act in a training environment by gene expression programming."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from gep.envs import Space
from gep.genome import Genome
from gep.model import Generation
from gep.weights import FuncType, FunctionNode, all_symbols_equal_weights

logger = logging.getLogger(__name__)

DEFAULT_HEAD_SIZE = 10
DEFAULT_NUM_CONSTANTS = 1
DEFAULT_NUM_INDIVIDUALS = 10

_LINK_FUNC = "tuple"

T = TypeVar("T", int, float)


def clamp(value: T, low: T, high: T) -> T:
    """Limit ``value`` to the range from ``low`` to ``high``."""
    if value < low:
        return low
    if value > high:
        return high
    return value


class GymnasiumAgents:
    """A population of agents, each a genome, that are run one at a time.

    Each agent plays its episodes and is rewarded; the population then
    evolves by mixing the genetic makeup of the best performers.
    """

    def __init__(
        self,
        action_space: Space,
        obs_space: Space,
        functions: Mapping[str, FunctionNode],
        append_episode_steps: bool = False,
        debug: bool = False,
        head_size: int = DEFAULT_HEAD_SIZE,
        num_constants: int = DEFAULT_NUM_CONSTANTS,
        num_individuals: int = DEFAULT_NUM_INDIVIDUALS,
    ) -> None:
        """Create a random population for the action and observation spaces.

        ``functions`` are the integer functions the agents may use.  Raises
        ValueError for spaces of a kind that is not supported.
        """
        self.action_space = action_space
        self.obs_space = obs_space
        self.functions = functions
        self.append_episode_steps = append_episode_steps
        self.debug = debug
        self.head_size = head_size
        self.num_constants = num_constants
        self.num_individuals = num_individuals

        if action_space.type == "Discrete":
            self._num_genes = 1
        elif action_space.type == "Tuple":
            self._num_genes = len(action_space.subspaces)
        else:
            raise ValueError(f"ActionSpace type {action_space.type} not yet implemented")

        if obs_space.type == "Discrete":
            num_inputs = 1
        elif obs_space.type == "Tuple":
            num_inputs = len(obs_space.subspaces)
        else:
            raise ValueError(f"ObservationSpace type {obs_space.type} not yet implemented")
        self._num_inputs = num_inputs
        self._num_terminals = num_inputs + (1 if append_episode_steps else 0)

        self.individuals: list[Genome] = self._generation(num_individuals).individuals

    def _generation(self, num_individuals: int) -> Generation:
        return Generation(
            all_symbols_equal_weights(self.functions),
            self.functions,
            FuncType.INT,
            num_individuals,
            self.head_size,
            self._num_genes,
            self._num_terminals,
            self.num_constants,
            _LINK_FUNC,
            None,
            self.debug,
        )

    def evaluate_agent(self, agent_idx: int, episode_steps: int, obs: Any) -> int | list[int]:
        """Return the action of agent ``agent_idx`` for the observation.

        A discrete action space yields an int; a tuple space yields a list
        with one value per sub-space.  Each value is clamped to its space.
        """
        observations = self.process_observations(episode_steps, obs)
        result = self.individuals[agent_idx].act(observations)

        if self.action_space.type == "Tuple":
            return [
                clamp(value, 0, space.n - 1)
                for value, space in zip(result, self.action_space.subspaces)
            ]

        before = result[0]
        action = clamp(before, 0, self.action_space.n - 1)
        if self.debug:
            logger.debug(
                "evaluate_agent(agent_idx=%d, obs=%s)=%s => clamp(0,%d) => %d",
                agent_idx, observations, before, self.action_space.n - 1, action,
            )
        return action

    def reward_agent(self, agent_idx: int, reward: float) -> None:
        """Set the score of one agent; rewards between -1000 and 1000 work well."""
        self.individuals[agent_idx].score = reward

    def sort_individuals(self) -> None:
        """Order the agents by score, best first."""
        self.individuals.sort(key=lambda individual: individual.score, reverse=True)

    def evolve(self) -> None:
        """Evolve the population from the agents' scores.

        The best agent is kept unchanged in place of the worst one after
        mutation and crossover, and every score is then reset to zero.
        """
        self.sort_individuals()
        best = self.individuals[0].copy()
        generation = self._generation(0)
        generation.individuals = self.individuals
        generation.mutation()
        generation.crossover()
        generation.individuals[self.num_individuals - 1] = best
        self.individuals = generation.individuals

        if len(self.individuals) != self.num_individuals:
            raise RuntimeError(
                f"got {len(self.individuals)} individuals, want {self.num_individuals}"
            )
        for individual in self.individuals:
            individual.score = 0.0

    def process_observations(self, episode_steps: int, obs: Any) -> list[int]:
        """Turn an observation into the inputs of the genes.

        The episode step count is appended when the agents were created
        with ``append_episode_steps``.
        """
        values = [obs] if isinstance(obs, int) else list(obs)
        if len(values) != self._num_inputs:
            raise ValueError(
                f"observation has {len(values)} values, want {self._num_inputs}"
            )
        if self.append_episode_steps:
            values.append(episode_steps)
        return values