"""Spaces and the common interface of training environments."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Space:
    """The shape of an action or observation: a kind, a size and any sub-spaces."""

    type: str
    n: int = 0
    subspaces: list[Space] = field(default_factory=list)


class Environment(ABC):
    """A training and execution environment for agents."""

    @abstractmethod
    def action_space(self) -> Space:
        """The space that actions are drawn from."""

    @abstractmethod
    def observation_space(self) -> Space:
        """The space that observations are drawn from."""

    @abstractmethod
    def reset(self) -> tuple[Any, dict[str, Any]]:
        """Start a new episode and return the first observation and info."""

    @abstractmethod
    def sample_action(self) -> Any:
        """Return a random valid action."""

    @abstractmethod
    def step(self, action: Any) -> tuple[Any, float, bool, bool, dict[str, Any]]:
        """Perform ``action``; return observation, reward, terminated, truncated, info."""

    @abstractmethod
    def close(self) -> None:
        """Release any resources held by the environment."""

    def __enter__(self) -> Environment:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()