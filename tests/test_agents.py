import random

import pytest

from gep.agents import DEFAULT_NUM_INDIVIDUALS, GymnasiumAgents, clamp
from gep.envs import Space
from gep.weights import FunctionNode


def _div(args):
    return 0 if args[1] == 0 else int(args[0] / args[1])


INT_FUNCS = {
    "+": FunctionNode("+", 2, lambda a: a[0] + a[1]),
    "-": FunctionNode("-", 2, lambda a: a[0] - a[1]),
    "*": FunctionNode("*", 2, lambda a: a[0] * a[1]),
    "/": FunctionNode("/", 2, _div),
}


def blackjack_spaces():
    action = Space(type="Discrete", n=2)
    obs = Space(
        type="Tuple",
        subspaces=[
            Space(type="Discrete", n=32),
            Space(type="Discrete", n=11),
            Space(type="Discrete", n=2),
        ],
    )
    return action, obs


def test_new_gymnasium_agents_run_and_evolve():
    action_space, obs_space = blackjack_spaces()
    agents = GymnasiumAgents(action_space, obs_space, INT_FUNCS)
    assert len(agents.individuals) == DEFAULT_NUM_INDIVIDUALS

    for agent_num in range(DEFAULT_NUM_INDIVIDUALS):
        for _episode in range(10):
            for episode_step in range(10):
                obs = [random.randrange(s.n) for s in obs_space.subspaces]
                action = agents.evaluate_agent(agent_num, episode_step, obs)
                assert 0 <= action < action_space.n
            agents.reward_agent(agent_num, random.random() * 2000 - 1000)

    agents.evolve()
    assert len(agents.individuals) == DEFAULT_NUM_INDIVIDUALS
    assert all(individual.score == 0.0 for individual in agents.individuals)


@pytest.mark.parametrize(
    "append, want",
    [(False, [0, 1, 2]), (True, [0, 1, 2, 4])],
)
def test_process_observations(append, want):
    action_space, obs_space = blackjack_spaces()
    agents = GymnasiumAgents(
        action_space, obs_space, INT_FUNCS, append_episode_steps=append
    )
    assert agents.process_observations(4, (0, 1, 2)) == want


def test_process_observations_wrong_length():
    action_space, obs_space = blackjack_spaces()
    agents = GymnasiumAgents(action_space, obs_space, INT_FUNCS)
    with pytest.raises(ValueError):
        agents.process_observations(0, [1, 2])


def test_discrete_observation_space_accepts_int():
    agents = GymnasiumAgents(
        Space(type="Discrete", n=3), Space(type="Discrete", n=5), INT_FUNCS
    )
    assert agents.process_observations(7, 3) == [3]
    assert 0 <= agents.evaluate_agent(0, 0, 3) <= 2


@pytest.mark.parametrize(
    "value, low, high, want",
    [(-5, 0, 1, 0), (5, 0, 1, 1), (0, 0, 1, 0), (3, 0, 10, 3), (2.5, 0.0, 2.0, 2.0)],
)
def test_clamp(value, low, high, want):
    assert clamp(value, low, high) == want


def test_unsupported_action_space():
    _, obs_space = blackjack_spaces()
    with pytest.raises(ValueError):
        GymnasiumAgents(Space(type="Box"), obs_space, INT_FUNCS)


def test_unsupported_observation_space():
    action_space, _ = blackjack_spaces()
    with pytest.raises(ValueError):
        GymnasiumAgents(action_space, Space(type="MultiBinary"), INT_FUNCS)


def test_tuple_action_space_clamps_each_value():
    action_space = Space(
        type="Tuple",
        subspaces=[Space(type="Discrete", n=2), Space(type="Discrete", n=4)],
    )
    _, obs_space = blackjack_spaces()
    agents = GymnasiumAgents(action_space, obs_space, INT_FUNCS)
    assert all(len(ind.genes) == 2 for ind in agents.individuals)
    for _ in range(20):
        obs = [random.randrange(s.n) for s in obs_space.subspaces]
        action = agents.evaluate_agent(0, 0, obs)
        assert len(action) == 2
        assert 0 <= action[0] <= 1
        assert 0 <= action[1] <= 3


def test_sort_individuals_best_first():
    action_space, obs_space = blackjack_spaces()
    agents = GymnasiumAgents(action_space, obs_space, INT_FUNCS, num_individuals=5)
    for idx, reward in enumerate([3.0, -1.0, 10.0, 0.5, 7.0]):
        agents.reward_agent(idx, reward)
    agents.sort_individuals()
    assert [ind.score for ind in agents.individuals] == [10.0, 7.0, 3.0, 0.5, -1.0]


def test_evolve_keeps_best_in_last_place():
    action_space, obs_space = blackjack_spaces()
    agents = GymnasiumAgents(action_space, obs_space, INT_FUNCS, num_individuals=6)
    for idx in range(6):
        agents.reward_agent(idx, -float(idx))
    agents.reward_agent(3, 999.0)
    expected_genes = agents.individuals[3].copy().genes
    agents.evolve()
    assert len(agents.individuals) == 6
    assert agents.individuals[-1].genes == expected_genes
    assert agents.individuals[-1].score == 0.0


def test_append_episode_steps_adds_terminal():
    action_space, obs_space = blackjack_spaces()
    agents = GymnasiumAgents(
        action_space, obs_space, INT_FUNCS, append_episode_steps=True
    )
    gene = agents.individuals[0].genes[0]
    assert gene.choices[:5] == ["d0", "d1", "d2", "d3", "c0"]