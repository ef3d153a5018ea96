import pytest

from insights.ranks import RANK_METRICS, attach_ranks, compute_ranks
from insights.records import AgentRecord


def _agent(name, index=0.0, win=0.0, ct=0, tcv=0.0, tpv=0.0):
    return AgentRecord(
        name=name,
        dollar_index=index,
        win_pct=win,
        contracts_tracked=ct,
        total_contract_value=tcv,
        total_player_value=tpv,
    )


def test_rank_one_goes_to_highest_value(dataset):
    ranks = {r.agent_name: r for r in compute_ranks(dataset.agents)}
    assert ranks["Patrik Aronsson"].index_rank == 1
    assert ranks["Alice Archer"].index_rank == 2
    assert ranks["Alice Archer"].ct_rank == 1
    assert ranks["Alice Archer"].tpv_rank == 1
    assert ranks["Patrik Aronsson"].ct_rank == 4


def test_each_metric_is_a_permutation(dataset):
    ranks = compute_ranks(dataset.agents)
    n = len(dataset.agents)
    for field in RANK_METRICS:
        assert sorted(getattr(r, field) for r in ranks) == list(range(1, n + 1))


def test_ties_keep_input_order():
    agents = [_agent("first", index=1.0), _agent("second", index=1.0), _agent("top", index=3.0), _agent("third", index=1.0)]
    ranks = compute_ranks(agents)
    assert [r.index_rank for r in ranks] == [2, 3, 1, 4]


def test_metrics_are_independent():
    agents = [_agent("a", index=2.0, win=0.1), _agent("b", index=1.0, win=0.9)]
    a, b = compute_ranks(agents)
    assert (a.index_rank, a.win_rank) == (1, 2)
    assert (b.index_rank, b.win_rank) == (2, 1)


def test_ranks_are_reproducible(dataset):
    assert compute_ranks(dataset.agents) == compute_ranks(dataset.agents)


def test_empty_population():
    assert compute_ranks([]) == []


def test_attach_ranks_returns_new_records():
    agents = [_agent("a", index=1.0)]
    (ranked,) = attach_ranks(agents, compute_ranks(agents))
    assert ranked.ranks.index_rank == 1
    assert agents[0].ranks is None


def test_attach_ranks_length_mismatch():
    with pytest.raises(ValueError):
        attach_ranks([_agent("a")], [])
