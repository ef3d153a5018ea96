from insights.ranks import attach_ranks, compute_ranks
from insights.records import (
    SEASON_LABELS,
    map_agency_source_row,
    map_agent_row,
    map_agents,
    map_player_investment_row,
    map_player_investments,
    normalize_headers,
)

from conftest import agent_row


def test_padded_and_unpadded_headers_map_identically():
    padded = map_agent_row(agent_row("A", "X", "$1.25", "55.0%", "7", "$1,000", "$2,000", "($300)"))
    plain = map_agent_row(agent_row("A", "X", "$1.25", "55.0%", "7", "$1,000", "$2,000", "($300)", padded=False))
    assert padded == plain
    assert padded.dollar_index == 1.25
    assert padded.win_pct == 0.55
    assert padded.contracts_tracked == 7
    assert padded.total_contract_value == 1000.0
    assert padded.total_player_value == 2000.0
    assert padded.dollars_captured == -300.0
    assert padded.market_value_capture == "90%"
    assert padded.discount_rate == "10%"


def test_normalize_headers_prefers_non_blank_value():
    row = {" Dollar Index ": "", "Dollar Index": "1.5", "CT ": "4", " CT": ""}
    assert normalize_headers(row) == {"Dollar Index": "1.5", "CT": "4"}


def test_unparseable_numeric_fields_default_to_zero():
    record = map_agent_row({"Agent Name": "A", "Dollar Index": "n/a", "Won%": "", "CT": "Grand Total"})
    assert record.dollar_index == 0
    assert record.win_pct == 0
    assert record.contracts_tracked == 0
    assert record.total_contract_value == 0


def test_end_to_end_ranks_from_raw_rows():
    rows = [
        {"Agent Name": "A", "Dollar Index": "2.00", "Won%": "60%", "CT": "10"},
        {"Agent Name": "B", "Dollar Index": "1.00", "Won%": "40%", "CT": "20"},
    ]
    agents = map_agents(rows)
    a, b = attach_ranks(agents, compute_ranks(agents))
    assert a.ranks.index_rank == 1
    assert b.ranks.index_rank == 2
    assert a.ranks.ct_rank == 2
    assert b.ranks.ct_rank == 1


def test_map_agents_drops_sentinel_names(agent_rows):
    names = [a.name for a in map_agents(agent_rows)]
    assert "(blank)" not in names
    assert "Grand Total" not in names
    assert names == ["Alice Archer", "Bob Baker", "Cara Cole", "Patrik Aronsson"]


def test_map_agency_source_row_reads_rank_columns():
    record = map_agency_source_row(
        {"Agency Name": " North ", " Dollar Index ": "1.1", "Index R": "3", "WinR": "1", "CTR": "2", "TCV R": "5", "TPV R": "4"}
    )
    assert record.name == "North"
    assert record.dollar_index == 1.1
    assert (record.ranks.index_rank, record.ranks.win_rank, record.ranks.ct_rank) == (3, 1, 2)
    assert (record.ranks.tcv_rank, record.ranks.tpv_rank) == (5, 4)


def test_map_player_investment_row(piba_rows):
    record = map_player_investment_row(piba_rows[0])
    assert record.player_name == "Zed Zane"
    assert record.agent_name == "Alice Archer"
    assert record.total_cost == 5_000_000
    assert record.total_contribution == 4_000_000
    assert [line.label for line in record.seasons] == list(SEASON_LABELS)
    assert record.season("2018-19").cost == 150
    assert record.season("2018-19").contribution == 100
    assert record.season("2023-24").cost == 0


def test_map_player_investments_filters_invalid_players(piba_rows):
    players = map_player_investments(piba_rows + [{"Combined Names": "", "Agent Name": "Alice Archer"}])
    assert [p.player_name for p in players] == ["Zed Zane", "Yan Young", "Xi Xu", "Will Wu"]


def test_to_dict_flattens_ranks():
    agents = map_agents([{"Agent Name": "A", "Dollar Index": "1"}])
    (ranked,) = attach_ranks(agents, compute_ranks(agents))
    out = ranked.to_dict()
    assert out["name"] == "A"
    assert out["index_rank"] == 1
    assert "ranks" not in out
    assert "agent_name" not in out
