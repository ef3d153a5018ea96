from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class LeaderboardFiltersModel(BaseModel):
    min_contracts_only: bool = False
    min_contracts: int = 10
    top_n: int = 90
    excluded_agents: Optional[List[str]] = None


class ComparisonFiltersModel(BaseModel):
    search: str = ""
    min_contracts: Optional[int] = None
    min_contract_value_millions: Optional[float] = None
    agency: str = ""
    sort_by: str = "dollar-index"
    selected_agents: List[str] = Field(default_factory=list)
    result_limit: int = 20


class MetaListResponse(BaseModel):
    values: List[str]
