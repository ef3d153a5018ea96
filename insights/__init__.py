"""Core (UI-agnostic) agent insights logic.

This package contains:
- field parsing and record mapping (CSV rows -> typed records)
- agency aggregation, rank derivation and season VCP
- data loading (CSV -> records) and the load session
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
