from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping

from insights.records import AGENCY_KEY, AgencyRecord, is_valid_row, map_agency_source_row, normalize_headers

logger = logging.getLogger(__name__)


def aggregate_agencies(rows: Iterable[Mapping[Any, Any]]) -> List[AgencyRecord]:
    """Collapse agency source rows to one record per agency name.

    The first row whose dollar index is non-zero populates the agency; every
    later row for that name is ignored. Agencies whose rows all carry a zero
    index stay zero-valued.
    """
    valid = [normalize_headers(row) for row in rows if is_valid_row(row, AGENCY_KEY)]

    agencies: Dict[str, AgencyRecord] = {}
    for row in valid:
        name = str(row[AGENCY_KEY]).strip()
        agencies.setdefault(name, AgencyRecord(name=name))

    skipped = 0
    for row in valid:
        name = str(row[AGENCY_KEY]).strip()
        if agencies[name].dollar_index != 0:
            skipped += 1
            continue
        agencies[name] = replace(map_agency_source_row(row), name=name)

    if skipped:
        logger.debug("aggregate_agencies ignored %d rows for already populated agencies", skipped)
    return list(agencies.values())


def unpopulated_agencies(agencies: Iterable[AgencyRecord]) -> List[str]:
    return sorted(a.name for a in agencies if a.dollar_index == 0)
