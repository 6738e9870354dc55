"""VDOT reference table: loading, validation and the immutable table value.

The table maps integer VDOT tiers (30-85 in the packaged asset) to the
finish time in seconds for each supported distance. It is loaded once and
passed explicitly into every resolver and interpolator call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Union

from pydantic import PositiveFloat, PositiveInt, TypeAdapter, ValidationError

from racecalc.errors import DataNotLoadedError
from racecalc.services.distances import DISTANCE_METRES

logger = logging.getLogger(__name__)

DEFAULT_TABLE_PATH = Path(__file__).resolve().parent.parent / "data" / "vdot_tables.json"

LOAD_FAILURE_MESSAGE = "Failed to load race prediction data. Please refresh the page."

# JSON object keys arrive as strings; lax mode coerces "30" -> 30
_TABLE_ADAPTER = TypeAdapter(dict[PositiveInt, dict[str, Union[PositiveInt, PositiveFloat]]])


class VdotTable(Mapping):
    """Read-only VDOT tier -> {distance: seconds} mapping."""

    def __init__(self, tiers: Mapping[int, Mapping[str, float]]):
        if not tiers:
            raise ValueError("VDOT table has no tiers")
        self._tiers = MappingProxyType({int(v): MappingProxyType(dict(tiers[v])) for v in sorted(tiers)})

    def __getitem__(self, vdot: int) -> Mapping[str, float]:
        return self._tiers[vdot]

    def __iter__(self) -> Iterator[int]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)

    def __repr__(self) -> str:
        return f"VdotTable(tiers={self.min_vdot}-{self.max_vdot}, distances={list(self.distances)})"

    @property
    def min_vdot(self) -> int:
        return next(iter(self._tiers))

    @property
    def max_vdot(self) -> int:
        return next(reversed(self._tiers))

    @property
    def distances(self) -> tuple[str, ...]:
        """Distance keys carried by every tier, in nominal-length order."""
        common = set.intersection(*(set(row) for row in self._tiers.values()))
        return tuple(sorted(common, key=lambda d: DISTANCE_METRES.get(d, float("inf"))))


def check_table_invariants(tiers: Mapping[int, Mapping[str, float]]) -> list[str]:
    """Return invariant violations for a raw table; empty means consistent.

    A tier may carry any subset of the catalog distances but not none. Times
    must fall as VDOT rises, and within a tier times must rise with distance.
    """
    problems: list[str] = []
    ordered = sorted(tiers)
    for vdot in ordered:
        if not any(d in DISTANCE_METRES for d in tiers[vdot]):
            problems.append(f"VDOT {vdot} carries no known distances")
        known = sorted((d for d in tiers[vdot] if d in DISTANCE_METRES), key=DISTANCE_METRES.__getitem__)
        for shorter, longer in zip(known, known[1:]):
            if tiers[vdot][longer] <= tiers[vdot][shorter]:
                problems.append(f"VDOT {vdot}: {longer} is not slower than {shorter}")
    for slower, faster in zip(ordered, ordered[1:]):
        for distance, seconds in tiers[faster].items():
            previous = tiers[slower].get(distance)
            if previous is not None and seconds >= previous:
                problems.append(f"{distance}: VDOT {faster} is not faster than VDOT {slower}")
    return problems


def parse_vdot_table(raw: Union[str, bytes]) -> VdotTable:
    """Validate a JSON document and build the table.

    Raises DataNotLoadedError if the document is malformed or breaks a table
    invariant. Nothing partial is ever returned.
    """
    try:
        tiers = _TABLE_ADAPTER.validate_json(raw)
    except ValidationError as e:
        logger.error("VDOT table failed schema validation: %d errors", e.error_count())
        raise DataNotLoadedError(f"{LOAD_FAILURE_MESSAGE} Error: invalid table format") from e
    if not tiers:
        raise DataNotLoadedError(f"{LOAD_FAILURE_MESSAGE} Error: table is empty")
    problems = check_table_invariants(tiers)
    if problems:
        logger.error("VDOT table failed invariant checks: %s", problems[:5])
        raise DataNotLoadedError(f"{LOAD_FAILURE_MESSAGE} Error: {problems[0]}")
    return VdotTable(tiers)


def load_vdot_table(path: Union[str, Path, None] = None) -> VdotTable:
    """Read and validate the reference table asset.

    Defaults to the packaged asset. Raises DataNotLoadedError with a
    user-facing message on any failure.
    """
    table_path = Path(path) if path else DEFAULT_TABLE_PATH
    try:
        raw = table_path.read_bytes()
    except OSError as e:
        logger.error("Error loading VDOT data from %s: %s", table_path, e)
        raise DataNotLoadedError(f"{LOAD_FAILURE_MESSAGE} Error: {e.strerror or e}") from e
    table = parse_vdot_table(raw)
    logger.info(
        "VDOT data loaded successfully",
        extra={"ctx_path": str(table_path), "ctx_tiers": len(table), "ctx_min_vdot": table.min_vdot, "ctx_max_vdot": table.max_vdot},
    )
    return table
