"""Resolve requested years to the nearest available snapshot."""

from collections.abc import Iterable
from functools import reduce

from echoes.models import ConceptData, GraphSnapshot


def resolve_nearest_key(keys: Iterable[int], requested: int) -> int:
    """Return the key closest to `requested`.

    Keys are folded in ascending order and a later key only replaces the
    running best when strictly closer, so ties go to the smaller key.
    """
    ordered = sorted(keys)
    if not ordered:
        raise ValueError("No time keys available")
    return reduce(
        lambda prev, curr: curr if abs(curr - requested) < abs(prev - requested) else prev,
        ordered,
    )


class SnapshotProvider:
    """Snapshot lookup over one concept's evolution."""

    def __init__(self, data: ConceptData) -> None:
        if not data.evolution:
            raise ValueError(f"Concept {data.concept!r} has no snapshots")
        self.data = data

    @property
    def available_keys(self) -> list[int]:
        return self.data.years

    def resolve(self, requested: int) -> int:
        return resolve_nearest_key(self.available_keys, requested)

    def snapshot(self, key: int) -> GraphSnapshot:
        try:
            return self.data.evolution[key]
        except KeyError:
            raise ValueError(f"No snapshot for {key}") from None

    def snapshot_for(self, requested: int) -> tuple[int, GraphSnapshot]:
        key = self.resolve(requested)
        return key, self.snapshot(key)
