"""
Row reordering for phases.

Phase rows are dragged independently of bar gestures. A drop moves the
dragged phase in front of the target phase, and only when both belong to
the same sub-project grouping (both ungrouped counts as the same group).
"""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from retroplan.models.plan import Phase


def reorder_phases(phases: Sequence[Phase], source_id: str, target_id: str) -> Tuple[Phase, ...]:
    """
    Move ``source_id`` to just before ``target_id``.

    Unknown ids and cross-group drops leave the order unchanged.
    """
    ordered = list(phases)
    from_index = next((i for i, p in enumerate(ordered) if p.id == source_id), -1)
    to_index = next((i for i, p in enumerate(ordered) if p.id == target_id), -1)
    if from_index == -1 or to_index == -1 or from_index == to_index:
        return tuple(ordered)
    if ordered[from_index].sub_project_id != ordered[to_index].sub_project_id:
        return tuple(ordered)

    moved = ordered.pop(from_index)
    # Removing the source shifts later indices down by one.
    insert_at = to_index - 1 if from_index < to_index else to_index
    ordered.insert(insert_at, moved)
    return tuple(ordered)


@dataclass(frozen=True)
class RowDrag:
    """Row drag channel: which row is dragged and which row it hovers."""

    dragging_id: Optional[str] = None
    over_id: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.dragging_id is not None

    def start(self, phase_id: str) -> "RowDrag":
        return RowDrag(dragging_id=phase_id)

    def enter(self, phase_id: str) -> "RowDrag":
        if self.dragging_id and self.dragging_id != phase_id:
            return RowDrag(dragging_id=self.dragging_id, over_id=phase_id)
        return self

    def end(self) -> "RowDrag":
        return RowDrag()
