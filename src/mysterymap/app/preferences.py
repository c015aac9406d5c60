"""Filter state owned by the front-end, plus the mutations its widgets make."""

import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Set

from ..config.scoring_constants import BUDGET_MAX, BUDGET_MIN, DEFAULT_BUDGET


@dataclass
class FilterState:
    selected_vibes: Set[str] = field(default_factory=set)
    selected_types: Set[str] = field(default_factory=set)
    budget_ceiling: float = DEFAULT_BUDGET
    submitted: bool = False

    def copy(self) -> "FilterState":
        return replace(
            self,
            selected_vibes=set(self.selected_vibes),
            selected_types=set(self.selected_types),
        )

    # --- interaction callbacks ---
    def toggle_vibe(self, vibe: str) -> None:
        tag = vibe.strip().lower()
        if not tag:
            return
        if tag in self.selected_vibes:
            self.selected_vibes.discard(tag)
        else:
            self.selected_vibes.add(tag)

    def toggle_type(self, venue_type: str) -> None:
        if venue_type in self.selected_types:
            self.selected_types.discard(venue_type)
        else:
            self.selected_types.add(venue_type)

    def set_vibes(self, vibes: Iterable[str]) -> None:
        self.selected_vibes = {v.strip().lower() for v in vibes if v and v.strip()}

    def set_types(self, types: Iterable[str]) -> None:
        self.selected_types = {t.strip() for t in types if t and t.strip()}

    def set_budget(self, value: float) -> None:
        """Slider range is BUDGET_MIN..BUDGET_MAX; values outside are clamped.

        Raises ValueError for text that is not a number, and for inf/nan.
        """
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Budget must be a finite number, got {value!r}")
        self.budget_ceiling = max(BUDGET_MIN, min(BUDGET_MAX, int(round(number))))

    def submit(self) -> None:
        self.submitted = True
