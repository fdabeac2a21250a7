"""Outcome of a connect or refresh round-trip."""
from dataclasses import dataclass

from peerdraft.schemas.settings import HobbyPlan, ProfessionalPlan, dump_plan


@dataclass
class ReconcileResult:
    operation: str
    updated: bool
    plan: HobbyPlan | ProfessionalPlan

    def plan_record(self) -> dict:
        return dump_plan(self.plan)
