from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt, TypeAdapter


class HobbyPlan(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["hobby"]
    email: str | None = None


class ProfessionalPlan(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["professional"]
    email: str | None = None


Plan = Annotated[Union[HobbyPlan, ProfessionalPlan], Field(discriminator="type")]
PLAN_ADAPTER: TypeAdapter[HobbyPlan | ProfessionalPlan] = TypeAdapter(Plan)


def parse_plan(payload: Any) -> HobbyPlan | ProfessionalPlan:
    """Validate a plan payload against the closed hobby/professional union."""
    return PLAN_ADAPTER.validate_python(payload)


def dump_plan(plan: HobbyPlan | ProfessionalPlan) -> dict[str, Any]:
    """Serialize a plan exactly as it was received, without filling optional keys."""
    record = plan.model_dump()
    if "email" not in plan.model_fields_set:
        record.pop("email", None)
    return record


class PluginSettings(BaseModel):
    """The per-installation settings record, keyed the way it is persisted."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    signaling: list[str] = Field(min_length=1)
    subscription_api: str = Field(alias="subscriptionAPI")
    connect_api: str = Field(alias="connectAPI")
    base_path: str = Field(alias="basePath")
    name: str
    oid: str = Field(min_length=1)
    plan: Plan
    duration: NonNegativeInt | NonNegativeFloat

    def to_record(self) -> dict[str, Any]:
        record = self.model_dump(by_alias=True)
        record["plan"] = dump_plan(self.plan)
        return record


class NameUpdate(BaseModel):
    name: str


class ConnectRequest(BaseModel):
    email: str = ""


class ReconcileResponse(BaseModel):
    updated: bool
    plan: dict[str, Any]


class SubscriptionView(BaseModel):
    plan_type: Literal["hobby", "professional"]
    email: str | None = None
    minutes_used: int | float
    description: str
    checkout_url: str | None = None
    support_email: str
