"""
Models for SSCMFI periodic bond calculations.
Covers the agent-facing tool request, the engine response envelope and the compact tool result.
"""
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

# JSON numbers are forwarded as received, so ints stay ints.
Number = Union[StrictInt, StrictFloat]

SecurityType = Literal["Treasury", "Agency", "Corporate", "Municipal", "CD"]
GivenType = Literal["Price", "Yield"]


# ============================================
# Tool request (agent -> adapter)
# ============================================

class CallScheduleEntry(BaseModel):
    """One discrete call date and price. Dates are not parsed here."""
    date: StrictStr = Field(description="Scheduled call date (MM/DD/YYYY)")
    price: Number = Field(description="Call price (e.g. 102.5)")

    model_config = ConfigDict(extra="allow")


class ToolRequest(BaseModel):
    """Arguments of the calculate_bond_periodic tool."""
    security_type: SecurityType = Field(
        alias="securityType",
        description="Security type; selects the engine's day count and frequency defaults",
    )
    maturity_date: StrictStr = Field(alias="maturityDate", description="Maturity date (MM/DD/YYYY)")
    coupon_rate: Number = Field(alias="couponRate", description="Annual coupon rate in percent")
    given_type: GivenType = Field(alias="givenType", description="Which of price or yield is supplied")
    given_value: Number = Field(alias="givenValue", description="The supplied price or yield")
    settlement_date: StrictStr = Field(alias="settlementDate", description="Settlement date (MM/DD/YYYY)")
    call_schedule: Optional[List[CallScheduleEntry]] = Field(
        default=None,
        alias="callSchedule",
        description="Optional call schedule; the engine computes yield-to-worst across it",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_arguments(self) -> Dict[str, Any]:
        """Wire-named arguments, without the optional fields that were not supplied."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================
# Engine response envelope (engine -> adapter)
# ============================================

class PriceYield(BaseModel):
    price: float
    yield_: Optional[float] = Field(default=None, alias="yield")
    ai: Optional[float] = Field(default=None, description="Accrued interest")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class CalculationResult(BaseModel):
    py: PriceYield = Field(alias="PY")
    redemption_info: Optional[Any] = Field(default=None, alias="redemptionInfo")
    py_analytics: Optional[Any] = Field(default=None, alias="PYAnalytics")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class EngineData(BaseModel):
    calculation_to: List[CalculationResult] = Field(alias="calculationTo", min_length=1)

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class EngineMetadata(BaseModel):
    applied_defaults: Optional[Any] = Field(default=None, alias="appliedDefaults")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class EngineResponse(BaseModel):
    """Successful engine body. Only the first calculationTo entry is consumed."""
    data: EngineData
    metadata: Optional[EngineMetadata] = None

    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ============================================
# Tool result (adapter -> agent)
# ============================================

class ToolResult(BaseModel):
    """Compact result returned to the agent."""
    price: float
    yield_: Optional[float] = Field(default=None, alias="yield")
    accrued_interest: Optional[float] = Field(default=None, alias="accruedInterest")
    total_settlement: float = Field(alias="totalSettlement", description="price + accrued interest")
    settlement_date: Optional[str] = Field(default=None, alias="settlementDate")
    redemption_info: Optional[Any] = Field(default=None, alias="redemptionInfo")
    py_analytics: Optional[Any] = Field(default=None, alias="PYAnalytics")
    industry_convention_assumptions: Optional[Any] = Field(
        default=None,
        alias="industryConventionAssumptions",
        description="Conventions (day count, frequency) the engine applied by default",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
