"""Tool registry for the SSCMFI MCP adapter."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List

from pydantic import ValidationError

from models.bond_calculation import ToolRequest
from sscmfi_mcp.errors import InvalidArgumentsError, UnknownToolError, format_validation_error
from sscmfi_mcp.http_client import EngineClient
from sscmfi_mcp.normalizers import normalize_response
from sscmfi_mcp.payloads import Clock, PayloadBuilder, build_flat_payload

logger = logging.getLogger(__name__)

CALCULATE_BOND_PERIODIC = "calculate_bond_periodic"


@dataclass(frozen=True)
class ToolContext:
    """Per-server collaborators handed to every tool handler."""

    engine_client: EngineClient
    payload_builder: PayloadBuilder = build_flat_payload
    today: Clock = date.today


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: Callable[[dict, ToolContext], Awaitable[Any]]


async def _calculate_bond_periodic(arguments: dict, context: ToolContext) -> Any:
    try:
        request = ToolRequest.model_validate(arguments)
    except ValidationError as exc:
        raise InvalidArgumentsError(
            f"Invalid arguments for {CALCULATE_BOND_PERIODIC}: {format_validation_error(exc)}"
        ) from exc

    wire_arguments = request.to_arguments()
    payload = context.payload_builder(wire_arguments, today=context.today)
    logger.info(
        f"{CALCULATE_BOND_PERIODIC}: {request.security_type} maturing {request.maturity_date}, "
        f"given {request.given_type}={request.given_value}"
    )
    body = await context.engine_client.calculate(payload)
    return normalize_response(body, settlement_date=wire_arguments.get("settlementDate"))


_TOOL_SPECS: List[ToolSpec] = [
    ToolSpec(
        name=CALCULATE_BOND_PERIODIC,
        description=(
            "Calculate price, yield, and accrued interest for a periodic bond. "
            "Required for any standard income security."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "securityType": {
                    "type": "string",
                    "enum": ["Treasury", "Agency", "Corporate", "Municipal", "CD"],
                    "description": (
                        "Crucial/Required. Specify the type to apply correct standard defaults "
                        "for Day Count and Frequency."
                    ),
                },
                "maturityDate": {
                    "type": "string",
                    "description": "Required. The date the bond expires. Use MM/DD/YYYY format for maximum accuracy.",
                },
                "couponRate": {
                    "type": "number",
                    "description": "Required. The annual coupon rate as a percentage (e.g., 5.25 for 5.25%).",
                },
                "givenType": {
                    "type": "string",
                    "enum": ["Price", "Yield"],
                    "description": (
                        "Required. Whether you are providing the Price (to find Yield) "
                        "or the Yield (to find Price)."
                    ),
                },
                "givenValue": {
                    "type": "number",
                    "description": (
                        "Required. The numeric value for the Price (e.g. 98.75) "
                        "or Yield (as a percent e.g. 4.25)."
                    ),
                },
                "settlementDate": {
                    "type": "string",
                    "description": (
                        "Required. The date the money actually changes hands. "
                        "Use MM/DD/YYYY format for maximum accuracy."
                    ),
                },
                "callSchedule": {
                    "type": "array",
                    "description": (
                        "Optional. List of discrete call dates and prices. The engine will automatically "
                        "calculate the Yield-to-Worst using this schedule."
                    ),
                    "items": {
                        "type": "object",
                        "required": ["date", "price"],
                        "properties": {
                            "date": {"type": "string", "description": "The scheduled call date (MM/DD/YYYY)."},
                            "price": {"type": "number", "description": "The call price (e.g. 102.5)."},
                        },
                    },
                },
            },
            "required": [
                "securityType",
                "maturityDate",
                "couponRate",
                "givenType",
                "givenValue",
                "settlementDate",
            ],
        },
        handler=_calculate_bond_periodic,
    ),
]

_TOOL_INDEX = {spec.name: spec for spec in _TOOL_SPECS}


def tool_definitions() -> List[Dict[str, Any]]:
    return [
        {
            "name": spec.name,
            "description": spec.description,
            "inputSchema": copy.deepcopy(spec.input_schema),
        }
        for spec in _TOOL_SPECS
    ]


async def dispatch_tool(name: str, arguments: dict, context: ToolContext) -> Any:
    spec = _TOOL_INDEX.get(name)
    if spec is None:
        raise UnknownToolError(f"Unknown tool: {name}")
    return await spec.handler(arguments if arguments is not None else {}, context)
