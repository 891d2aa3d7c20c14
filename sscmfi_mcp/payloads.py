"""Translation of tool arguments into engine payloads.

The engine has shipped two wire contracts. ``flat`` mirrors the tool argument
names one to one; ``nested`` splits them into ``securityDefinition`` and
``tradeDefinition``. Which one is used is a configuration choice
(``SSCMFI_PAYLOAD_SHAPE``), never guessed from the request.

Builders take the validated, wire-named arguments and do not validate again;
a missing required key raises ``KeyError``.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, Mapping, Tuple

PAYMENT_TYPE_PERIODIC = "periodic"
SETTLEMENT_DATE_FORMAT = "%m/%d/%Y"

Clock = Callable[[], date]
PayloadBuilder = Callable[..., Dict[str, Any]]


def default_settlement_date(today: Clock = date.today) -> str:
    """Settlement date used when none is supplied: today, as MM/DD/YYYY."""
    return today().strftime(SETTLEMENT_DATE_FORMAT)


def build_flat_payload(arguments: Mapping[str, Any], today: Clock = date.today) -> Dict[str, Any]:
    payload = {
        "securityType": arguments["securityType"],
        "maturityDate": arguments["maturityDate"],
        "couponRate": arguments["couponRate"],
        "givenType": arguments["givenType"],
        "givenValue": arguments["givenValue"],
        "settlementDate": arguments["settlementDate"],
    }
    if arguments.get("callSchedule") is not None:
        payload["callSchedule"] = arguments["callSchedule"]
    return payload


def build_nested_payload(arguments: Mapping[str, Any], today: Clock = date.today) -> Dict[str, Any]:
    security_definition = {
        "securityType": arguments["securityType"],
        "paymentType": PAYMENT_TYPE_PERIODIC,
        "maturityDate": arguments["maturityDate"],
        "couponRate": arguments["couponRate"],
    }
    if arguments.get("callSchedule") is not None:
        security_definition["callSchedule"] = arguments["callSchedule"]

    settlement_date = arguments.get("settlementDate") or default_settlement_date(today)
    trade_definition = {
        "settlementDate": settlement_date,
        "givenType": arguments["givenType"],
        "givenValue": arguments["givenValue"],
    }
    return {"securityDefinition": security_definition, "tradeDefinition": trade_definition}


_PAYLOAD_BUILDERS: Dict[str, PayloadBuilder] = {
    "flat": build_flat_payload,
    "nested": build_nested_payload,
}

PAYLOAD_SHAPES: Tuple[str, ...] = tuple(_PAYLOAD_BUILDERS)


def get_payload_builder(shape: str) -> PayloadBuilder:
    builder = _PAYLOAD_BUILDERS.get(shape)
    if builder is None:
        raise ValueError(f"Unsupported payload shape: {shape!r} (expected one of {', '.join(PAYLOAD_SHAPES)})")
    return builder
