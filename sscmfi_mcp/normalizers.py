"""Engine response and engine error normalization."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional, Sequence

from pydantic import ValidationError

from models.bond_calculation import EngineResponse, ToolResult
from sscmfi_mcp.errors import MalformedResponseError, format_validation_error
from sscmfi_mcp.http_client import EngineError

ENGINE_ERROR_PREFIX = "Error from SSCMFI Engine"

ErrorDetailExtractor = Callable[[EngineError], Optional[str]]


def normalize_response(body: Any, settlement_date: Optional[str]) -> Dict[str, Any]:
    """Flatten the first engine calculation into the agent-facing result."""
    try:
        envelope = EngineResponse.model_validate(body)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"Malformed response from SSCMFI Engine: {format_validation_error(exc)}"
        ) from exc

    calculation = envelope.data.calculation_to[0]
    py = calculation.py
    accrued_interest = py.ai if py.ai is not None else 0.0
    applied_defaults = envelope.metadata.applied_defaults if envelope.metadata else None

    result = ToolResult(
        price=py.price,
        yield_=py.yield_,
        accrued_interest=py.ai,
        total_settlement=py.price + accrued_interest,
        settlement_date=settlement_date,
        redemption_info=calculation.redemption_info,
        py_analytics=calculation.py_analytics,
        industry_convention_assumptions=applied_defaults,
    )
    return result.to_payload()


# ---------------------------------------------------------------------------
# Error detail extractors, most specific first. Each returns None when absent.
# ---------------------------------------------------------------------------

def engine_error_detail(error: EngineError) -> Optional[str]:
    """``errorInfo.errorMessage`` reported by the engine itself."""
    body = error.body
    if not isinstance(body, dict):
        return None
    error_info = body.get("errorInfo")
    if not isinstance(error_info, dict):
        return None
    return _as_text(error_info.get("errorMessage"))


def api_error_detail(error: EngineError) -> Optional[str]:
    """Top-level ``error`` or ``message`` field of the response body."""
    body = error.body
    if not isinstance(body, dict):
        return None
    return _as_text(body.get("error")) or _as_text(body.get("message"))


def transport_error_detail(error: EngineError) -> Optional[str]:
    return _as_text(error.message)


ERROR_DETAIL_EXTRACTORS: Sequence[ErrorDetailExtractor] = (
    engine_error_detail,
    api_error_detail,
    transport_error_detail,
)


def select_error_detail(
    error: EngineError,
    extractors: Sequence[ErrorDetailExtractor] = ERROR_DETAIL_EXTRACTORS,
) -> str:
    for extractor in extractors:
        detail = extractor(error)
        if detail:
            return detail
    return "Unknown engine error"


def normalize_error(error: EngineError) -> str:
    return f"{ENGINE_ERROR_PREFIX}: {select_error_detail(error)}"


def _as_text(value: Any) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)
