"""FastAPI routes for recovery evaluation."""

from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, status

from services.recovery import calculator, schemas
from services.recovery.outcomes import Failed, Ok, Outcome
from services.reference.denial_codes import get_carc_code
from services.rules.validator import validate_pe_input

router = APIRouter(prefix="/recovery", tags=["recovery"])


def to_jsonable(value: Any) -> Any:
    """Render evaluator results (named tuples, enums, dates) as plain JSON values."""
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return {key: to_jsonable(item) for key, item in value._asdict().items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def _outcome_summary(outcome: Outcome) -> Dict[str, Optional[str]]:
    if isinstance(outcome, Ok):
        return {"status": "ok", "reason": None}
    if isinstance(outcome, Failed):
        return {"status": "failed", "reason": outcome.reason}
    return {"status": "skipped", "reason": outcome.reason}


# full pathway evaluation for one encounter
@router.post("/evaluate")
def evaluate_recovery(encounter: schemas.RecoveryInput, as_of: Optional[date] = None):
    """Evaluate every recovery pathway for an encounter."""
    result = calculator.evaluate(encounter, as_of=as_of)
    body = to_jsonable(result._replace(outcomes={}))
    body["outcomes"] = {name: _outcome_summary(o) for name, o in result.outcomes.items()}
    return body


@router.post("/presumptive-eligibility/validate", response_model=schemas.PEValidationResponse)
def validate_presumptive_eligibility(request: schemas.PEValidationRequest):
    """Check presumptive eligibility fields before evaluation."""
    result = validate_pe_input(request.model_dump())
    return schemas.PEValidationResponse(valid=result.valid, errors=result.errors)


@router.get("/denial-codes/{code}")
def get_denial_code(code: str):
    """Look up a claim adjustment reason code."""
    carc = get_carc_code(code)
    if carc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown CARC code {code}")
    return to_jsonable(carc)
