"""
Patient record rules that run on every write: BMI derivation and full-record
validation. Both are pure so they can be exercised without a database.
"""
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from clinic_api.core.errors import ValidationFailed
from clinic_api.core.validation import format_validation_errors
from clinic_api.schemas.patient import PatientRecord

WEIGHT = "body_weight_kg"
HEIGHT = "height_cm"
BMI = "bmi"


def compute_bmi(weight_kg: float, height_cm: float) -> float:
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 2)


def derive_fields(
    previous: Optional[Mapping[str, Any]], incoming: Mapping[str, Any]
) -> Dict[str, Any]:
    """
    Return the write set for a create (``previous is None``) or an update.

    The result is ``incoming`` plus a derived ``bmi`` when:
      * the write does not carry ``bmi`` (a null ``bmi`` on create counts
        as not carried), and
      * weight or height is part of the write.
    With both post-write values present and height > 0 the BMI is recomputed.
    On update a null weight or height clears the BMI; on create it is left out.
    """
    changes = dict(incoming)

    if BMI in changes:
        # an update may clear bmi explicitly; a null on create means "not given"
        if changes[BMI] is not None or previous is not None:
            return changes
        del changes[BMI]
    if WEIGHT not in changes and HEIGHT not in changes:
        return changes

    prior = previous or {}
    weight = changes[WEIGHT] if WEIGHT in changes else prior.get(WEIGHT)
    height = changes[HEIGHT] if HEIGHT in changes else prior.get(HEIGHT)

    if weight is not None and height is not None:
        if height > 0:
            changes[BMI] = compute_bmi(weight, height)
    elif previous is not None:
        changes[BMI] = None
    return changes


def validate_record(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check a complete record against the field rules.

    Returns the normalised record (defaults applied, strings trimmed) keyed by
    attribute name; raises ValidationFailed listing every violated field.
    """
    try:
        record = PatientRecord.model_validate(dict(data))
    except ValidationError as e:
        raise ValidationFailed(*format_validation_errors(e.errors())) from e
    return record.model_dump()
