# clinic_api/core/validation.py
from typing import Any, Dict, Iterable, List

from pydantic.alias_generators import to_camel

# Human labels per field (snake_case name); wire aliases are derived below.
FIELD_LABELS: Dict[str, str] = {
    # users
    "name": "Name",
    "email": "Email",
    "password": "Password",
    "role": "Role",
    # patients
    "date_of_appointment": "Date of appointment",
    "address": "Address",
    "aadhar_no": "Aadhar number",
    "contact_no": "Contact number",
    "diseases": "Diseases",
    "doctor_name": "Doctor name",
    "body_weight_kg": "Body weight",
    "height_cm": "Height",
    "hemoglobin": "Hemoglobin",
    "blood_group": "Blood group",
    "sbp": "SBP",
    "dbp": "DBP",
    "wbc": "WBC count",
    "rbc": "RBC count",
    "platelet": "Platelet count",
    "bmi": "BMI",
    "bfr_percent": "BFR",
    "body_water_percent": "Body Water %",
    "bone_mass_kg": "Bone Mass",
    "metabolic_age": "Metabolic Age",
    "v_fat_percent": "V-Fat %",
    "protein_mass_kg": "Protein Mass",
    "muscle_mass_kg": "Muscle Mass",
    "diabetes": "Diabetes",
}

_ALIASES = {to_camel(name): name for name in FIELD_LABELS}

PATTERN_MESSAGES = {
    "aadhar_no": "Aadhar number must be 12 digits.",
    "contact_no": "Contact number must be between 10 to 15 digits.",
}

TOO_SHORT_MESSAGES = {
    "password": "Password must be at least 6 characters long.",
}

# Any non-"missing" failure on these fields yields a single fixed message
FIXED_MESSAGES = {
    "email": "Please fill a valid email address.",
}

_REQUIRED_TYPES = {"missing", "string_type", "float_type", "int_type"}


def _field_name(loc: Iterable[Any]) -> str:
    parts = [p for p in loc if p != "body" and not isinstance(p, int)]
    if not parts:
        return ""
    key = str(parts[-1])
    return _ALIASES.get(key, key)


def _message_for(field: str, error: Dict[str, Any]) -> str:
    kind = error.get("type", "")
    label = FIELD_LABELS.get(field, field)

    if not field:
        if kind == "json_invalid":
            return "Malformed JSON body."
        if kind == "missing":
            return "Request body is required."
        return "Request body must be a JSON object."

    if kind in _REQUIRED_TYPES and (kind == "missing" or error.get("input") is None):
        return f"{label} is required."
    if field in FIXED_MESSAGES:
        return FIXED_MESSAGES[field]
    if kind == "string_too_short":
        return TOO_SHORT_MESSAGES.get(field, f"{label} is required.")
    if kind == "string_pattern_mismatch":
        return PATTERN_MESSAGES.get(field, f"{label} is malformed.")
    if kind == "greater_than_equal":
        return f"{label} cannot be negative."
    if kind == "less_than_equal":
        # float fields report the bound as 100.0
        return f"{label} cannot exceed {error.get('ctx', {}).get('le', 100):g}."
    if kind == "enum":
        return f"{label} must be one of: {error.get('ctx', {}).get('expected', '')}."
    if kind in ("float_parsing", "float_type", "int_parsing", "int_type", "finite_number"):
        return f"{label} must be a number."
    if kind.startswith("datetime") or kind.startswith("date_"):
        return f"{label} must be a valid date."
    return f"{label}: {error.get('msg', 'invalid value')}"


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[str]:
    """Render pydantic errors as user-facing messages, one per offending field."""
    seen = set()
    messages: List[str] = []
    for error in errors:
        field = _field_name(error.get("loc", ()))
        if field in seen:
            continue
        seen.add(field)
        messages.append(_message_for(field, error))
    return messages
