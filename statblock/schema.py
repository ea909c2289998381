from typing import Any, List

LIST_FIELDS = ["combatstyles", "uniqueskills", "loottable", "sections"]
IDENTITY_FIELD = "monstername"


def validate_record(data: Any) -> List[str]:
    """
    Returns a list of shape warnings for a monster record. Empty list means
    the record looks as expected. Missing optional fields are not reported;
    the merge fills them with fallbacks.
    """
    if not isinstance(data, dict):
        return ["Record must be a JSON object"]

    errors: List[str] = []

    if data.get(IDENTITY_FIELD) is None:
        errors.append(f"Missing field: {IDENTITY_FIELD} (display name falls back to default)")

    for f in LIST_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], list):
            errors.append(f"Field '{f}' must be a list if provided")

    for i, style in enumerate(data.get("combatstyles") or []):
        if not isinstance(style, dict):
            errors.append(f"combatstyles[{i}] must be an object")

    for i, section in enumerate(data.get("uniqueskills") or []):
        if not isinstance(section, dict):
            errors.append(f"uniqueskills[{i}] must be an object")
        elif section.get("abilities") is not None and not isinstance(section["abilities"], list):
            errors.append(f"uniqueskills[{i}].abilities must be a list if provided")

    return errors
