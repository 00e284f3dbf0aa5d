from typing import Any, Dict, Tuple


def normalize_blank_values(value: Any) -> Any:
    """Recursively turn empty-string leaves into None. Applying it twice changes nothing."""
    if value is None or value == "":
        return None
    if isinstance(value, list):
        return [normalize_blank_values(item) for item in value]
    if isinstance(value, dict):
        return {key: normalize_blank_values(item) for key, item in value.items()}
    return value


def split_metadata(form_data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Return (form data without metadata, metadata)"""
    clean = {key: value for key, value in (form_data or {}).items() if key != "metadata"}
    return clean, (form_data or {}).get("metadata") or {}
