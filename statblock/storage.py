import json
from pathlib import Path
from typing import Any, Dict

from .errors import TemplateError
from .normalize import sanitize_filename


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_template(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise TemplateError(f"Template file not found: {path}")
    try:
        template = _read_json(path)
    except json.JSONDecodeError as e:
        raise TemplateError(f"Template is not valid JSON ({path}): {e}")
    if not isinstance(template, dict):
        raise TemplateError(f"Template must be a JSON object: {path}")
    return template


def load_record(path: Path) -> Any:
    """Load a saved record, unwrapping the API's {"monster": ...} envelope."""
    data = _read_json(path)
    if isinstance(data, dict) and "monster" in data:
        return data["monster"]
    return data


def output_filename(name: str) -> str:
    return f"{sanitize_filename(name)}.json"


def save_document(output_dir: Path, document: Dict[str, Any]) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / output_filename(str(document.get("name", "")))
    with path.open("w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
    return path
