"""Schema checks and JSON recovery for gateway replies."""
import json
import re
from pathlib import Path

import jsonschema

# Fields an analysis reply cannot do without. signal/signalLabel must be
# non-empty; reasoning only has to be present (an empty list is allowed).
NON_EMPTY_FIELDS = ("signal", "signalLabel")
PRESENT_FIELDS = ("reasoning",)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def load_schema(schema_path: Path) -> dict:
    with open(schema_path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate(data: dict, schema: dict) -> list[str]:
    """Every schema violation as "path: message", ordered by path. Empty if valid."""
    try:
        validator = jsonschema.Draft7Validator(schema)
        errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    except jsonschema.SchemaError as e:
        return [f"Schema error: {e.message}"]
    messages = []
    for e in errors:
        path = "/".join(str(p) for p in e.absolute_path)
        messages.append(f"{path}: {e.message}" if path else e.message)
    return messages


def missing_analysis_fields(payload: dict) -> list[str]:
    """Names of required analysis fields that are absent or blank in a reply."""
    missing = [name for name in NON_EMPTY_FIELDS if not payload.get(name)]
    missing += [name for name in PRESENT_FIELDS if payload.get(name) is None]
    return missing


def _first_object(text: str) -> dict | None:
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict):
            return obj
        start = text.find("{", start + 1)
    return None


def extract_json_from_text(text: str) -> dict | None:
    """
    Recover the analysis object from a model reply.

    Tries the reply as-is, then the body of each ```json fence, then the first
    decodable {...} object embedded in prose. Non-object JSON is ignored.
    """
    text = text.strip()
    try:
        parsed = json.loads(text)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    for block in _FENCE_RE.findall(text):
        obj = _first_object(block)
        if obj is not None:
            return obj

    return _first_object(text)
