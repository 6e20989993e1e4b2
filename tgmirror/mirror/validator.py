import json
import os
from functools import lru_cache
from typing import Dict, Any, Tuple

from jsonschema import validate, ValidationError

# Path: tgmirror/mirror/schemas/
SCHEMA_DIR = os.path.join(
    os.path.dirname(__file__),
    "schemas"
)

# Mapping document kind → schema filename
SCHEMAS = {
    "task": "task.json",
    "media_record": "media_record.json",
}


@lru_cache(maxsize=None)
def load_schema(kind: str) -> Dict[str, Any]:
    """
    Load JSON schema file for a given document kind.
    """
    path = os.path.join(SCHEMA_DIR, SCHEMAS[kind])

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_document(kind: str, data: Any) -> Tuple[bool, str]:
    """
    Validate a task or media record dict against its JSON schema.

    Returns:
        (True, "") if valid
        (False, "<error message>") if invalid
    """
    schema = load_schema(kind)

    try:
        validate(instance=data, schema=schema)
        return True, ""
    except ValidationError as e:
        return False, e.message


def validate_task(data: Any) -> Tuple[bool, str]:
    return validate_document("task", data)


def validate_record(data: Any) -> Tuple[bool, str]:
    return validate_document("media_record", data)
