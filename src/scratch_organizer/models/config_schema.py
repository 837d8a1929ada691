"""JSON schema and validation for the persisted scratch settings."""

from typing import Any, Dict, List

import jsonschema

_APPEND_TYPES = ["APPEND", "PREPEND"]

SETTINGS_SCHEMA = {
    "type": "object",
    "properties": {
        "scratches_folder_path": {
            "type": ["string", "null"],
            "description": "Folder holding scratch files (null for the default location)"
        },
        "scratches": {
            "type": "array",
            "items": {
                "type": "string",
                "minLength": 1,
            },
            "uniqueItems": True,
            "description": "Scratch names with mnemonics, in display order"
        },
        "last_opened_scratch": {
            "type": ["string", "null"],
        },
        "listen_to_clipboard": {
            "type": "boolean",
        },
        "need_migration": {
            "type": "boolean",
        },
        "clipboard_append_type": {
            "type": ["string", "null"],
            "enum": _APPEND_TYPES + [None],
        },
        "new_scratch_append_type": {
            "type": ["string", "null"],
            "enum": _APPEND_TYPES + [None],
        },
        "default_scratch_meaning": {
            "type": ["string", "null"],
            "enum": ["TOPMOST", "LAST_OPENED", None],
        },
    },
    "additionalProperties": False,
}


def validate_settings_json(settings_data: Dict[str, Any]) -> List[str]:
    """Validate a settings document.

    Returns:
        List of validation error messages, empty when the document is valid
    """
    try:
        jsonschema.validate(settings_data, SETTINGS_SCHEMA)
        return []
    except jsonschema.ValidationError as e:
        path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        return [f"Validation error at {path}: {e.message}"]
    except jsonschema.SchemaError as e:
        return [f"Schema error: {e.message}"]
