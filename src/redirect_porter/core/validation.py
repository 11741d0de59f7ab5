"""Shape validation of parsed input rows.

The whole input is validated against a JSON Schema before any remote
call is made.  A single bad record rejects the entire file.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import jsonschema

from redirect_porter.core.models import OperationKind, Redirect, RedirectType
from redirect_porter.exceptions import InputValidationError


IMPORT_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "from": {"type": "string", "minLength": 1},
            "to": {"type": "string", "minLength": 1},
            "endDate": {"type": "string"},
            "type": {
                "type": "string",
                "enum": [member.value for member in RedirectType],
            },
        },
        "additionalProperties": False,
        "required": ["from", "to", "type"],
    },
}

DELETE_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "from": {"type": "string", "minLength": 1},
        },
        "required": ["from"],
    },
}

_SCHEMAS: dict[OperationKind, dict[str, Any]] = {
    OperationKind.IMPORT: IMPORT_SCHEMA,
    OperationKind.DELETE: DELETE_SCHEMA,
}


def _describe(error: jsonschema.ValidationError) -> str:
    path = list(error.absolute_path)
    if path and isinstance(path[0], int):
        location = f"Record {path[0] + 1}"
        if len(path) > 1:
            location += f", field '{path[1]}'"
        return f"{location}: {error.message}"
    return error.message


def validate_rows(
    operation: OperationKind,
    rows: Sequence[Mapping[str, str]],
) -> None:
    """Raise :class:`InputValidationError` unless every row fits the schema."""
    validator = jsonschema.Draft202012Validator(_SCHEMAS[operation])
    errors = sorted(
        validator.iter_errors([dict(row) for row in rows]),
        key=lambda err: list(err.absolute_path),
    )
    if not errors:
        return

    invalid = {err.absolute_path[0] for err in errors if err.absolute_path}
    raise InputValidationError(
        f"Invalid input. {_describe(errors[0])}",
        hint=(
            f"{len(invalid) or 1} record(s) failed validation; "
            "no redirects were sent. Fix the file and run the command again."
        ),
    )


def parse_import_records(rows: Sequence[Mapping[str, str]]) -> list[Redirect]:
    """Validate import rows and convert them to :class:`Redirect` models."""
    validate_rows(OperationKind.IMPORT, rows)
    return [
        Redirect(
            from_path=row["from"],
            to_path=row["to"],
            type=RedirectType(row["type"]),
            end_date=row.get("endDate"),
        )
        for row in rows
    ]


def parse_delete_paths(rows: Sequence[Mapping[str, str]]) -> list[str]:
    """Validate delete rows and return their ``from`` paths in order."""
    validate_rows(OperationKind.DELETE, rows)
    return [row["from"] for row in rows]
