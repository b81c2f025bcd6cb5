from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

RPC_RESPONSE = "rpc.response.schema.json"
COMPOSE_RESULT = "compose.result.schema.json"
COMPOSE_TX_RESULT = "compose-tx.result.schema.json"


class ResponseFormatError(ValueError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class SchemaRegistry:
    schema_root: Path

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return _default_registry()

    def schema_path(self, schema_filename: str) -> Path:
        return self.schema_root / schema_filename

    def validator_for(self, schema_filename: str) -> jsonschema.Validator:
        return _compiled_validator(self.schema_path(schema_filename))

    def validate_instance(self, instance: Any, schema_filename: str) -> None:
        validator = self.validator_for(schema_filename)
        errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
        if errors:
            formatted = [self._format_error(err) for err in errors]
            raise ResponseFormatError(
                f"Response does not match {schema_filename}.",
                errors=formatted,
            )

    @staticmethod
    def _format_error(error: jsonschema.ValidationError) -> str:
        location = "/".join(str(part) for part in error.path) or "<root>"
        return f"{location}: {error.message}"


@lru_cache(maxsize=1)
def _default_registry() -> SchemaRegistry:
    return SchemaRegistry(schema_root=Path(__file__).resolve().parent / "v1")


@lru_cache(maxsize=16)
def _compiled_validator(path: Path) -> jsonschema.Validator:
    with path.open("r", encoding="utf-8") as f:
        schema = json.load(f)
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)
