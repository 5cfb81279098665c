"""Validate documents against JSON schemas that may use custom keywords."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterator

import yaml
from jsonschema import Draft202012Validator, FormatChecker, validators
from jsonschema.exceptions import SchemaError, ValidationError

from .extensions import (
    CUSTOM_KEY_VALIDATION_ERROR_KEY_PATH,
    custom_key_rule81,
    custom_key_rule89,
    custom_key_rule101,
)
from .quantity import QuantityError, parse_quantity


@dataclass(frozen=True)
class DetailedError:
    """One failed check: where in the schema, where in the data, and why."""

    keyword_location: str
    instance_location: str
    error: str


def _keyword_error(message: str, keyword_path: str, keyword: str) -> ValidationError:
    schema_path = () if keyword_path == keyword else (keyword_path,)
    return ValidationError(message, schema_path=schema_path)


def _resource_bound(keyword: str, value: Any, instance: Any, is_minimum: bool) -> Iterator[ValidationError]:
    if not isinstance(value, str):
        raise SchemaError(f"{keyword} must be a string")
    if not isinstance(instance, str):
        yield _keyword_error(
            f"{json.dumps(instance)} must be a string", CUSTOM_KEY_VALIDATION_ERROR_KEY_PATH, keyword
        )
        return
    try:
        data_value = float(parse_quantity(instance))
    except QuantityError:
        yield _keyword_error(
            f"failed parsing data value {instance}", CUSTOM_KEY_VALIDATION_ERROR_KEY_PATH, keyword
        )
        return
    try:
        bound = float(parse_quantity(value))
    except QuantityError:
        yield _keyword_error(
            f"failed parsing schema value {value}", CUSTOM_KEY_VALIDATION_ERROR_KEY_PATH, keyword
        )
        return
    if is_minimum and bound > data_value:
        yield _keyword_error(f"{instance} is lower then resourceMinimum {value}", keyword, keyword)
    elif not is_minimum and bound < data_value:
        yield _keyword_error(f"{instance} is greater then resourceMaximum {value}", keyword, keyword)


def resource_minimum(validator: Any, value: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    """The instance, a resource quantity, must not be below ``value``."""
    yield from _resource_bound("resourceMinimum", value, instance, is_minimum=True)


def resource_maximum(validator: Any, value: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    """The instance, a resource quantity, must not be above ``value``."""
    yield from _resource_bound("resourceMaximum", value, instance, is_minimum=False)


_EXTENSIONS = {
    "resourceMinimum": resource_minimum,
    "resourceMaximum": resource_maximum,
    "customKeyRule81": custom_key_rule81,
    "customKeyRule89": custom_key_rule89,
    "customKeyRule101": custom_key_rule101,
}


@lru_cache(maxsize=None)
def _validator_class(base: type) -> type:
    return validators.extend(base, _EXTENSIONS)


def _pointer(parts: Any) -> str:
    return "".join("/" + str(part).replace("~", "~0").replace("/", "~1") for part in parts)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "integer" if value.is_integer() else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _message(error: ValidationError) -> str:
    keyword, value = error.validator, error.validator_value
    if keyword == "required" and isinstance(error.instance, dict) and isinstance(value, list):
        missing = [name for name in value if name not in error.instance]
        if missing:
            return "missing properties: " + ", ".join(f"'{name}'" for name in missing)
    elif keyword == "const":
        return f"value must be {json.dumps(value)}"
    elif keyword == "enum" and isinstance(value, list):
        return "value must be one of " + ", ".join(json.dumps(item) for item in value)
    elif keyword == "type":
        expected = " or ".join(value) if isinstance(value, list) else value
        return f"expected {expected}, but got {_json_type(error.instance)}"
    return error.message


def _leaf_errors(error: ValidationError) -> Iterator[ValidationError]:
    if not error.context or error.validator == "anyOf":
        yield error
        return
    for child in error.context:
        yield from _leaf_errors(child)


def _yaml_to_json(text: str) -> str:
    try:
        document = next(iter(yaml.safe_load_all(text)), None)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML: {exc}") from exc
    return json.dumps(document, default=str)


class JSONSchemaValidator:
    """Validates data against a JSON schema with format assertion enabled."""

    def validate_yaml_schema(self, schema_content: str, yaml_content: str) -> list[DetailedError]:
        """Validate YAML content against a schema written in YAML or JSON."""
        return self.validate(_yaml_to_json(schema_content), _yaml_to_json(yaml_content))

    def validate(self, schema_content: str, content: str | bytes) -> list[DetailedError]:
        """Validate JSON content against a JSON schema.

        Returns the leaf validation errors, empty when the content is valid.
        Raises ValueError for malformed JSON and SchemaError for a bad schema.
        """
        instance = json.loads(content)
        schema = json.loads(schema_content)
        if not isinstance(schema, (dict, bool)):
            raise SchemaError(f"schema must be an object or a boolean, not {_json_type(schema)}")
        cls = _validator_class(validators.validator_for(schema, default=Draft202012Validator))
        cls.check_schema(schema)
        validator = cls(schema, format_checker=FormatChecker())

        details: list[DetailedError] = []
        for error in validator.iter_errors(instance):
            for leaf in _leaf_errors(error):
                detail = DetailedError(
                    keyword_location=_pointer(leaf.absolute_schema_path),
                    instance_location=_pointer(leaf.absolute_path),
                    error=_message(leaf),
                )
                if detail not in details:
                    details.append(detail)
        return details