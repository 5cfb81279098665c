"""Custom JSON-schema keywords that check Kubernetes resource definitions."""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from jsonschema.exceptions import SchemaError, ValidationError

CUSTOM_KEY_VALIDATION_ERROR_KEY_PATH = "customKeyValidationErrorKeyPath"

_HOST_PATH_MESSAGE = "a container is using a hostPath volume without setting it to read-only"


class _FormatMismatch(Exception):
    """The data does not have the shape a rule expects."""


class _QueryError(Exception):
    """A path through the data could not be followed."""


def _keyword_error(message: str, keyword_path: str, keyword: str) -> ValidationError:
    schema_path = () if keyword_path == keyword else (keyword_path,)
    return ValidationError(message, schema_path=schema_path)


def _require_object(keyword: str, value: Any) -> None:
    if not isinstance(value, Mapping):
        raise SchemaError(f"{keyword} must be an object")


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda item: str(item[0]))
        return "map[" + " ".join(f"{key}:{_format_value(val)}" for key, val in items) + "]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    return str(value)


def _lookup(obj: Mapping[str, Any], name: str) -> Any:
    if name in obj:
        return obj[name]
    folded = name.casefold()
    for key, value in obj.items():
        if isinstance(key, str) and key.casefold() == folded:
            return value
    return None


def _as_object(value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    raise _FormatMismatch


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise _FormatMismatch


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise _FormatMismatch


def _as_strings(value: Any) -> list[str]:
    return [_as_string(item) for item in _as_list(value)]


def _memory_pair(instance: Any) -> tuple[str, str]:
    resources = _as_object(instance)
    memory = {}
    for section in ("requests", "limits"):
        fields = _as_object(_lookup(resources, section))
        _as_string(_lookup(fields, "cpu"))
        memory[section] = _as_string(_lookup(fields, "memory"))
    return memory["requests"], memory["limits"]


def custom_key_rule81(validator: Any, value: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    """Memory requests and limits must both be set and be equal."""
    _require_object("customKeyRule81", value)
    try:
        requests, limits = _memory_pair(instance)
    except _FormatMismatch:
        return
    if requests == limits:
        return
    if not requests or not limits:
        message = f"empty value in {_format_value(instance)}"
    else:
        message = f"values in data value {_format_value(instance)} do not match"
    yield _keyword_error(message, "customKeyRule81", "customKeyRule81")


def _iterate(value: Any) -> list[Any]:
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, list):
        return value
    raise _QueryError


def _field(value: Any, key: str) -> Any:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value.get(key)
    raise _QueryError


def names_of_volumes_with_host_path(data: Any) -> list[str]:
    """Names of the volumes that mount a path from the host."""
    names: list[str] = []
    try:
        for volume in _iterate(_field(data, "volumes")):
            if _field(volume, "hostPath") is None:
                continue
            name = _field(volume, "name")
            if not isinstance(name, str):
                break
            names.append(name)
    except _QueryError:
        pass
    return names


def names_of_volume_mounts_without_readonly(data: Any) -> list[str]:
    """Names of container volume mounts that are not marked read-only.

    Collection stops at the first container whose mounts cannot be read.
    """
    names: list[str] = []
    try:
        for container in _iterate(_field(data, "containers")):
            for mount in _iterate(_field(container, "volumeMounts")):
                read_only = _field(mount, "readOnly")
                if read_only is not None and read_only is not False:
                    continue
                name = _field(mount, "name")
                if not isinstance(name, str):
                    return names
                names.append(name)
    except _QueryError:
        pass
    return names


def custom_key_rule89(validator: Any, value: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    """Volumes backed by a host path must be mounted read-only."""
    _require_object("customKeyRule89", value)
    host_path_volumes = set(names_of_volumes_with_host_path(instance))
    if any(name in host_path_volumes for name in names_of_volume_mounts_without_readonly(instance)):
        yield _keyword_error(_HOST_PATH_MESSAGE, "volumeMounts", "customKeyRule89")


def _rbac_rules(instance: Any) -> list[tuple[list[str], list[str]]]:
    rules = []
    for item in _as_list(instance):
        rule = _as_object(item)
        _as_strings(_lookup(rule, "apiGroups"))
        rules.append((_as_strings(_lookup(rule, "resources")), _as_strings(_lookup(rule, "verbs"))))
    return rules


def custom_key_rule101(validator: Any, value: Any, instance: Any, schema: Any) -> Iterator[ValidationError]:
    """Role rules must not allow creating pods."""
    _require_object("customKeyRule101", value)
    try:
        rules = _rbac_rules(instance)
    except _FormatMismatch:
        return
    for resources, verbs in rules:
        if any(resource in ("pods", "*") for resource in resources) and any(
            verb in ("create", "*") for verb in verbs
        ):
            yield _keyword_error("invalid verb or resource", "customKeyRule101", "customKeyRule101")
            return