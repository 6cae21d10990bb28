"""Schema-tolerant decoding of model output into content records.

The pydantic record classes double as the field-spec table: each field's
annotation, default and required-ness drive one generic routine.

* optional fields that are absent or mistyped take their declared default;
* list elements that are mistyped, or sub-records missing a required field,
  are dropped from the list instead of failing the record;
* a required field that is absent or mistyped fails the record it belongs to.
"""

import json
import logging
from typing import Any, Literal, Mapping, TypeVar, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel
from pydantic.fields import FieldInfo


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

_MISSING = object()


class RecordDecodeError(ValueError):
    def __init__(self, schema: type[BaseModel], field: str) -> None:
        self.schema = schema
        self.field = field
        super().__init__(f"{schema.__name__}.{field}:required_field_invalid")


def _load_json(json_text: str) -> Any:
    try:
        return json.loads(json_text)
    except (TypeError, ValueError, RecursionError):
        return None


def _is_record_type(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _coerce(value: Any, annotation: Any) -> Any:
    if value is None:
        return _MISSING

    if annotation is Any:
        return value
    if annotation is str:
        return value if isinstance(value, str) else _MISSING
    if annotation is bool:
        return value if isinstance(value, bool) else _MISSING
    if annotation is int:
        if isinstance(value, bool):
            return _MISSING
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return _MISSING
    if annotation is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return _MISSING
        return float(value)

    origin = get_origin(annotation)
    if origin is Literal:
        return value if value in get_args(annotation) else _MISSING
    if origin is list:
        if not isinstance(value, list):
            return _MISSING
        args = get_args(annotation)
        return _coerce_items(value, args[0] if args else Any)
    if origin is dict:
        if not isinstance(value, dict):
            return _MISSING
        args = get_args(annotation)
        value_type = args[1] if len(args) == 2 else Any
        entries: dict[str, Any] = {}
        for key, item in value.items():
            coerced = _coerce(item, value_type)
            if coerced is not _MISSING:
                entries[str(key)] = coerced
        return entries
    if _is_record_type(annotation):
        if not isinstance(value, dict):
            return _MISSING
        return decode_object(value, annotation)

    return _MISSING


def _coerce_items(items: list[Any], item_type: Any) -> list[Any]:
    kept: list[Any] = []
    for index, item in enumerate(items):
        try:
            coerced = _coerce(item, item_type)
        except RecordDecodeError as exc:
            logger.debug("dropping list element %d: %s", index, exc)
            continue
        if coerced is _MISSING:
            logger.debug("dropping list element %d: not a %s", index, getattr(item_type, "__name__", item_type))
            continue
        kept.append(coerced)
    return kept


def _lookup(data: Mapping[str, Any], name: str, field: FieldInfo) -> Any:
    for key in (field.alias, to_camel(name), name):
        if key and key in data:
            return data[key]
    return _MISSING


def decode_object(
    data: Mapping[str, Any],
    schema: type[RecordT],
    defaults: Mapping[str, Any] | None = None,
) -> RecordT:
    """Decode one JSON object; raises RecordDecodeError on a broken required field."""
    values: dict[str, Any] = {}
    for name, field in schema.model_fields.items():
        raw = _lookup(data, name, field)
        coerced = _MISSING
        if raw is not _MISSING:
            try:
                coerced = _coerce(raw, field.annotation)
            except RecordDecodeError:
                if field.is_required() and not (defaults and name in defaults):
                    raise
                coerced = _MISSING

        if coerced is _MISSING:
            if defaults and name in defaults:
                coerced = defaults[name]
            elif field.is_required():
                raise RecordDecodeError(schema, name)
            else:
                continue
        values[name] = coerced

    try:
        return schema.model_validate(values)
    except ValidationError as exc:
        logger.debug("record validation failed for %s: %s", schema.__name__, exc)
        raise RecordDecodeError(schema, "model") from exc


def decode_record(
    json_text: str,
    schema: type[RecordT],
    defaults: Mapping[str, Any] | None = None,
) -> RecordT | None:
    data = _load_json(json_text)
    if not isinstance(data, dict):
        logger.warning("decode_failure: %s payload is not a json object", schema.__name__)
        return None
    try:
        return decode_object(data, schema, defaults)
    except RecordDecodeError as exc:
        logger.warning("decode_failure: %s", exc)
        return None


def _first_list_member(data: Mapping[str, Any]) -> Any:
    for value in data.values():
        if isinstance(value, list):
            return value
    return None


def decode_record_list(json_text: str, schema: type[RecordT]) -> list[RecordT] | None:
    """Decode a JSON array of records, dropping elements that fail their own schema.

    An object wrapping the array (``{"words": [...]}``, as JSON-object mode
    produces) is unwrapped by taking its first list-valued member.
    """
    data = _load_json(json_text)
    if isinstance(data, dict):
        data = _first_list_member(data)
    if not isinstance(data, list):
        logger.warning("decode_failure: %s payload is not a json array", schema.__name__)
        return None

    records = _coerce_items(data, schema)
    if len(records) < len(data):
        logger.info("dropped %d malformed %s item(s)", len(data) - len(records), schema.__name__)
    return records
