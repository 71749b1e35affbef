"""
Schema-driven field model - which widget edits which field

Field metadata is a JSON object stored in each schema field's description.
"""

import json
import logging
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel

from core.menu.schema import MenuFieldsForm

logger = logging.getLogger(__name__)


class FieldKind(Enum):
    STRING = "string"
    TEXTAREA = "textarea"
    NUMBER = "number"
    PASSWORD = "password"
    BOOLEAN = "boolean"
    SWITCH = "switch"
    ENUM = "enum"
    HEX_ENUM = "hex-enum"
    RADIO = "radio"
    DATE = "date"
    DATETIME = "datetime-local"
    RECORD = "record"
    RATING = "rating"
    TAG = "tag"
    ICON = "icon"
    FILE = "file"


CHOICE_KINDS = (FieldKind.ENUM, FieldKind.HEX_ENUM, FieldKind.RADIO)
TOGGLE_KINDS = (FieldKind.BOOLEAN, FieldKind.SWITCH)
NUMERIC_KINDS = (FieldKind.NUMBER, FieldKind.RATING)


@dataclass(frozen=True)
class FieldModel:
    key: str
    kind: FieldKind
    name: str
    enums: Dict[str, Any] = field(default_factory=dict)
    default: Any = None


def _kind_from_annotation(annotation: Any) -> FieldKind:
    """Fallback when the metadata names no type: look at the Python type"""
    candidates = typing.get_args(annotation) or (annotation,)
    for candidate in candidates:
        if candidate is bool:
            return FieldKind.BOOLEAN
        if candidate in (int, float):
            return FieldKind.NUMBER
    return FieldKind.STRING


def _parse_kind(raw: Optional[str], annotation: Any) -> FieldKind:
    if raw is None:
        return _kind_from_annotation(annotation)
    try:
        return FieldKind(raw)
    except ValueError:
        logger.debug(f"Unknown field type {raw!r}, rendering as text")
        return FieldKind.STRING


def build_field_model(schema: Type[BaseModel]) -> Tuple[Dict[str, FieldModel], Dict[str, Any]]:
    """Field models and default values for every field of schema"""
    field_models: Dict[str, FieldModel] = {}
    defaults: Dict[str, Any] = {}
    
    for key, info in schema.model_fields.items():
        try:
            meta = json.loads(info.description or "{}")
        except json.JSONDecodeError:
            logger.warning(f"Field {key} has a non-JSON description, using defaults")
            meta = {}
        
        field_models[key] = FieldModel(
            key=key,
            kind=_parse_kind(meta.get("type"), info.annotation),
            name=meta.get("name", key),
            enums=dict(meta.get("enums") or {}),
            default=meta.get("default"),
        )
        if meta.get("default") is not None:
            defaults[key] = meta["default"]
    
    return field_models, defaults


def coerce_value(model: FieldModel, raw: Any) -> Any:
    """Turn widget input into the value stored on the node"""
    if model.kind in TOGGLE_KINDS:
        if isinstance(raw, str):
            return raw.strip().lower() in ("1", "true", "yes", "on")
        return bool(raw)
    
    if model.kind in NUMERIC_KINDS:
        if raw is None or raw == "":
            return None
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return raw
        number = float(raw)
        return int(number) if number.is_integer() else number
    
    if model.kind in CHOICE_KINDS:
        # Accept either the label shown in the widget or the value itself
        return model.enums.get(raw, raw)
    
    if model.kind == FieldKind.TAG and isinstance(raw, str):
        return [tag.strip() for tag in raw.split(',') if tag.strip()]
    
    return raw


MENU_FIELD_MODEL, MENU_FIELD_DEFAULTS = build_field_model(MenuFieldsForm)
