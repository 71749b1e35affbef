"""
Validation schema for the stored menu document.

The node schema is recursive: ``children`` holds nodes of the same shape to
any depth. ``MenuFieldsForm`` is not used for validation; its field
descriptions carry the metadata the property panel is generated from.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from core.menu.types import MENU_TYPE_LIST

logger = logging.getLogger(__name__)


class MenuValidationError(ValueError):
    """Menu payload rejected; ``message`` names the first violated field"""
    
    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class MenuNodeSchema(BaseModel):
    model_config = ConfigDict(extra='ignore')
    
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    order: Optional[int] = None
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    url: Optional[str] = None
    hidden: Optional[bool] = None
    type: Optional[str] = None
    children: Optional[List['MenuNodeSchema']] = None


MenuNodeSchema.model_rebuild()


def _walk_ids(nodes: List[MenuNodeSchema]):
    for node in nodes:
        yield node.id
        yield from _walk_ids(node.children or [])


class MenuSchema(BaseModel):
    """Body of a create request"""
    items: List[MenuNodeSchema]
    
    @model_validator(mode='after')
    def check_unique_ids(self) -> 'MenuSchema':
        seen = set()
        for node_id in _walk_ids(self.items):
            if node_id in seen:
                raise ValueError(f"Duplicate menu id '{node_id}'")
            seen.add(node_id)
        return self


class MenuUpdateSchema(MenuSchema):
    """Body of an update request"""
    id: str = Field(min_length=1)


def first_error_message(exc: ValidationError) -> str:
    """Human-readable text for the first violated field"""
    errors = exc.errors()
    if not errors:
        return "Invalid menu"
    
    error = errors[0]
    location = '.'.join(str(part) for part in error.get('loc', ()))
    message = error.get('msg', 'Invalid value')
    return f"{location}: {message}" if location else message


def validate_menu(payload: Any, require_id: bool = False) -> MenuSchema:
    """Validate a request body, raising MenuValidationError on the first problem"""
    if not isinstance(payload, dict):
        raise MenuValidationError("Request body must be a JSON object")
    
    schema = MenuUpdateSchema if require_id else MenuSchema
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        message = first_error_message(e)
        logger.warning(f"Menu validation failed: {message}")
        raise MenuValidationError(message, e.errors(include_url=False, include_context=False)) from e


def validated_items(menu: MenuSchema) -> List[Dict[str, Any]]:
    """JSON-ready items of a validated payload"""
    return menu.model_dump(exclude_none=True)['items']


def _meta(**model: Any) -> str:
    return json.dumps(model, ensure_ascii=False)


class MenuFieldsForm(BaseModel):
    """Editable fields of a menu node as shown in the property panel"""
    title: str = Field('', description=_meta(name="Title", type="string"))
    icon: Optional[str] = Field(None, description=_meta(name="Icon", type="icon"))
    url: Optional[str] = Field(None, description=_meta(
        name="Link",
        type="enum",
        enums={"#": "#", "Home": "/", "Popular": "/popular"},
    ))
    hidden: bool = Field(False, description=_meta(name="Hidden", type="boolean", default=False))
    type: Optional[str] = Field(None, description=_meta(
        name="Type",
        type="enum",
        enums={menu_type.label: menu_type.id for menu_type in MENU_TYPE_LIST},
    ))
