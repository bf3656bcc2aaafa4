"""Declarative resource schema and per-instance resource data.

A ``Resource`` pairs a map of attribute ``Schema`` objects with the CRUD
functions that talk to Azure. Every CRUD function has the signature
``fn(d: ResourceData, meta: ArmClient) -> None`` and raises a
``ProviderError`` subclass on failure.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

TYPE_STRING = "string"
TYPE_INT = "int"
TYPE_BOOL = "bool"
TYPE_LIST = "list"
TYPE_MAP = "map"

ValidateFunc = Callable[[Any, str], Tuple[List[str], List[str]]]
DiffSuppressFunc = Callable[[str, Any, Any], bool]

_PYTHON_TYPES = {
    TYPE_STRING: (str,),
    TYPE_INT: (int,),
    TYPE_BOOL: (bool,),
    TYPE_LIST: (list, tuple),
    TYPE_MAP: (dict,),
}

_ZERO_VALUES = {
    TYPE_STRING: "",
    TYPE_INT: 0,
    TYPE_BOOL: False,
}


@dataclass
class Schema:
    """Describes a single resource attribute.

    Args:
        type: One of the TYPE_* constants
        required: Attribute must be present in configuration
        optional: Attribute may be present in configuration
        computed: Attribute value is supplied by Azure
        force_new: Changing the attribute requires re-creating the resource
        default: Value used when configuration omits the attribute
        validate_func: Returns ``(warnings, errors)`` for a configured value
        diff_suppress_func: Returns True when old and new values are equivalent
        max_items: Upper bound on list length (0 means unbounded)
        elem: Nested ``Resource`` describing each block of a list attribute
    """

    type: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    validate_func: Optional[ValidateFunc] = None
    diff_suppress_func: Optional[DiffSuppressFunc] = None
    max_items: int = 0
    elem: Optional["Resource"] = None

    def zero_value(self) -> Any:
        if self.type == TYPE_LIST:
            return []
        if self.type == TYPE_MAP:
            return {}
        return _ZERO_VALUES.get(self.type)

    def is_computed_only(self) -> bool:
        return self.computed and not (self.optional or self.required)

    def to_dict(self) -> Dict[str, Any]:
        """Describe the attribute as a JSON-serializable dictionary."""
        out: Dict[str, Any] = {"type": self.type}
        for flag in ("required", "optional", "computed", "force_new"):
            if getattr(self, flag):
                out[flag] = True
        if self.default is not None:
            out["default"] = self.default
        if self.max_items:
            out["max_items"] = self.max_items
        if self.elem is not None:
            out["elem"] = self.elem.schema_dict()
        return out


@dataclass
class Resource:
    """A resource or data source definition."""

    schema: Dict[str, Schema]
    create: Optional[Callable] = None
    read: Optional[Callable] = None
    update: Optional[Callable] = None
    delete: Optional[Callable] = None
    importable: bool = False

    def schema_dict(self) -> Dict[str, Any]:
        return {name: s.to_dict() for name, s in sorted(self.schema.items())}


class ResourceData:
    """Configuration and state of a single resource instance.

    ``get`` looks a key up in values written with ``set`` during the current
    operation, then in configuration, then in prior state, then falls back
    to the schema default or the type's zero value.
    """

    def __init__(
        self,
        schema: Dict[str, Schema],
        config: Optional[Dict[str, Any]] = None,
        state: Optional[Dict[str, Any]] = None,
        resource_id: str = "",
        is_new: bool = False,
    ):
        self.schema = schema
        self._config = dict(config or {})
        self._state = dict(state or {})
        self._set: Dict[str, Any] = {}
        self._id = resource_id or ""
        self._is_new = is_new

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: Optional[str]) -> None:
        self._id = value or ""

    def is_new_resource(self) -> bool:
        return self._is_new

    def get(self, key: str) -> Any:
        if key in self._set:
            return self._set[key]
        if key in self._config and self._config[key] is not None:
            return self._config[key]
        if key in self._state and self._state[key] is not None:
            return self._state[key]
        attr = self.schema.get(key)
        if attr is None:
            raise KeyError(f"Unknown attribute {key!r}")
        if attr.default is not None:
            return attr.default
        return attr.zero_value()

    def set(self, key: str, value: Any) -> None:
        attr = self.schema.get(key)
        if attr is None:
            raise KeyError(f"Unknown attribute {key!r}")
        if value is None:
            value = attr.zero_value()
        elif attr.type == TYPE_MAP:
            value = dict(value)
        elif attr.type == TYPE_LIST:
            value = list(value)
        self._set[key] = value

    def has_change(self, key: str) -> bool:
        old = self._state.get(key)
        new = self.get(key)
        attr = self.schema.get(key)
        if attr is not None and attr.diff_suppress_func is not None:
            if old is not None and attr.diff_suppress_func(key, old, new):
                return False
        return old != new

    def state(self) -> Dict[str, Any]:
        """Return the attributes of the instance as a plain dictionary."""
        attributes = {key: self.get(key) for key in self.schema}
        attributes["id"] = self._id
        return attributes


def _type_matches(attr: Schema, value: Any) -> bool:
    if attr.type == TYPE_INT and isinstance(value, bool):
        return False
    return isinstance(value, _PYTHON_TYPES[attr.type])


def _validate_block(
    schema: Dict[str, Schema], config: Dict[str, Any], prefix: str
) -> Tuple[Dict[str, Any], List[str]]:
    errors: List[str] = []
    normalized: Dict[str, Any] = {}

    for key in sorted(config):
        if key not in schema:
            errors.append(f"{prefix}{key}: unsupported argument")

    for key, attr in schema.items():
        path = f"{prefix}{key}"
        value = config.get(key)

        if value is None:
            if attr.required:
                errors.append(f"{path}: required field is not set")
            elif attr.default is not None:
                normalized[key] = attr.default
            continue

        if attr.is_computed_only():
            errors.append(f"{path}: computed attributes cannot be set")
            continue

        if attr.type == TYPE_LIST and isinstance(value, dict) and attr.elem:
            # a single nested block
            value = [value]

        if not _type_matches(attr, value):
            errors.append(f"{path}: expected type {attr.type}, got {type(value).__name__}")
            continue

        if attr.type == TYPE_LIST:
            if attr.max_items and len(value) > attr.max_items:
                errors.append(
                    f"{path}: attribute supports {attr.max_items} item maximum, "
                    f"config has {len(value)} declared"
                )
            if attr.elem is not None:
                items = []
                for i, item in enumerate(value):
                    if not isinstance(item, dict):
                        errors.append(f"{path}.{i}: expected a block")
                        continue
                    block, block_errors = _validate_block(
                        attr.elem.schema, item, f"{path}.{i}."
                    )
                    items.append(block)
                    errors.extend(block_errors)
                value = items

        if attr.validate_func is not None:
            _, validation_errors = attr.validate_func(value, path)
            errors.extend(str(e) for e in validation_errors)

        normalized[key] = value

    return normalized, errors


def validate_config(
    resource: Resource, config: Dict[str, Any]
) -> Tuple[Dict[str, Any], List[str]]:
    """Validate configuration against a resource schema.

    Args:
        resource: Resource definition to validate against
        config: Raw configuration values

    Returns:
        Tuple of (configuration with defaults applied, list of error messages)
    """
    return _validate_block(resource.schema, config or {}, "")


def requires_replacement(
    resource: Resource, old_state: Dict[str, Any], new_config: Dict[str, Any]
) -> List[str]:
    """List force-new attributes whose configured value differs from state."""
    changed = []
    for key, attr in sorted(resource.schema.items()):
        if not attr.force_new or key not in old_state or key not in new_config:
            continue
        old, new = old_state[key], new_config[key]
        if old == new:
            continue
        if attr.diff_suppress_func is not None and attr.diff_suppress_func(key, old, new):
            continue
        changed.append(key)
    return changed
