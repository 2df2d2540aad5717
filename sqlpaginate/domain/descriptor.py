"""
Record type introspection.

A paginator is driven by a pydantic model describing one row of the target
table. Every field becomes a column; a per-field tag string controls how it is
mapped::

    class Employee(BaseModel):
        id: Annotated[int, Tag("id;filter")]
        name: Annotated[str, Tag("filter")]
        language: Annotated[str, Tag("filter;col=programming_language;param=lg")]
        salary: Optional[float] = None

Directives are separated by ``;``:

- ``id``: the unique ordering key, exactly one per record type.
- ``filter``: the field can be filtered from the request.
- ``col=<name>``: explicit column name (defaults to the snake_case field name).
- ``param=<name>``: request parameter name, when it differs from the column.

The tag can also be given as ``Field(json_schema_extra={"paginate": "..."})``.
Unknown or malformed directives are ignored.
"""

from __future__ import annotations

import re
import types
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from sqlpaginate.domain.nullables import SLOT_TYPES, zero_value
from sqlpaginate.errors import SchemaValidationError

TAG_KEY = "paginate"
TAG_SEPARATOR = ";"

_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_RE = re.compile(r"([a-z0-9])([A-Z])")


@dataclass(frozen=True)
class Tag:
    """Annotated marker carrying a field's paginate directives."""

    spec: str


def to_snake_case(name: str) -> str:
    """
    Convert a camelCase or PascalCase identifier to snake_case.

    ``LastName`` becomes ``last_name``, ``HTTPServer`` becomes ``http_server``
    and an all-uppercase name such as ``ID`` collapses to ``id``.
    """
    if name.isupper():
        return name.lower()
    name = _ACRONYM_RE.sub(r"\1_\2", name)
    name = _CAMEL_RE.sub(r"\1_\2", name)
    return name.lower()


@dataclass(frozen=True)
class FieldSpec:
    """How one record field maps to a table column."""

    name: str
    column: str
    kind: type
    nullable: bool
    is_id: bool = False
    filterable: bool = False
    param: str = ""

    @property
    def request_name(self) -> str:
        """Name under which the field is looked up in the request."""
        return self.param or self.column

    @property
    def zero(self) -> Any:
        return zero_value(self.kind, self.nullable)


@dataclass(frozen=True)
class RecordDescriptor:
    """Column metadata of a record type, built once and never mutated."""

    model: Type[BaseModel]
    table: str
    fields: Tuple[FieldSpec, ...]
    id_column: str

    @property
    def columns(self) -> List[str]:
        return [f.column for f in self.fields]

    @property
    def filterable_columns(self) -> List[str]:
        return [f.column for f in self.fields if f.filterable]

    @property
    def mappers(self) -> Dict[str, str]:
        """Columns whose request parameter has a custom name, column -> param."""
        return {f.column: f.param for f in self.fields if f.param}

    def zero_values(self) -> Dict[str, Any]:
        return {f.name: f.zero for f in self.fields}

    def new_record(self) -> BaseModel:
        """A zero-valued instance of the record type, ready for scanning."""
        return self.model.model_construct(**self.zero_values())

    def is_zero(self, record: BaseModel) -> bool:
        return all(getattr(record, f.name, None) == f.zero for f in self.fields)


def _parse_tag(spec: str) -> Dict[str, Any]:
    directives: Dict[str, Any] = {}
    for raw in spec.split(TAG_SEPARATOR):
        directive = raw.strip()
        if directive in ("id", "filter"):
            directives[directive] = True
            continue
        key, sep, value = directive.partition("=")
        key, value = key.strip(), value.strip()
        if sep and key in ("col", "param") and value:
            directives[key] = value
    return directives


def _field_tag(info: FieldInfo) -> str:
    for item in info.metadata:
        if isinstance(item, Tag):
            return item.spec
    extra = info.json_schema_extra
    if isinstance(extra, dict):
        spec = extra.get(TAG_KEY)
        if isinstance(spec, str):
            return spec
    return ""


def _field_kind(name: str, annotation: Any) -> Tuple[type, bool]:
    nullable = False
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) != 1 or len(args) == len(get_args(annotation)):
            raise SchemaValidationError(f"field {name!r} has an unsupported type {annotation!r}")
        annotation, nullable = args[0], True
    if annotation not in SLOT_TYPES:
        raise SchemaValidationError(f"field {name!r} has an unsupported type {annotation!r}")
    return annotation, nullable


def _record_model(record: Any) -> Type[BaseModel]:
    if isinstance(record, type) and issubclass(record, BaseModel):
        return record
    if isinstance(record, BaseModel):
        return type(record)
    raise SchemaValidationError(
        f"table should be a pydantic model class or instance; got {type(record).__name__}"
    )


def describe(record: Any, table_name: Optional[str] = None) -> RecordDescriptor:
    """
    Build the RecordDescriptor of a record type.

    Parameters
    ----------
    record : type[BaseModel] or BaseModel
        The record class, or a zero-valued instance of it.
    table_name : str, optional
        Table name; defaults to the snake_case of the class name.

    Raises
    ------
    SchemaValidationError
        On a missing or duplicated ``id`` tag, an unsupported field type, or
        an instance that is not the zero value of its type.
    """
    model = _record_model(record)

    fields: List[FieldSpec] = []
    for name, info in model.model_fields.items():
        kind, nullable = _field_kind(name, info.annotation)
        tag = _parse_tag(_field_tag(info))
        fields.append(
            FieldSpec(
                name=name,
                column=tag.get("col") or to_snake_case(name),
                kind=kind,
                nullable=nullable,
                is_id=tag.get("id", False),
                filterable=tag.get("filter", False),
                param=tag.get("param", ""),
            )
        )

    ids = [f for f in fields if f.is_id]
    if not ids:
        raise SchemaValidationError(f"{model.__name__} has no field tagged as id")
    if len(ids) > 1:
        names = ", ".join(f.name for f in ids)
        raise SchemaValidationError(f"{model.__name__} has more than one field tagged as id ({names})")

    descriptor = RecordDescriptor(
        model=model,
        table=table_name or to_snake_case(model.__name__),
        fields=tuple(fields),
        id_column=ids[0].column,
    )

    if isinstance(record, BaseModel) and not descriptor.is_zero(record):
        raise SchemaValidationError(f"{model.__name__} instance should be zero valued")

    return descriptor


__all__ = [
    "Tag",
    "TAG_KEY",
    "FieldSpec",
    "RecordDescriptor",
    "describe",
    "to_snake_case",
]
