"""
Field enumeration, presence rules and structural (de)serialization.

**Conceptual**: The store never owns the shape of the caller's record type.
Everything it needs to know about a record (which fields exist, in which
order, which are optional, what their values are) is derived here, fresh
on every call, as a list of FieldDescriptor values.

**Functionally**:
  - describe_fields(): enumerate a record instance in declaration order.
  - is_missing(): the "no value" rule shared by is_valid() and validate().
  - build_instance(): turn a decoded JSON object into an instance of T,
    coercing values to the declared type hints.
  - to_plain(): turn an instance back into JSON-ready dicts and lists.

Dataclasses are the primary record form (dataclasses.fields gives the
declaration order and per-field metadata). Plain classes are also accepted:
their fields are the annotated class attributes plus the public instance
attributes set in __init__.

**Known ambiguity**: numeric zero counts as "missing", so a legitimate 0 in
a required numeric field fails validation. Mark such fields optional.
"""

import dataclasses
import numbers
import types
import typing
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional

from src.settings_store.errors import SettingsParseError


# Metadata key used on dataclass fields to exempt them from validation
OPTIONAL_METADATA_KEY = "optional"

# Declared types treated as "numeric" for the zero-means-missing rule
NUMERIC_TYPES = (int, float, Decimal)


def optional(default: Any = dataclasses.MISSING, **kwargs: Any) -> Any:
    """
    Declare a dataclass field exempt from validation.

    Wraps dataclasses.field() and adds the optional marker to its metadata.
    Any extra keyword (default_factory, repr, ...) is passed through.

    Usage example:
        >>> @dataclass
        ... class Configuration:
        ...     option1: str = ""
        ...     option2: str = optional(default="")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[OPTIONAL_METADATA_KEY] = True
    return dataclasses.field(default=default, metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldDescriptor:
    """
    One field of a record instance, as seen at validation/report time.

    Attributes:
        name: Field name as declared on the record type.
        value: Current value on the instance.
        optional: True if the field is exempt from the presence rule.
        type_hint: Declared type, or None when the type declares none.
    """
    name: str
    value: Any
    optional: bool = False
    type_hint: Any = None


def _type_hints(cls: type) -> dict:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        # Unresolvable forward references; fall back to the raw annotations
        return dict(getattr(cls, "__annotations__", {}))


def _unwrap_optional(hint: Any) -> Any:
    """Reduce Optional[X] / X | None to X; leave other hints alone."""
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _plain_field_names(cls: type, instance: Any) -> List[str]:
    """
    Public field names of a plain (non-dataclass) record.

    Annotated class attributes come first, in declaration order, followed
    by instance attributes set in __init__ that carry no annotation.
    ClassVar annotations and names starting with "_" are skipped.
    """
    names = [
        name for name, hint in _type_hints(cls).items()
        if not name.startswith("_")
        and typing.ClassVar not in (hint, typing.get_origin(hint))
    ]
    for name in vars(instance):
        if not name.startswith("_") and name not in names:
            names.append(name)
    return names


def describe_fields(
    instance: Any,
    optional_names: Iterable[str] = (),
) -> List[FieldDescriptor]:
    """
    Enumerate the fields of a record instance in declaration order.

    Args:
        instance: A dataclass instance or a plain object. None yields an
                  empty list.
        optional_names: Extra field names to treat as optional, on top of
                        fields declared with optional().

    Returns:
        List of FieldDescriptor, one per field.
    """
    if instance is None:
        return []

    extra_optional = set(optional_names)
    hints = _type_hints(type(instance))

    if dataclasses.is_dataclass(instance):
        return [
            FieldDescriptor(
                name=f.name,
                value=getattr(instance, f.name),
                optional=(
                    bool(f.metadata.get(OPTIONAL_METADATA_KEY, False))
                    or f.name in extra_optional
                ),
                type_hint=hints.get(f.name),
            )
            for f in dataclasses.fields(instance)
        ]

    return [
        FieldDescriptor(
            name=name,
            value=getattr(instance, name, None),
            optional=name in extra_optional,
            type_hint=hints.get(name),
        )
        for name in _plain_field_names(type(instance), instance)
    ]


def is_missing(value: Any, type_hint: Any = None) -> bool:
    """
    Decide whether a field value counts as "not present".

    **Rule**:
      - Text: None, empty, or whitespace only.
      - Numbers (int, float, Decimal and other numbers.Number types): zero.
      - None: missing when the field is declared as text or numeric, or
        declares no type at all. None in a nested/collection field is
        treated as present.
      - Booleans are never missing.

    Never raises for primitive values.
    """
    if value is None:
        hint = _unwrap_optional(type_hint)
        if not isinstance(hint, type):
            # Unknown or unresolved hints count as scalars; list[X] etc. do not
            return typing.get_origin(hint) is None
        return issubclass(hint, (str,) + NUMERIC_TYPES) and not issubclass(hint, bool)

    if isinstance(value, bool):
        return False

    if isinstance(value, str):
        return not value.strip()

    if isinstance(value, numbers.Number):
        return value == 0

    return False


def find_missing(fields: Iterable[FieldDescriptor]) -> Optional[FieldDescriptor]:
    """Return the first non-optional field with no value, or None."""
    for descriptor in fields:
        if descriptor.optional:
            continue
        if is_missing(descriptor.value, descriptor.type_hint):
            return descriptor
    return None


def _lookup(data: Mapping[str, Any], name: str) -> tuple:
    """Find a field's key in decoded data: exact match, then case-insensitive."""
    if name in data:
        return True, data[name]
    folded = name.casefold()
    for key, value in data.items():
        if isinstance(key, str) and key.casefold() == folded:
            return True, value
    return False, None


def _coerce(value: Any, hint: Any, context: str) -> Any:
    if value is None or hint is None or hint is Any:
        return value

    hint = _unwrap_optional(hint)
    origin = typing.get_origin(hint)

    if origin is list:
        (item_hint,) = typing.get_args(hint) or (None,)
        if not isinstance(value, list):
            raise SettingsParseError(f"{context}: expected a list, got {value!r}")
        return [_coerce(item, item_hint, f"{context}[{i}]") for i, item in enumerate(value)]

    if origin is dict:
        args = typing.get_args(hint)
        value_hint = args[1] if len(args) == 2 else None
        if not isinstance(value, Mapping):
            raise SettingsParseError(f"{context}: expected an object, got {value!r}")
        return {k: _coerce(v, value_hint, f"{context}.{k}") for k, v in value.items()}

    if not isinstance(hint, type):
        return value

    if dataclasses.is_dataclass(hint) or (
        isinstance(value, Mapping) and hint.__module__ != "builtins"
        and not issubclass(hint, NUMERIC_TYPES)
    ):
        if not isinstance(value, Mapping):
            raise SettingsParseError(
                f"{context}: expected an object for {hint.__name__}, got {value!r}"
            )
        return build_instance(hint, value, context=context)

    if hint is bool:
        if isinstance(value, bool):
            return value
        raise SettingsParseError(f"{context}: expected true/false, got {value!r}")

    if hint is str:
        if isinstance(value, (Mapping, list)):
            raise SettingsParseError(f"{context}: expected text, got {value!r}")
        return value if isinstance(value, str) else str(value)

    if hint is Decimal:
        try:
            return Decimal(str(value))
        except InvalidOperation as e:
            raise SettingsParseError(f"{context}: expected a decimal, got {value!r}") from e

    if hint is int:
        if isinstance(value, bool):
            raise SettingsParseError(f"{context}: expected an integer, got {value!r}")
        if isinstance(value, float):
            if not value.is_integer():
                raise SettingsParseError(f"{context}: expected an integer, got {value!r}")
            return int(value)
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise SettingsParseError(f"{context}: expected an integer, got {value!r}") from e

    if hint is float:
        if isinstance(value, bool):
            raise SettingsParseError(f"{context}: expected a number, got {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SettingsParseError(f"{context}: expected a number, got {value!r}") from e

    return value


def build_instance(cls: type, data: Any, context: Optional[str] = None) -> Any:
    """
    Build an instance of ``cls`` from a decoded JSON object.

    **Functionally**:
      - Keys are matched to field names exactly, then case-insensitively.
      - Values are coerced to the declared type hints (nested dataclasses,
        list[X], dict[str, X], Optional[X], Decimal, int, float, str, bool).
      - Unknown keys are ignored.
      - Dataclass fields absent from the data take their default, or None
        when they have none.
      - Plain classes are created with cls(). Their declared fields
        (annotated class attributes and attributes set in __init__) are
        assigned from the data with the same key matching; other keys are
        ignored.

    Args:
        cls: The record type to build.
        data: Decoded JSON value. None is passed through as None.
        context: Prefix for error messages (usually the file path).

    Returns:
        Instance of cls, or None if data is None.

    Raises:
        SettingsParseError: If data is not an object or a value cannot be
                            coerced to its field's declared type.
    """
    ctx = context or cls.__name__
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise SettingsParseError(
            f"{ctx}: expected an object at the root, got {type(data).__name__}"
        )

    hints = _type_hints(cls)

    if dataclasses.is_dataclass(cls):
        kwargs = {}
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            found, raw = _lookup(data, f.name)
            if found:
                kwargs[f.name] = _coerce(raw, hints.get(f.name), f"{ctx}.{f.name}")
            elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                kwargs[f.name] = None
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise SettingsParseError(f"{ctx}: cannot build {cls.__name__}: {e}") from e

    try:
        instance = cls()
    except TypeError as e:
        raise SettingsParseError(
            f"{ctx}: {cls.__name__} must be a dataclass or accept no arguments"
        ) from e
    for name in _plain_field_names(cls, instance):
        found, raw = _lookup(data, name)
        if found:
            setattr(instance, name, _coerce(raw, hints.get(name), f"{ctx}.{name}"))
    return instance


def to_plain(obj: Any) -> Any:
    """
    Convert a record instance into JSON-ready dicts and lists.

    Dataclasses keep their declaration order; plain objects contribute their
    annotated class attributes and public instance attributes. Decimal
    values are left as Decimal for the encoder to handle.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_plain(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Mapping):
        return {str(k): to_plain(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_plain(v) for v in obj]
    if isinstance(obj, (str, int, float, bool, Decimal)) or obj is None:
        return obj
    if hasattr(obj, "__dict__"):
        return {
            name: to_plain(getattr(obj, name, None))
            for name in _plain_field_names(type(obj), obj)
        }
    return obj
