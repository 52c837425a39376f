"""Writing answers into targets: objects, mappings, lists and references."""

from __future__ import annotations

import dataclasses
import re
import types
import typing
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Iterable

#: Field metadata key naming the question a field answers.
TAG = "survey"
#: Field metadata key marking a nested dataclass whose fields are promoted.
EMBED = "embed"


@dataclass
class OptionAnswer:
    """The choice made in a select prompt: its text and its position."""

    value: str = ""
    index: int = 0


def option_answer_list(incoming: Iterable[str]) -> list[OptionAnswer]:
    return [OptionAnswer(value, index) for index, value in enumerate(incoming)]


@dataclass
class Ref:
    """A mutable cell for answers of immutable or declared types."""

    value: Any = None
    kind: Any = None


class FieldNotMatchError(LookupError):
    """No field of the target matches a question name."""

    def __init__(self, question_name: str):
        super().__init__(f"could not find field matching {question_name}")
        self.question_name = question_name

    def matches(self, other: BaseException) -> bool:
        if not isinstance(other, FieldNotMatchError):
            return False
        return not other.question_name or not self.question_name or (
            other.question_name == self.question_name
        )


def is_field_not_match(err: BaseException | None) -> str | None:
    """Return the unmatched question name if err is a FieldNotMatchError."""
    if isinstance(err, FieldNotMatchError):
        return err.question_name
    return None


_IMMUTABLE = (bool, int, float, complex, str, bytes, tuple, frozenset, timedelta, type(None))


def _is_settable(obj: Any) -> bool:
    return not isinstance(obj, type) and callable(getattr(obj, "write_answer", None))


def _fields(obj: Any):
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if f.metadata.get(EMBED) and dataclasses.is_dataclass(value):
                yield from _fields(value)
                continue
            yield obj, f.name, f.metadata.get(TAG, "")
    else:
        for name in vars(obj):
            if not name.startswith("_"):
                yield obj, name, ""


def find_field(target: Any, name: str) -> tuple[Any, str]:
    """Return (owner, attribute name) of the field a question name refers to."""
    try:
        found = list(_fields(target))
    except TypeError:
        raise FieldNotMatchError(name) from None
    for owner, attr, tag in found:
        if tag and tag == name:
            return owner, attr
    for owner, attr, _ in found:
        if attr.casefold() == name.casefold():
            return owner, attr
    raise FieldNotMatchError(name)


_BOOLS = {
    "1": True, "t": True, "T": True, "TRUE": True, "true": True, "True": True,
    "0": False, "f": False, "F": False, "FALSE": False, "false": False, "False": False,
}
_UNITS = {
    "ns": 1e-3, "us": 1.0, "µs": 1.0, "μs": 1.0,
    "ms": 1e3, "s": 1e6, "m": 60e6, "h": 3600e6,
}
_DURATION_PART = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"


def _parse_bool(text: str) -> bool:
    try:
        return _BOOLS[text]
    except KeyError:
        raise ValueError(f"invalid syntax for bool: {text!r}") from None


def _parse_int(text: str) -> int:
    if not re.fullmatch(r"[+-]?[0-9]+", text):
        raise ValueError(f"invalid syntax for int: {text!r}")
    return int(text)


def _parse_float(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid syntax for float: {text!r}")
    return float(text)


def _parse_duration(text: str) -> timedelta:
    sign, body = (-1, text[1:]) if text[:1] == "-" else (1, text.lstrip("+"))
    if body == "0":
        return timedelta()
    if not body or not re.fullmatch(f"(?:{_DURATION_PART})+", body):
        raise ValueError(f"invalid duration: {text!r}")
    micros = sum(float(n) * _UNITS[u] for n, u in re.findall(_DURATION_PART, body))
    return timedelta(microseconds=sign * micros)


_PARSERS = {bool: _parse_bool, int: _parse_int, float: _parse_float, timedelta: _parse_duration}


# Annotations written as text are resolved against this fixed vocabulary.
_SIMPLE_NAMES: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": bool,
    "bytes": bytes,
    "timedelta": timedelta,
    "OptionAnswer": OptionAnswer,
    "Any": Any,
    "object": object,
    "None": type(None),
    "NoneType": type(None),
}
_CONTAINERS: dict[str, type] = {
    "list": list,
    "List": list,
    "tuple": tuple,
    "Tuple": tuple,
    "dict": dict,
    "Dict": dict,
}
_ANNOTATION_PART = re.compile(r"\s*(\.\.\.|[A-Za-z_][\w.]*|[\[\],|])")


def _split_annotation(text: str) -> list[str]:
    text = text.strip()
    parts = []
    pos = 0
    while pos < len(text):
        match = _ANNOTATION_PART.match(text, pos)
        if match is None:
            raise ValueError(f"unsupported annotation: {text!r}")
        parts.append(match.group(1))
        pos = match.end()
    return parts


def _union(items: list[Any]) -> Any:
    present = [item for item in items if item is not type(None)]
    return present[0] if present else type(None)


class _AnnotationParser:
    """Resolves simple textual annotations such as ``list[int] | None``."""

    def __init__(self, text: str):
        self.parts = _split_annotation(text)
        self.pos = 0

    def _peek(self) -> str | None:
        return self.parts[self.pos] if self.pos < len(self.parts) else None

    def _next(self) -> str:
        part = self._peek()
        if part is None:
            raise ValueError("unexpected end of annotation")
        self.pos += 1
        return part

    def parse(self) -> Any:
        result = self._union()
        if self._peek() is not None:
            raise ValueError("trailing text in annotation")
        return result

    def _union(self) -> Any:
        items = [self._primary()]
        while self._peek() == "|":
            self._next()
            items.append(self._primary())
        return _union(items)

    def _primary(self) -> Any:
        part = self._next()
        if part == "...":
            return Ellipsis
        name = part.rsplit(".", 1)[-1]
        if self._peek() == "[":
            self._next()
            args = [self._union()]
            while self._peek() == ",":
                self._next()
                args.append(self._union())
            if self._next() != "]":
                raise ValueError("unbalanced brackets in annotation")
            return self._subscript(name, args)
        if name in _SIMPLE_NAMES:
            return _SIMPLE_NAMES[name]
        if name in _CONTAINERS:
            return _CONTAINERS[name]
        raise ValueError(f"unknown type name {name!r}")

    @staticmethod
    def _subscript(name: str, args: list[Any]) -> Any:
        if name in ("Optional", "Union"):
            return _union(args)
        origin = _CONTAINERS.get(name)
        if origin is list:
            return list[args[0]]
        if origin is dict and len(args) == 2:
            return dict[args[0], args[1]]
        if origin is tuple:
            return tuple[tuple(args)]
        raise ValueError(f"unsupported generic {name!r}")


def _resolve_annotation(annotation: Any) -> Any:
    if not isinstance(annotation, str):
        return annotation
    try:
        return _AnnotationParser(annotation).parse()
    except ValueError:
        return None


def _unwrap_optional(kind: Any) -> Any:
    if typing.get_origin(kind) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(kind) if a is not type(None)]
        return args[0] if args else Any
    return kind


def _kind_name(kind: Any) -> str:
    return getattr(kind, "__name__", str(kind))


def _convert(kind: Any, current: Any, value: Any) -> Any:
    kind = _unwrap_optional(kind)
    origin = typing.get_origin(kind) or kind
    if origin is Any or origin is object:
        return value

    if isinstance(value, str) and origin is not str:
        parser = _PARSERS.get(origin)
        if parser is None:
            raise TypeError(f"Unable to convert from string to type {_kind_name(origin)}")
        return parser(value)

    if isinstance(value, OptionAnswer):
        if origin is str:
            return value.value
        if origin is int:
            return value.index
        if origin is OptionAnswer:
            return OptionAnswer(value.value, value.index)
        raise TypeError(f"Unable to convert from OptionAnswer to type {_kind_name(origin)}")

    if isinstance(value, (list, tuple)) and origin in (list, tuple):
        args = typing.get_args(kind)
        if origin is list:
            element = args[0] if args else Any
            existing = list(current) if isinstance(current, (list, tuple)) else []
            return existing + [_convert(element, None, item) for item in value]
        result = list(current) if isinstance(current, (list, tuple)) else []
        variadic = len(args) == 2 and args[1] is Ellipsis
        for i, item in enumerate(value):
            if args and not variadic and i >= len(args):
                raise IndexError(f"index {i} out of range for {_kind_name(origin)}")
            element = args[0] if variadic else (args[i] if args else Any)
            converted = _convert(element, None, item)
            if i < len(result):
                result[i] = converted
            else:
                result.append(converted)
        return tuple(result)

    if isinstance(origin, type) and not isinstance(value, origin):
        raise TypeError(f"cannot assign {type(value).__name__} to {_kind_name(origin)}")
    return value


def _write_map(mapping: dict, name: str, value: Any, kind: Any) -> None:
    args = typing.get_args(kind)
    key_kind, value_kind = args if len(args) == 2 else (str, Any)
    if key_kind is not str or any(not isinstance(k, str) for k in mapping):
        raise TypeError("answer maps key must be of type string")
    if isinstance(value, OptionAnswer):
        if value_kind is str:
            mapping[name] = value.value
            return
        if value_kind is int:
            mapping[name] = value.index
            return
    if value_kind is not Any and value_kind is not object:
        raise TypeError("answer maps must be of type dict[str, Any]")
    mapping[name] = value


def _annotations(cls: type) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        merged.update(vars(klass).get("__annotations__", {}))
    return merged


def _field_kind(owner: Any, attr: str, current: Any) -> Any:
    annotation = _annotations(type(owner)).get(attr)
    if annotation is not None:
        resolved = _resolve_annotation(annotation)
        if resolved is not None:
            return resolved
    return Any if current is None else type(current)


def _write_ref(ref: Ref, name: str, value: Any) -> None:
    inner = ref.value
    if _is_settable(inner):
        inner.write_answer(name, value)
        return
    kind = ref.kind if ref.kind is not None else (Any if inner is None else type(inner))
    origin = typing.get_origin(kind) or kind
    if origin is dict:
        if inner is None:
            ref.value = inner = {}
        _write_map(inner, name, value, kind)
        return
    if hasattr(inner, "__dict__") and not isinstance(inner, (OptionAnswer, type)):
        write_answer(inner, name, value)
        return
    ref.value = _convert(kind, inner, value)


def write_answer(target: Any, name: str, value: Any) -> None:
    """Store an answer in the target, converting strings to the field's type."""
    if _is_settable(target):
        target.write_answer(name, value)
        return
    if isinstance(target, Ref):
        _write_ref(target, name, value)
        return
    if isinstance(target, OptionAnswer):
        if not isinstance(value, OptionAnswer):
            raise TypeError(f"cannot assign {type(value).__name__} to OptionAnswer")
        target.value, target.index = value.value, value.index
        return
    if isinstance(target, dict):
        _write_map(target, name, value, Any)
        return
    if isinstance(target, list):
        target[:] = _convert(list, target, value)
        return
    if isinstance(target, _IMMUTABLE):
        raise TypeError("you must pass a mutable target (object, dict, list or Ref) to write to")

    owner, attr = find_field(target, name)
    current = getattr(owner, attr)
    if _is_settable(current):
        current.write_answer(name, value)
        return
    setattr(owner, attr, _convert(_field_kind(owner, attr, current), current, value))