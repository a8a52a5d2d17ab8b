"""Typed binding of the arguments given to a ``sqlpage.`` function."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

Converter = Callable[[str], Any]

_MISSING = object()


def as_sql(value: Optional[str]) -> str:
    """Render an argument value as a SQL literal, for error messages."""
    if value is None:
        return "NULL"
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def _type_name(converter: Converter) -> str:
    return getattr(converter, "__name__", None) or repr(converter)


def parse_param(value: Optional[str], converter: Converter) -> Any:
    """Convert a non-NULL argument with ``converter``, with a readable error on failure."""
    if value is None:
        raise ValueError("Unexpected NULL value")
    try:
        return converter(value)
    except (ValueError, TypeError) as exc:
        quoted = json.dumps(value, ensure_ascii=False)
        raise ValueError(f"Unable to parse {quoted} as {_type_name(converter)}") from exc


class ParamKind(Enum):
    """How a parameter takes its value from the list of arguments."""

    REQUIRED = "required"
    """One argument, which must not be NULL."""
    OPTIONAL = "optional"
    """One argument, NULL (or missing) gives None."""
    LIST = "list"
    """All remaining arguments, with NULLs left out."""
    OPTIONAL_LIST = "optional_list"
    """All remaining arguments, NULLs kept as None."""
    PARSED = "parsed"
    """One non-NULL argument, converted with the parameter's converter."""


@dataclass(frozen=True)
class FunctionParam:
    """A named parameter of a ``sqlpage.`` function."""

    name: str
    kind: ParamKind = ParamKind.REQUIRED
    converter: Optional[Converter] = None

    def __post_init__(self) -> None:
        if self.kind is ParamKind.PARSED and self.converter is None:
            raise ValueError(f"Parameter {self.name} needs a converter to be parsed")

    def _take(self, args: Iterator[Optional[str]]) -> Any:
        if self.kind is ParamKind.OPTIONAL:
            return next(args, None)
        if self.kind is ParamKind.REQUIRED:
            value = next(args, None)
            if value is None:
                raise ValueError("Unexpected NULL value")
            return value
        if self.kind is ParamKind.LIST:
            return [arg for arg in args if arg is not None]
        if self.kind is ParamKind.OPTIONAL_LIST:
            return list(args)
        assert self.converter is not None
        return parse_param(next(args, None), self.converter)


@dataclass(frozen=True)
class FunctionSignature:
    """The name and parameters of a ``sqlpage.`` function."""

    name: str
    params: Sequence[FunctionParam] = ()

    def __str__(self) -> str:
        return f"sqlpage.{self.name}"

    def describe(self) -> str:
        """The function name followed by its parameter names, as shown in help messages."""
        names = ", ".join(param.name for param in self.params)
        return f"{self}({names})"

    def bind(self, args: Iterable[Optional[str]]) -> dict[str, Any]:
        """Assign evaluated arguments to parameters, in order.

        Raises ValueError when a value does not fit its parameter or when
        arguments are left over.
        """
        remaining = iter(args)
        bound: dict[str, Any] = {}
        for param in self.params:
            try:
                bound[param.name] = param._take(remaining)
            except ValueError as exc:
                raise ValueError(f"Invalid value for parameter {param.name}") from exc
        extra = next(remaining, _MISSING)
        if extra is not _MISSING:
            raise ValueError(f"Too many arguments. Remove extra argument {as_sql(extra)}")
        return bound