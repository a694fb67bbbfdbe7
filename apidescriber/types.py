# apidescriber/types.py
"""Serializer type descriptors.

Property metadata declares types the way serializer configuration does:
``"string"``, ``"array<Point>"``, ``"array<string, integer>"``,
``"DateTime<'Y-m-d'>"``.  :func:`parse_type` turns such a string into a
:class:`TypeDescriptor` tree; quoted parameters stay plain strings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Union

__all__ = ["TypeDescriptor", "TypeParam", "parse_type"]

_TOKEN_RE = re.compile(r"\s*(?:(?P<quoted>'[^']*'|\"[^\"]*\")|(?P<name>[\w\\.:]+)|(?P<punct>[<>,]))")


@dataclass(frozen=True)
class TypeDescriptor:
    """A named type with optional parameters."""

    name: str
    params: tuple["TypeParam", ...] = field(default_factory=tuple)

    def param(self, index: int) -> "TypeDescriptor | None":
        """The ``index``-th parameter when it is itself a type, else ``None``."""
        if index < len(self.params) and isinstance(self.params[index], TypeDescriptor):
            return self.params[index]  # type: ignore[return-value]
        return None

    def __str__(self) -> str:
        if not self.params:
            return self.name
        rendered = ", ".join(
            str(p) if isinstance(p, TypeDescriptor) else f"'{p}'" for p in self.params
        )
        return f"{self.name}<{rendered}>"


TypeParam = Union[TypeDescriptor, str]


def parse_type(text: str) -> TypeDescriptor:
    """Parse a serializer type string.

    Raises
    ------
    ValueError
        If ``text`` is not a well-formed type expression.
    """
    tokens = _tokenize(text)
    descriptor, position = _parse(tokens, 0, text)
    if position != len(tokens):
        raise ValueError(f"Unexpected {tokens[position][1]!r} in type {text!r}.")
    return descriptor


def _tokenize(text: str) -> list[tuple[str, str]]:
    tokens: list[tuple[str, str]] = []
    position = 0
    stripped = text.rstrip()
    while position < len(stripped):
        match = _TOKEN_RE.match(stripped, position)
        if match is None:
            raise ValueError(f"Cannot parse type {text!r} at offset {position}.")
        kind = match.lastgroup
        assert kind is not None
        tokens.append((kind, match.group(kind)))
        position = match.end()
    if not tokens:
        raise ValueError("Empty type expression.")
    return tokens


def _parse(tokens: list[tuple[str, str]], position: int, text: str) -> tuple[TypeDescriptor, int]:
    if position >= len(tokens) or tokens[position][0] != "name":
        raise ValueError(f"Expected a type name in {text!r}.")
    name = tokens[position][1]
    position += 1
    if position >= len(tokens) or tokens[position][1] != "<":
        return TypeDescriptor(name), position

    params: list[TypeParam] = []
    position += 1
    while True:
        if position >= len(tokens):
            raise ValueError(f"Unclosed '<' in type {text!r}.")
        kind, value = tokens[position]
        if kind == "quoted":
            params.append(value[1:-1])
            position += 1
        else:
            param, position = _parse(tokens, position, text)
            params.append(param)
        if position >= len(tokens):
            raise ValueError(f"Unclosed '<' in type {text!r}.")
        punct = tokens[position][1]
        position += 1
        if punct == ">":
            return TypeDescriptor(name, tuple(params)), position
        if punct != ",":
            raise ValueError(f"Unexpected {punct!r} in type {text!r}.")
