from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

OVERRIDE_TOKENS = frozenset({"override"})
INTERFACE_LINK_TOKENS = frozenset({"@IBOutlet", "@IBAction"})
RESTRICTED_TOKENS = frozenset({"private", "fileprivate"})


class DeclarationKind(Enum):
    FUNCTION = "func"
    IMMUTABLE = "let"
    MUTABLE = "var"
    CLASS = "class"
    ENUM = "enum"
    STRUCT = "struct"
    PROTOCOL = "protocol"


@dataclass(frozen=True)
class Modifiers:
    tokens: tuple[str, ...] = ()
    is_override: bool = False
    is_interface_linked: bool = False
    is_restricted: bool = False

    @classmethod
    def from_tokens(cls, tokens: tuple[str, ...] | list[str]) -> Modifiers:
        tokens = tuple(tokens)
        present = set(tokens)
        return cls(
            tokens=tokens,
            is_override=bool(present & OVERRIDE_TOKENS),
            is_interface_linked=bool(present & INTERFACE_LINK_TOKENS),
            is_restricted=bool(present & RESTRICTED_TOKENS),
        )

    def __contains__(self, token: object) -> bool:
        return token in self.tokens


@dataclass(frozen=True, eq=False)
class Declaration:
    file: str
    raw_line: str
    line_number: int
    kind: DeclarationKind
    name: str
    modifiers: Modifiers = field(default_factory=Modifiers)

    @property
    def is_override(self) -> bool:
        return self.modifiers.is_override

    @property
    def is_interface_linked(self) -> bool:
        return self.modifiers.is_interface_linked

    @property
    def is_restricted(self) -> bool:
        return self.modifiers.is_restricted

    def _identity(self) -> tuple[str, int, str, str]:
        return (self.file, self.line_number, self.kind.value, self.name)

    def _sort_key(self) -> tuple[str, int, str]:
        return (self.file, self.line_number, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Declaration):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __lt__(self, other: Declaration) -> bool:
        return self._sort_key() < other._sort_key()

    def as_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line_number,
            "kind": self.kind.value,
            "name": self.name,
            "modifiers": list(self.modifiers.tokens),
        }


@dataclass(frozen=True)
class SourceFile:
    path: str
    content: str | None  # None when the file could not be read


@dataclass(frozen=True)
class Report:
    root: str
    declarations: list[Declaration]
    unused: list[Declaration]
    stale_rules: list[str]
    summary: dict[str, Any] = field(default_factory=dict)
