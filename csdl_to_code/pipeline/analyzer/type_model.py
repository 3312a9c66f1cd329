"""
Abstract type model shared by the builder, folder, resolver and analyzer.

Records are created once by the builder, mutated in place while folding,
and treated as read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .versioning import qualified_name_key, version_insensitive_name

COLLECTION_PREFIX = "Collection("
OEM_ACTIONS_SUFFIX = "OemActions"
ITEM_OR_COLLECTION = "ItemOrCollection"


def unwrap_collection(declared_type: str) -> tuple[str, bool]:
    """Strip a ``Collection(...)`` wrapper, returning the inner name and whether it was present."""
    if declared_type.startswith(COLLECTION_PREFIX) and declared_type.endswith(")"):
        return declared_type[len(COLLECTION_PREFIX) : -1], True
    return declared_type, False


class FoldStatus(Enum):
    """Fold progress of a record in the type model."""

    UNFOLDED = "unfolded"
    FOLDED = "folded"
    DELETED = "deleted"


@dataclass
class PropertyType:
    """A property as declared on a type."""

    declared_type: str = ""
    is_navigation: bool = False
    is_nullable: bool = True
    json_name: str = ""  # Serialized field name override

    @property
    def is_collection(self) -> bool:
        return unwrap_collection(self.declared_type)[1]


@dataclass
class Member:
    """An enumeration member with its optional literal value."""

    name: str = ""
    value: str | None = None


class AliasTable(Mapping[str, str]):
    """Read-only mapping from a qualified alias name to its underlying type name."""

    def __init__(self, entries: Mapping[str, str] | None = None):
        self._entries = dict(entries or {})

    def __getitem__(self, name: str) -> str:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AliasTable({self._entries!r})"

    def substitute(self, name: str) -> str:
        """Follow alias chains until a non-alias name is reached."""
        seen = {name}
        while name in self._entries:
            name = self._entries[name]
            if name in seen:
                break
            seen.add(name)
        return name


@dataclass
class Type:
    """A structured type or enumeration identified by namespace and name."""

    name: str = ""
    namespace: str = ""
    base_type: str = ""  # Qualified name of the base type, empty for roots
    properties: dict[str, PropertyType] = field(default_factory=dict)
    members: dict[str, Member] = field(default_factory=dict)
    is_complex: bool = False
    is_wildcard: bool = False
    alias_table: AliasTable | None = field(default=None, repr=False)
    status: FoldStatus = FoldStatus.UNFOLDED

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}"

    @property
    def is_struct(self) -> bool:
        return bool(self.properties)

    @property
    def is_enum(self) -> bool:
        return not self.properties and bool(self.members)

    @property
    def is_empty(self) -> bool:
        return not self.properties and not self.members

    @property
    def is_benign_empty(self) -> bool:
        """Empty on purpose: open objects, OEM action containers and the ItemOrCollection placeholder."""
        return self.is_empty and (self.is_wildcard or self.name.endswith(OEM_ACTIONS_SUFFIX) or self.name == ITEM_OR_COLLECTION)


class TypeModel:
    """
    Arena of Type records keyed by qualified name.

    Deleted records stay in the arena tagged DELETED so that a walk over
    a snapshot of names can tell "removed while folding" apart from
    "never existed"; they are invisible to lookups and iteration.
    """

    def __init__(self, types: Iterable[Type] = ()):
        self._entries: dict[str, Type] = {}
        # (vendor, bare name) -> live qualified names, newest first; rebuilt after add/delete
        self._versions: dict[tuple[str, str], list[str]] | None = None
        for type_ in types:
            self.add(type_)

    def add(self, type_: Type) -> None:
        self._entries[type_.qualified_name] = type_
        self._versions = None

    def get(self, name: str) -> Type | None:
        type_ = self._entries.get(name)
        if type_ is None or type_.status is FoldStatus.DELETED:
            return None
        return type_

    def delete(self, name: str) -> None:
        type_ = self._entries.get(name)
        if type_ is not None:
            type_.status = FoldStatus.DELETED
            self._versions = None

    def is_deleted(self, name: str) -> bool:
        type_ = self._entries.get(name)
        return type_ is not None and type_.status is FoldStatus.DELETED

    def __getitem__(self, name: str) -> Type:
        type_ = self.get(name)
        if type_ is None:
            raise KeyError(name)
        return type_

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return (name for name, type_ in self._entries.items() if type_.status is not FoldStatus.DELETED)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def items(self) -> Iterator[tuple[str, Type]]:
        return ((name, self._entries[name]) for name in self)

    def values(self) -> Iterator[Type]:
        return (self._entries[name] for name in self)

    def sorted_names(self, reverse: bool = False) -> list[str]:
        """Live qualified names in version order (oldest first unless reversed)."""
        return sorted(self, key=qualified_name_key, reverse=reverse)

    def _version_index(self) -> dict[tuple[str, str], list[str]]:
        if self._versions is None:
            self._versions = {}
            for name in self.sorted_names(reverse=True):
                self._versions.setdefault(version_insensitive_name(name), []).append(name)
        return self._versions

    def versions_of(self, name: str) -> list[Type]:
        """All live records sharing vendor and bare name with ``name``, newest first."""
        return [self._entries[candidate] for candidate in self._version_index().get(version_insensitive_name(name), [])]

    def populated_version(self, type_: Type) -> Type | None:
        """
        For an empty record in an unversioned namespace, find the newest
        version of the same type that has properties.
        """
        if "." in type_.namespace:
            return None
        for other in self.versions_of(type_.qualified_name):
            if other.properties:
                return other
        return None
