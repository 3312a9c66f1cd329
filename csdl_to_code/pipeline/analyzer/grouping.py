"""
Grouping of folded types into output modules.

Types are grouped by vendor prefix. Within a group, several versions of
the same type share one class name, so only the most complete record
of each bare name is kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .type_model import Type, TypeModel
from .versioning import group_name

MESSAGE_REGISTRY_PREFIX = "MessageRegistry"
MESSAGE_TYPE = "Message"


def is_replicated_message(type_: Type) -> bool:
    """Registry ``Message`` shapes are replicated per registry version and never emitted."""
    return type_.namespace.startswith(MESSAGE_REGISTRY_PREFIX) and type_.name == MESSAGE_TYPE


@dataclass
class TypeGroup:
    """The types destined for one output module, keyed by bare type name."""

    name: str = ""
    types: dict[str, Type] = field(default_factory=dict)

    def add(self, type_: Type) -> bool:
        """
        Add a type unless a more complete one with the same name is already present.

        Returns:
            True if the type is now the group's record for its name
        """
        if is_replicated_message(type_):
            return False
        existing = self.types.get(type_.name)
        if existing is not None:
            if len(existing.properties) > len(type_.properties) or len(existing.members) > len(type_.members):
                return False
        self.types[type_.name] = type_
        return True

    def sorted_types(self) -> list[Type]:
        return [self.types[name] for name in sorted(self.types)]


def group_types(model: TypeModel) -> dict[str, TypeGroup]:
    """
    Split the model into output groups.

    Types are added oldest version first, so on equal completeness the
    newest version wins.
    """
    groups: dict[str, TypeGroup] = {}
    for name in model.sorted_names():
        prefix = group_name(name)
        group = groups.get(prefix)
        if group is None:
            group = groups[prefix] = TypeGroup(name=prefix)
        group.add(model[name])
    return groups
