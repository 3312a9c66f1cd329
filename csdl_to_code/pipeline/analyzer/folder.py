"""
Inheritance folding.

Walks every type's base chain, copying inherited properties into the
derived type until the chain is empty. Types are folded newest version
first so that, when an older type is later consulted as a base, it may
already be flat.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable

import structlog

from ..errors import FoldCycleError
from .type_model import AliasTable, FoldStatus, PropertyType, Type, TypeModel

logger = structlog.get_logger(__name__)

LEGACY_RESOURCE_BASE = "Resource.v1_0_0.Resource"
LEGACY_LINKS_BASE = "Resource.Links"


def _legacy_resource_properties() -> dict[str, PropertyType]:
    return {
        "ID": PropertyType(declared_type="Edm.String", is_nullable=False, json_name="@odata.id"),
        "Type": PropertyType(declared_type="Edm.String", is_nullable=False, json_name="@odata.type"),
        "Name": PropertyType(declared_type="Edm.String", is_nullable=True),
        "Description": PropertyType(declared_type="Edm.String", is_nullable=True),
    }


def _legacy_links_properties() -> dict[str, PropertyType]:
    return {
        "Oem": PropertyType(declared_type="Resource.Oem", is_nullable=True),
    }


# Well-known historical bases that may be missing from a partial schema set
SYNTHETIC_BASES: dict[str, Callable[[], dict[str, PropertyType]]] = {
    LEGACY_RESOURCE_BASE: _legacy_resource_properties,
    LEGACY_LINKS_BASE: _legacy_links_properties,
}


class InheritanceFolder:
    """Folds base-type chains of a TypeModel in place."""

    def __init__(self, model: TypeModel, aliases: AliasTable | None = None):
        """
        Initialize the folder.

        Args:
            model: The type model, mutated in place
            aliases: Alias table consulted when a base type is not a model key
        """
        self.model = model
        self.aliases = aliases if aliases is not None else AliasTable()

    def fold_all(self) -> TypeModel:
        """Fold every type, newest qualified name first."""
        names = self.model.sorted_names(reverse=True)
        deleted = 0
        for name in names:
            # Skip anything deleted since the snapshot was taken
            type_ = self.model.get(name)
            if type_ is None:
                continue
            if self.fold(type_) is None:
                deleted += 1
        logger.info("fold_complete", types=len(self.model), deleted=deleted)
        return self.model

    def fold(self, type_: Type) -> Type | None:
        """
        Fold a single type.

        Returns:
            The folded type, or None if its base chain dead-ends and the type was deleted

        Raises:
            FoldCycleError: If the base chain loops
        """
        if type_.status is FoldStatus.DELETED:
            return None
        if type_.status is FoldStatus.FOLDED:
            return type_

        chain = [type_.qualified_name]
        while type_.base_type:
            base = self._lookup_base(type_.base_type)
            if base is None:
                return self._dead_end(type_)
            if base.qualified_name in chain:
                raise FoldCycleError(chain + [base.qualified_name])
            chain.append(base.qualified_name)

            for name, prop in base.properties.items():
                if name not in type_.properties:
                    type_.properties[name] = dataclasses.replace(prop)
            type_.base_type = base.base_type

        return self._finish(type_)

    def _lookup_base(self, name: str) -> Type | None:
        base = self.model.get(name)
        if base is None and name in self.aliases:
            base = self.model.get(self.aliases[name])
        return base

    def _dead_end(self, type_: Type) -> Type | None:
        synthesize = SYNTHETIC_BASES.get(type_.base_type)
        if synthesize is not None:
            for name, prop in synthesize().items():
                type_.properties.setdefault(name, prop)
            type_.base_type = ""
            return self._finish(type_)

        logger.debug("type_deleted", type=type_.qualified_name, base_type=type_.base_type)
        self.model.delete(type_.qualified_name)
        return None

    def _finish(self, type_: Type) -> Type:
        type_.alias_table = self.aliases
        type_.status = FoldStatus.FOLDED
        return type_


def fold_model(model: TypeModel, aliases: AliasTable | None = None) -> TypeModel:
    return InheritanceFolder(model, aliases).fold_all()
