"""
Generation context

Everything the generator consults besides the item being generated: the
catalog, naming overrides and the names of the foundational root types.
Built once per run and never mutated.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .ir import Catalog, Name

ROOT_OBJECT = Name('GObject', 'Object')
UNOWNED_ROOT = Name('GObject', 'InitiallyUnowned')


@dataclass(frozen=True, eq=False)
class Config:
    """Immutable configuration for one generation run"""
    catalog: Catalog
    prefixes: Mapping[str, str] = field(default_factory=dict)  # namespace -> prefix
    names: Mapping[str, str] = field(default_factory=dict)     # local identifier -> override
    imports: tuple[str, ...] = ()
    ignores: frozenset[str] = frozenset()
    root_object: Name = ROOT_OBJECT
    unowned_root: Name = UNOWNED_ROOT

    def __post_init__(self):
        object.__setattr__(self, 'prefixes', MappingProxyType(dict(self.prefixes)))
        object.__setattr__(self, 'names', MappingProxyType(dict(self.names)))
        object.__setattr__(self, 'imports', tuple(self.imports))
        object.__setattr__(self, 'ignores', frozenset(self.ignores))
