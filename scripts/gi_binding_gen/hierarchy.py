"""
Object hierarchy module

Reconstructs single inheritance from the catalog and generates the
capability classes that let any descendant of the root object be used
where an ancestor is expected.

The metadata has no explicit "extends" relation: an object whose first
field is (a reference to) another object inherits from that object.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .codegen import CodeGen
from .errors import GenerationError, HierarchyError
from .ir import Interface, Name, Object, TInterface
from .naming import c_name, upper_name
from .types import interface_class, klass

if TYPE_CHECKING:
    from .config import Config
    from .ir import Catalog

logger = logging.getLogger(__name__)


def derive_ancestry(catalog: 'Catalog', root: Name, unowned_root: Name) -> dict[Name, Name]:
    """Map every object to its immediate parent

    unowned_root only differs from root in floating reference handling,
    which the generated API does not expose, so it is folded into root.
    """
    parents: dict[Name, Name] = {}
    for name, api in catalog:
        if not isinstance(api, Object):
            continue
        parent = _read_parent(catalog, api)
        if parent is None:
            continue
        if parent == unowned_root:
            parent = root
        parents[name] = parent
    return parents


def _read_parent(catalog: 'Catalog', obj: Object) -> Optional[Name]:
    if not obj.fields:
        return None
    first = obj.fields[0].type
    if not isinstance(first, TInterface):
        return None
    if isinstance(catalog.require(first.name), Object):
        return first.name
    return None


class Hierarchy:
    """Parent map of all objects, computed once per generation run"""

    def __init__(self, parents: dict[Name, Name], root: Name):
        self._parents = dict(parents)
        self.root = root

    @classmethod
    def build(cls, cfg: 'Config') -> 'Hierarchy':
        return cls(derive_ancestry(cfg.catalog, cfg.root_object, cfg.unowned_root),
                   cfg.root_object)

    @property
    def parents(self) -> dict[Name, Name]:
        return dict(self._parents)

    def ancestor_chain(self, name: Name) -> list[Name]:
        """Ancestors of an object, nearest parent first"""
        chain = []
        seen = {name}
        current = self._parents.get(name)
        while current is not None:
            if current in seen:
                raise HierarchyError(
                    f'cycle in object hierarchy: {" -> ".join(map(str, [name] + chain + [current]))}')
            seen.add(current)
            chain.append(current)
            current = self._parents.get(current)
        return chain

    def has_capability_class(self, name: Name) -> bool:
        """Whether a class is generated for the object (root or a descendant)"""
        chain = self.ancestor_chain(name)
        if chain:
            return chain[-1] == self.root
        return name == self.root


class HierarchyGenerator:
    """Generates conversions between objects of the root hierarchy"""

    def __init__(self, cfg: 'Config', hierarchy: Hierarchy):
        self.cfg = cfg
        self.hierarchy = hierarchy

    def generate(self, name: Name, gen: CodeGen):
        """Generate the conversions appropriate for an object's position"""
        chain = self.hierarchy.ancestor_chain(name)
        if not chain:
            if name == self.hierarchy.root:
                self.gen_root_conversions(name, gen)
        elif chain[-1] == self.hierarchy.root:
            self.gen_descendant_conversions(name, chain, gen)
        else:
            logger.debug('%s does not descend from %s, no class generated',
                         name, self.hierarchy.root)

    def gen_root_conversions(self, name: Name, gen: CodeGen):
        """Root class with identity conversions"""
        name_ = upper_name(self.cfg, name)
        class_name = klass(name_)

        gen.line(f'un{name_} ({name_} o) = o')

        with gen.group():
            gen.line(f'class {class_name} o where')
            with gen.indented():
                gen.line(f'to{name_} :: o -> {name_}')
                gen.line(f'unsafeCast{name_} :: {name_} -> o')

        with gen.group():
            gen.line(f'instance {class_name} {name_} where')
            with gen.indented():
                gen.line(f'to{name_} = id')
                gen.line(f'unsafeCast{name_} = id')

        with gen.group():
            gen.line(f'castTo{name_} :: {class_name} o => o -> {name_}')
            gen.line(f'castTo{name_} = to{name_}')

    def gen_descendant_conversions(self, name: Name, chain: list[Name], gen: CodeGen):
        """Class bounded by the parent's class, plus a checked downcast"""
        name_ = upper_name(self.cfg, name)
        class_name = klass(name_)
        top = upper_name(self.cfg, chain[-1])
        parent = upper_name(self.cfg, chain[0])

        gen.line(f'un{name_} ({name_} o) = o')

        with gen.group():
            gen.line(f'class {klass(parent)} o => {class_name} o')
            gen.line(f'to{name_} :: {class_name} o => o -> {name_}')
            gen.line(f'to{name_} = unsafeCast{top} . to{top}')

        with gen.group():
            gen.line(f'instance {class_name} {name_} where')
            for ancestor in chain:
                gen.line(f'instance {klass(upper_name(self.cfg, ancestor))} {name_} where')
            # The root instance (last line above) carries the conversions
            with gen.indented():
                gen.line(f'to{top} = {top} . castPtr . un{name_}')
                gen.line(f'unsafeCast{top} = {name_} . castPtr . un{top}')

        get_type = c_name(self.cfg, name) + '_get_type'
        with gen.foreign_import():
            gen.line(f'foreign import ccall unsafe "{get_type}"')
            with gen.indented():
                gen.line(f'c_{get_type} :: GType')

        with gen.group():
            gen.line(f'castTo{name_} :: {klass(top)} o => o -> {name_}')
            gen.line(f'castTo{name_} = castTo c_{get_type} "{name_}"')

    def gen_interface_instance(self, name: Name, iface: Name, gen: CodeGen):
        """Structural cast from an object to an interface it implements"""
        if not isinstance(self.cfg.catalog.require(iface), Interface):
            raise GenerationError(f'{name} implements {iface}, which is not an interface')
        name_ = upper_name(self.cfg, name)
        iface_ = upper_name(self.cfg, iface)
        with gen.group():
            gen.line(f'instance {interface_class(iface_)} {name_} where')
            with gen.indented():
                gen.line(f'to{iface_} ({name_} p) = {iface_} (castPtr p)')
