"""
IR (Intermediate Representation) module

Represents the introspection catalog: named API items (constants, functions,
enums, flags, callbacks, structs, unions, boxed types, objects, interfaces)
and the C-level type signatures of their callables. The catalog is read-only
for the whole generation run.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Union
import json

from .errors import UnresolvableReferenceError


@dataclass(frozen=True, order=True)
class Name:
    """Namespaced identifier, e.g. Gtk.SpinButton"""
    namespace: str
    name: str

    @classmethod
    def parse(cls, dotted: str) -> 'Name':
        """Parse 'Namespace.Local' into a Name"""
        ns, sep, local = dotted.partition('.')
        if not sep or not ns or not local:
            raise ValueError(f'not a namespaced name: {dotted!r}')
        return cls(ns, local)

    def __str__(self) -> str:
        return f'{self.namespace}.{self.name}'


class BasicType(Enum):
    NONE = 'none'
    BOOLEAN = 'boolean'
    INT8 = 'int8'
    UINT8 = 'uint8'
    INT16 = 'int16'
    UINT16 = 'uint16'
    INT32 = 'int32'
    UINT32 = 'uint32'
    INT64 = 'int64'
    UINT64 = 'uint64'
    FLOAT = 'float'
    DOUBLE = 'double'
    GTYPE = 'gtype'
    UTF8 = 'utf8'
    FILENAME = 'filename'


# Type descriptors

@dataclass(frozen=True)
class TBasicType:
    basic: BasicType


@dataclass(frozen=True)
class TArray:
    inner: 'Type'


@dataclass(frozen=True)
class TGList:
    inner: 'Type'


@dataclass(frozen=True)
class TGSList:
    inner: 'Type'


@dataclass(frozen=True)
class TGHash:
    key: 'Type'
    value: 'Type'


@dataclass(frozen=True)
class TError:
    pass


@dataclass(frozen=True)
class TInterface:
    """Reference to another catalog item"""
    name: Name


Type = Union[TBasicType, TArray, TGList, TGSList, TGHash, TError, TInterface]


class Direction(Enum):
    IN = 'in'
    OUT = 'out'
    INOUT = 'inout'


class Transfer(Enum):
    NOTHING = 'nothing'
    CONTAINER = 'container'
    EVERYTHING = 'everything'


class Scope(Enum):
    INVALID = 'invalid'
    CALL = 'call'
    ASYNC = 'async'
    NOTIFIED = 'notified'


class FunctionFlag(Enum):
    METHOD = 'method'
    CONSTRUCTOR = 'constructor'
    GETTER = 'getter'
    SETTER = 'setter'
    WRAPS_VFUNC = 'wraps_vfunc'
    THROWS = 'throws'


@dataclass(frozen=True)
class Arg:
    """Callable argument"""
    name: str
    type: Type
    direction: Direction = Direction.IN
    may_be_null: bool = False
    transfer: Transfer = Transfer.NOTHING
    scope: Scope = Scope.INVALID


@dataclass(frozen=True)
class Callable:
    """Argument list, return type and nullability of a native entry point"""
    args: tuple[Arg, ...] = ()
    return_type: Type = TBasicType(BasicType.NONE)
    may_return_null: bool = False
    return_transfer: Transfer = Transfer.NOTHING

    @property
    def in_args(self) -> list[Arg]:
        """Arguments the caller supplies (in and inout)"""
        return [a for a in self.args if a.direction != Direction.OUT]

    @property
    def out_args(self) -> list[Arg]:
        """Arguments that contribute to the result (out and inout)"""
        return [a for a in self.args if a.direction != Direction.IN]


@dataclass(frozen=True)
class Field:
    name: str
    type: Type


# API items

@dataclass(frozen=True)
class Constant:
    type: Type
    value: Any


@dataclass(frozen=True)
class Function:
    symbol: str
    callable: Callable
    flags: frozenset[FunctionFlag] = frozenset()

    @property
    def is_constructor(self) -> bool:
        return FunctionFlag.CONSTRUCTOR in self.flags


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: int


@dataclass(frozen=True)
class Enumeration:
    members: tuple[EnumMember, ...] = ()


@dataclass(frozen=True)
class Flags:
    members: tuple[EnumMember, ...] = ()


@dataclass(frozen=True)
class Callback:
    callable: Callable


@dataclass(frozen=True)
class Struct:
    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class Union_:
    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class Boxed:
    pass


@dataclass(frozen=True)
class Signal:
    callable: Callable


@dataclass(frozen=True)
class Object:
    fields: tuple[Field, ...] = ()
    methods: tuple[tuple[Name, Function], ...] = ()
    interfaces: tuple[Name, ...] = ()
    signals: tuple[tuple[Name, Signal], ...] = ()


@dataclass(frozen=True)
class Interface:
    methods: tuple[tuple[Name, Function], ...] = ()


API = Union[Constant, Function, Enumeration, Flags, Callback, Struct, Union_,
            Boxed, Object, Interface]


@dataclass(frozen=True, eq=False)
class Catalog:
    """Read-only collection of API items for one or more namespaces"""
    items: Mapping[Name, API] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'items', MappingProxyType(dict(self.items)))
        symbols = frozenset(api.symbol for api in self.items.values()
                            if isinstance(api, Function))
        object.__setattr__(self, '_function_symbols', symbols)

    @classmethod
    def load(cls, json_path: str) -> 'Catalog':
        """Load a catalog from a JSON file"""
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Catalog':
        """Create a catalog from its JSON dictionary form"""
        items: dict[Name, API] = {}
        for decl in data.get('items', []):
            name = Name.parse(decl['name'])
            items[name] = cls._parse_item(name, decl)
        return cls(items)

    def __iter__(self) -> Iterator[tuple[Name, API]]:
        return iter(self.items.items())

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, name: Name) -> bool:
        return name in self.items

    def get(self, name: Name) -> Optional[API]:
        return self.items.get(name)

    def require(self, name: Name) -> API:
        """Look up a referenced item; a missing one is fatal"""
        try:
            return self.items[name]
        except KeyError:
            raise UnresolvableReferenceError(name) from None

    def namespace(self, ns: str) -> list[tuple[Name, API]]:
        """Items of one namespace, in catalog order"""
        return [(n, api) for n, api in self.items.items() if n.namespace == ns]

    def namespaces(self) -> list[str]:
        """All namespaces, in order of first appearance"""
        seen: dict[str, None] = {}
        for n in self.items:
            seen.setdefault(n.namespace, None)
        return list(seen)

    def has_function_symbol(self, symbol: str) -> bool:
        """Check if any free function (in any namespace) binds this symbol"""
        return symbol in self._function_symbols

    # JSON parsing

    @classmethod
    def _parse_item(cls, name: Name, decl: dict) -> API:
        kind = decl.get('kind')
        if kind == 'constant':
            return Constant(type=cls._parse_type(decl['type']), value=decl['value'])
        elif kind == 'function':
            return cls._parse_function(decl)
        elif kind == 'enum':
            return Enumeration(members=cls._parse_members(decl))
        elif kind == 'flags':
            return Flags(members=cls._parse_members(decl))
        elif kind == 'callback':
            return Callback(callable=cls._parse_callable(decl.get('callable', {})))
        elif kind == 'struct':
            return Struct(fields=cls._parse_fields(decl))
        elif kind == 'union':
            return Union_(fields=cls._parse_fields(decl))
        elif kind == 'boxed':
            return Boxed()
        elif kind == 'object':
            return Object(
                fields=cls._parse_fields(decl),
                methods=cls._parse_methods(name, decl),
                interfaces=tuple(Name.parse(i) for i in decl.get('interfaces', [])),
                signals=tuple(
                    (Name(name.namespace, s['name']),
                     Signal(callable=cls._parse_callable(s.get('callable', {}))))
                    for s in decl.get('signals', [])
                ),
            )
        elif kind == 'interface':
            return Interface(methods=cls._parse_methods(name, decl))
        raise ValueError(f'unknown item kind {kind!r} for {name}')

    @classmethod
    def _parse_type(cls, data) -> Type:
        """Parse a type descriptor

        Strings name basic types ('int32'), 'error', or catalog items
        ('Gtk.Widget'); dicts wrap containers: {'array': T}, {'glist': T},
        {'gslist': T}, {'ghash': [K, V]}, {'interface': 'Ns.Name'}.
        """
        if isinstance(data, str):
            if data == 'error':
                return TError()
            try:
                return TBasicType(BasicType(data))
            except ValueError:
                return TInterface(Name.parse(data))
        if 'array' in data:
            return TArray(cls._parse_type(data['array']))
        if 'glist' in data:
            return TGList(cls._parse_type(data['glist']))
        if 'gslist' in data:
            return TGSList(cls._parse_type(data['gslist']))
        if 'ghash' in data:
            key, value = data['ghash']
            return TGHash(cls._parse_type(key), cls._parse_type(value))
        if 'interface' in data:
            return TInterface(Name.parse(data['interface']))
        raise ValueError(f'unknown type descriptor {data!r}')

    @classmethod
    def _parse_callable(cls, data: dict) -> Callable:
        args = []
        for a in data.get('args', []):
            args.append(Arg(
                name=a['name'],
                type=cls._parse_type(a['type']),
                direction=Direction(a.get('direction', 'in')),
                may_be_null=a.get('may_be_null', False),
                transfer=Transfer(a.get('transfer', 'nothing')),
                scope=Scope(a.get('scope', 'invalid')),
            ))
        return Callable(
            args=tuple(args),
            return_type=cls._parse_type(data.get('return', 'none')),
            may_return_null=data.get('may_return_null', False),
            return_transfer=Transfer(data.get('return_transfer', 'nothing')),
        )

    @classmethod
    def _parse_function(cls, decl: dict) -> Function:
        return Function(
            symbol=decl['symbol'],
            callable=cls._parse_callable(decl.get('callable', {})),
            flags=frozenset(FunctionFlag(f) for f in decl.get('flags', [])),
        )

    @classmethod
    def _parse_methods(cls, owner: Name, decl: dict) -> tuple[tuple[Name, Function], ...]:
        return tuple(
            (Name(owner.namespace, m['name']), cls._parse_function(m))
            for m in decl.get('methods', [])
        )

    @classmethod
    def _parse_fields(cls, decl: dict) -> tuple[Field, ...]:
        return tuple(Field(name=f['name'], type=cls._parse_type(f['type']))
                     for f in decl.get('fields', []))

    @staticmethod
    def _parse_members(decl: dict) -> tuple[EnumMember, ...]:
        return tuple(EnumMember(name=m['name'], value=int(m['value']))
                     for m in decl.get('members', []))
