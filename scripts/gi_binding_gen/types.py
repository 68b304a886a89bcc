"""
Type conversion module

Maps catalog types to their safe (Haskell) and wire (FFI) representations
and picks the conversion between the two in each direction.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from .errors import ConversionError, GenerationError
from .ir import (
    Arg, BasicType, Boxed, Callback, Constant, Direction, Enumeration, Flags,
    Function, Interface, Object, Struct, TArray, TBasicType, TError, TGHash,
    TGList, TGSList, TInterface, Transfer, Type, Union_,
)
from .marshal import Conversion, IDENTITY
from .naming import upper_name

if TYPE_CHECKING:
    from .config import Config
    from .hierarchy import Hierarchy


@dataclass(frozen=True)
class TypeRep:
    """A Haskell type: constructor applied to arguments"""
    con: str
    args: tuple['TypeRep', ...] = ()

    def show(self) -> str:
        if self.con == '(,)':
            return '(' + ', '.join(a.show() for a in self.args) + ')'
        if not self.args:
            return self.con
        return self.con + ' ' + ' '.join(_show_arg(a) for a in self.args)

    def __str__(self) -> str:
        return self.show()


def _show_arg(t: TypeRep) -> str:
    if t.args and t.con != '(,)':
        return '(' + t.show() + ')'
    return t.show()


def con(name: str, *args: TypeRep) -> TypeRep:
    return TypeRep(name, tuple(args))


def ptr(t: TypeRep) -> TypeRep:
    return con('Ptr', t)


def io(t: TypeRep) -> TypeRep:
    return con('IO', t)


def maybe(t: TypeRep) -> TypeRep:
    return con('Maybe', t)


def tuple_of(ts: list[TypeRep]) -> TypeRep:
    return TypeRep('(,)', tuple(ts))


UNIT = TypeRep('()')
WORD = TypeRep('Word')
STRING = TypeRep('[Char]')
CSTRING = TypeRep('CString')

# Monadic: read a string the callee handed over, then release it.
READ_AND_FREE_CSTRING = Conversion('(\\s -> peekCString s <* free s)', monadic=True)


@dataclass(frozen=True)
class BasicMapping:
    safe: TypeRep
    wire: TypeRep
    h_to_f: Conversion = IDENTITY
    f_to_h: Conversion = IDENTITY


def _same(name: str) -> BasicMapping:
    return BasicMapping(con(name), con(name))


_FROM_INTEGRAL = Conversion('fromIntegral')

BASIC_TYPES: dict[BasicType, BasicMapping] = {
    BasicType.NONE: BasicMapping(UNIT, UNIT),
    BasicType.BOOLEAN: BasicMapping(
        con('Bool'), con('CInt'),
        Conversion('(fromIntegral . fromEnum)'), Conversion('(/= 0)')),
    BasicType.INT8: _same('Int8'),
    BasicType.UINT8: _same('Word8'),
    BasicType.INT16: _same('Int16'),
    BasicType.UINT16: _same('Word16'),
    BasicType.INT32: _same('Int32'),
    BasicType.UINT32: _same('Word32'),
    BasicType.INT64: _same('Int64'),
    BasicType.UINT64: _same('Word64'),
    BasicType.FLOAT: _same('Float'),
    BasicType.DOUBLE: _same('Double'),
    BasicType.GTYPE: BasicMapping(WORD, con('GType'), _FROM_INTEGRAL, _FROM_INTEGRAL),
    BasicType.UTF8: BasicMapping(
        STRING, CSTRING,
        Conversion('newCString', monadic=True, allocates=True),
        Conversion('peekCString', monadic=True)),
    BasicType.FILENAME: BasicMapping(
        STRING, CSTRING,
        Conversion('newCString', monadic=True, allocates=True),
        Conversion('peekCString', monadic=True)),
}

# Container types are opaque pointers wrapped in these data types
# (declared by the GLib bootstrap).
CONTAINER_CONS = {
    TArray: 'GArray',
    TGList: 'GList',
    TGSList: 'GSList',
}


def unwrap_fn(con_name: str) -> str:
    """Haskell lambda extracting the raw pointer from a data constructor"""
    return '(\\(' + con_name + ' x) -> x)'


def klass(name: str) -> str:
    """Capability class of an object type"""
    return name + 'Klass'


def interface_class(name: str) -> str:
    """Capability class of an interface type"""
    return 'I' + name


def is_pointer(t: TypeRep) -> bool:
    return t.con in ('Ptr', 'CString')


class TypeMapper:
    """Manages type conversion between Haskell and C"""

    def __init__(self, cfg: 'Config', hierarchy: Optional['Hierarchy'] = None):
        self.cfg = cfg
        self.hierarchy = hierarchy

    def find_api(self, t: Type):
        """Catalog item a type refers to (None for non-references)"""
        if isinstance(t, TInterface):
            return self.cfg.catalog.require(t.name)
        return None

    def is_scalar(self, t: Type) -> bool:
        """Enum and flag values travel as machine words"""
        return isinstance(self.find_api(t), (Enumeration, Flags))

    def capability_class(self, t: Type) -> Optional[str]:
        """Class name to generalize an argument of this type over, if any"""
        api = self.find_api(t)
        if isinstance(api, Interface):
            return interface_class(self.safe_type(t).show())
        if isinstance(api, Object) and self.hierarchy is not None \
                and self.hierarchy.has_capability_class(t.name):
            return klass(self.safe_type(t).show())
        return None

    def safe_type(self, t: Type) -> TypeRep:
        """Haskell type exposed to callers"""
        if isinstance(t, TBasicType):
            return BASIC_TYPES[t.basic].safe
        elif isinstance(t, (TArray, TGList, TGSList)):
            return con(CONTAINER_CONS[type(t)], self.safe_type(t.inner))
        elif isinstance(t, TGHash):
            return con('GHashTable', self.safe_type(t.key), self.safe_type(t.value))
        elif isinstance(t, TError):
            return con('GError')
        elif isinstance(t, TInterface):
            api = self.cfg.catalog.require(t.name)
            if isinstance(api, (Constant, Function)):
                # Only type-like items can be referenced from a signature
                raise ConversionError(str(t.name), 'a type')
            return con(upper_name(self.cfg, t.name))
        raise GenerationError(f'unknown type descriptor {t!r}')

    def wire_type(self, t: Type) -> TypeRep:
        """FFI type passed across the native call boundary"""
        if isinstance(t, TBasicType):
            return BASIC_TYPES[t.basic].wire
        if self.is_scalar(t):
            return WORD
        return ptr(self.safe_type(t))

    def arg_wire_type(self, arg: Arg) -> TypeRep:
        """Wire type of a parameter; out and inout go through a pointer"""
        ft = self.wire_type(arg.type)
        if arg.direction == Direction.IN:
            return ft
        return ptr(ft)

    def converter(self, t: Type, direction: Direction,
                  transfer: Transfer = Transfer.NOTHING) -> Conversion:
        if direction == Direction.IN:
            return self.h_to_f(t)
        elif direction == Direction.OUT:
            return self.f_to_h(t, transfer)
        raise ValueError('inout values convert in and then out')

    def h_to_f(self, t: Type) -> Conversion:
        """Conversion from the safe to the wire representation"""
        h_type, f_type = self.safe_type(t), self.wire_type(t)
        if h_type == f_type:
            return IDENTITY
        if isinstance(t, TBasicType):
            conv = BASIC_TYPES[t.basic].h_to_f
        elif isinstance(t, TInterface):
            conv = self._interface_h_to_f(t, h_type)
        else:
            conv = Conversion(unwrap_fn(h_type.con))
        if conv.is_identity:
            raise ConversionError(h_type.show(), f_type.show())
        return conv

    def f_to_h(self, t: Type, transfer: Transfer = Transfer.NOTHING) -> Conversion:
        """Conversion from the wire to the safe representation"""
        h_type, f_type = self.safe_type(t), self.wire_type(t)
        if h_type == f_type:
            return IDENTITY
        if isinstance(t, TBasicType):
            conv = BASIC_TYPES[t.basic].f_to_h
            if f_type == CSTRING and transfer == Transfer.EVERYTHING:
                conv = READ_AND_FREE_CSTRING
        elif isinstance(t, TInterface):
            conv = self._interface_f_to_h(t, h_type)
        else:
            conv = Conversion(h_type.con)
        if conv.is_identity:
            raise ConversionError(f_type.show(), h_type.show())
        return conv

    def _interface_h_to_f(self, t: TInterface, h_type: TypeRep) -> Conversion:
        api = self.find_api(t)
        if isinstance(api, Enumeration):
            return Conversion('(fromIntegral . fromEnum)')
        elif isinstance(api, Flags):
            return _FROM_INTEGRAL
        elif self.capability_class(t) is not None:
            # Go through the capability class, then unwrap the pointer
            return Conversion(unwrap_fn(h_type.con) + ' $ to' + h_type.con)
        elif isinstance(api, (Object, Struct, Union_, Boxed, Callback)):
            return Conversion(unwrap_fn(h_type.con))
        return IDENTITY

    def _interface_f_to_h(self, t: TInterface, h_type: TypeRep) -> Conversion:
        api = self.find_api(t)
        if isinstance(api, Enumeration):
            return Conversion('(toEnum . fromIntegral)')
        elif isinstance(api, Flags):
            return _FROM_INTEGRAL
        elif isinstance(api, (Object, Interface, Struct, Union_, Boxed, Callback)):
            return Conversion(h_type.con)
        return IDENTITY
