"""
Enum binding generation module

Generates constants, enumerations (a data type with an Enum instance) and
flags (a plain word alias).
"""

import math
from typing import TYPE_CHECKING

from .codegen import CodeGen
from .errors import GenerationError
from .ir import BasicType, Name, TBasicType
from .naming import literal_name, upper_name

if TYPE_CHECKING:
    from .config import Config
    from .ir import Constant, Enumeration, Flags
    from .types import TypeMapper

_INTEGER_TYPES = (
    BasicType.INT8, BasicType.UINT8, BasicType.INT16, BasicType.UINT16,
    BasicType.INT32, BasicType.UINT32, BasicType.INT64, BasicType.UINT64,
    BasicType.GTYPE,
)


def haskell_string(s: str) -> str:
    """Haskell string literal for s"""
    out = []
    numeric = False
    for c in s:
        if numeric and c.isdigit():
            # \& ends a numeric escape followed by a digit
            out.append('\\&')
        numeric = False
        if c == '\\':
            out.append('\\\\')
        elif c == '"':
            out.append('\\"')
        elif c == '\n':
            out.append('\\n')
        elif c == '\t':
            out.append('\\t')
        elif c.isprintable() and ord(c) < 128:
            out.append(c)
        else:
            out.append(f'\\{ord(c)}')
            numeric = True
    return '"' + ''.join(out) + '"'


def haskell_literal(basic: BasicType, value) -> str:
    """Render a constant value of a basic type as a Haskell expression"""
    if basic == BasicType.BOOLEAN:
        if isinstance(value, str):
            value = value.lower() in ('true', '1')
        return 'True' if value else 'False'
    elif basic in _INTEGER_TYPES:
        return str(int(value))
    elif basic in (BasicType.FLOAT, BasicType.DOUBLE):
        f = float(value)
        if math.isnan(f):
            return '(0/0)'
        if math.isinf(f):
            return '(1/0)' if f > 0 else '(-1/0)'
        return repr(f)
    elif basic in (BasicType.UTF8, BasicType.FILENAME):
        return haskell_string(str(value))
    elif basic == BasicType.NONE:
        return '()'
    raise GenerationError(f'no literal syntax for {basic.value}')


class EnumGenerator:
    """Generates constant, enum and flags bindings"""

    def __init__(self, cfg: 'Config', type_conv: 'TypeMapper'):
        self.cfg = cfg
        self.type_conv = type_conv

    def generate_constant(self, name: Name, const: 'Constant', gen: CodeGen):
        if not isinstance(const.type, TBasicType):
            raise GenerationError(f'constant {name} has a non-basic type')
        name_ = literal_name(self.cfg, name)
        gen.line(f'-- constant {name.name}')
        with gen.group():
            gen.line(f'{name_} :: {self.type_conv.safe_type(const.type)}')
            gen.line(f'{name_} = {haskell_literal(const.type.basic, const.value)}')

    def member_name(self, enum: Name, member: str) -> str:
        return upper_name(self.cfg, Name(enum.namespace, enum.name + '_' + member))

    def generate_enum(self, name: Name, enum: 'Enumeration', gen: CodeGen):
        name_ = upper_name(self.cfg, name)
        members = [(self.member_name(name, m.name), m.value) for m in enum.members]
        gen.line(f'-- enum {name.name}')

        with gen.group():
            if not members:
                gen.line(f'data {name_}')
                return
            gen.line(f'data {name_} =')
            with gen.indented():
                for i, (member, _) in enumerate(members):
                    gen.line(('  ' if i == 0 else '| ') + member)
                gen.line('deriving (Eq, Show)')

        with gen.group():
            gen.line(f'instance Enum {name_} where')
            with gen.indented():
                for member, value in members:
                    gen.line(f'fromEnum {member} = {value}')
                gen.line()
                # Aliased values map back to the first member declaring them
                seen = set()
                for member, value in members:
                    if value in seen:
                        continue
                    seen.add(value)
                    pattern = f'({value})' if value < 0 else str(value)
                    gen.line(f'toEnum {pattern} = {member}')
                gen.line(f'toEnum k = error $ "Unknown {name_} value: " ++ show k')

    def generate_flags(self, name: Name, flags: 'Flags', gen: CodeGen):
        gen.line(f'-- flags {name.name}')
        with gen.group():
            gen.line(f'type {upper_name(self.cfg, name)} = Word')
