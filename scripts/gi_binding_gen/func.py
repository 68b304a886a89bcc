"""
Function binding generation module

Generates, for every native entry point, a foreign import using wire types
and a wrapper that marshals the safe arguments in, makes the call and
marshals the return value and out arguments back.
"""

import string
from dataclasses import replace
from typing import TYPE_CHECKING

from .codegen import CodeGen, with_comment
from .errors import GenerationError
from .ir import Arg, BasicType, Direction, Name, TBasicType, TInterface, Transfer
from .marshal import EStr, IDENTITY, M, App, Var, code, prime
from .naming import escape_reserved, lower_name, upper_name
from .types import UNIT, io, is_pointer, maybe, ptr, tuple_of

if TYPE_CHECKING:
    from .config import Config
    from .ir import Callable, Function
    from .marshal import Conversion, Expr
    from .types import TypeMapper, TypeRep

RECEIVER = '_obj'
VOID = TBasicType(BasicType.NONE)


def convert(gen: CodeGen, e: 'Expr', conv: 'Conversion') -> str:
    """Emit the bindings for a conversion, returning the final bound name"""
    name, lines = code(conv(e))
    gen.lines(*lines)
    return name


class FuncGenerator:
    """Generates function wrapper bindings"""

    def __init__(self, cfg: 'Config', type_conv: 'TypeMapper'):
        self.cfg = cfg
        self.type_conv = type_conv

    def generate_function(self, name: Name, func: 'Function', gen: CodeGen):
        """Generate wrapper for a free function"""
        gen.line(f'-- function {func.symbol}')
        self.generate_callable(name, func.symbol, func.callable, gen)

    def generate_method(self, owner: Name, method: Name, func: 'Function', gen: CodeGen):
        """Generate wrapper for a method, making the receiver explicit"""
        gen.line(f'-- method {upper_name(self.cfg, owner)}::{method.name}')
        # Namespace the wrapper name to the owning type
        mangled = Name(owner.namespace, owner.name + '_' + method.name)
        callable_ = func.callable
        if not func.is_constructor:
            receiver = Arg(name=RECEIVER, type=TInterface(owner))
            callable_ = replace(callable_, args=(receiver,) + callable_.args)
        self.generate_callable(mangled, func.symbol, callable_, gen)

    def generate_callable(self, name: Name, symbol: str, callable_: 'Callable', gen: CodeGen):
        self.gen_foreign_import(symbol, callable_, gen)
        with gen.group():
            self._gen_signature(name, callable_, gen)
            in_names = ' '.join(escape_reserved(a.name) for a in callable_.in_args)
            header = lower_name(self.cfg, name)
            if in_names:
                header += ' ' + in_names
            gen.line(header + ' = do')
            with gen.indented():
                args, cleanups, slots, owned = self._convert_in(callable_, gen)
                gen.line('result <- ' + ' '.join([symbol] + args))
                for bound in cleanups:
                    gen.line(f'free {bound}')
                self._convert_out(callable_, slots, owned, gen)

    def gen_foreign_import(self, symbol: str, callable_: 'Callable', gen: CodeGen):
        """foreign import declaration over wire types"""
        with gen.foreign_import():
            gen.line(f'foreign import ccall "{symbol}" {symbol} :: ')
            with gen.indented():
                for arg in callable_.args:
                    ft = self.type_conv.arg_wire_type(arg)
                    gen.line(with_comment(f'{ft} -> ', arg.name))
                gen.line(str(io(self.type_conv.wire_type(callable_.return_type))))

    def out_type(self, callable_: 'Callable') -> 'TypeRep':
        """Safe result type: return value and out arguments"""
        parts = []
        if callable_.return_type != VOID:
            parts.append(self.type_conv.safe_type(callable_.return_type))
        parts.extend(self.type_conv.safe_type(a.type) for a in callable_.out_args)
        if not parts:
            shape = UNIT
        elif len(parts) == 1:
            shape = parts[0]
        else:
            shape = tuple_of(parts)
        if callable_.may_return_null:
            return maybe(shape)
        return shape

    def capability_params(self, callable_: 'Callable') -> dict[int, tuple[str, str]]:
        """Argument position -> (type variable, class) for in arguments
        generalized over a capability class"""
        letters = iter(string.ascii_lowercase)
        params = {}
        for i, arg in enumerate(callable_.args):
            if arg.direction == Direction.OUT:
                continue
            cls = self.type_conv.capability_class(arg.type)
            if cls is None:
                continue
            letter = next(letters, None)
            if letter is None:
                raise GenerationError('out of type variable letters')
            params[i] = (letter, cls)
        return params

    def _gen_signature(self, name: Name, callable_: 'Callable', gen: CodeGen):
        gen.line(lower_name(self.cfg, name) + ' ::')
        params = self.capability_params(callable_)
        with gen.indented():
            if params:
                constraints = ', '.join(f'{cls} {letter}' for letter, cls in params.values())
                gen.line(f'({constraints}) =>')
            for i, arg in enumerate(callable_.args):
                if arg.direction == Direction.OUT:
                    continue
                if i in params:
                    letter, _ = params[i]
                    gen.line(with_comment(f'{letter} ->', arg.name))
                else:
                    ht = self.type_conv.safe_type(arg.type)
                    gen.line(with_comment(f'{ht} -> ', arg.name))
            gen.line(str(io(self.out_type(callable_))))

    def _convert_in(self, callable_: 'Callable', gen: CodeGen):
        """Marshal in arguments and allocate out slots, in declaration order.

        Values allocated for in arguments are freed right after the call;
        those poked into an inout slot stay alive until the slot is read back.
        """
        args: list[str] = []
        cleanups: list[str] = []
        slots: dict[int, str] = {}
        owned: dict[int, str] = {}
        for i, arg in enumerate(callable_.args):
            name = escape_reserved(arg.name)
            ft = self.type_conv.wire_type(arg.type)
            alloc = f'malloc :: {io(ptr(ft))}'
            if arg.direction == Direction.OUT:
                slot = convert(gen, M(EStr(name, alloc)), IDENTITY)
            else:
                conv = self.type_conv.h_to_f(arg.type)
                value = convert(gen, Var(name), conv)
                freed = conv.allocates and arg.transfer != Transfer.EVERYTHING
                if arg.direction == Direction.IN:
                    if freed:
                        cleanups.append(value)
                    args.append(value)
                    continue
                if freed:
                    owned[i] = value
                slot = prime(value)
                gen.line(f'{slot} <- {alloc}')
                gen.line(f'poke {slot} {value}')
            slots[i] = slot
            args.append(slot)
        return args, cleanups, slots, owned

    def _convert_out(self, callable_: 'Callable', slots: dict[int, str],
                     owned: dict[int, str], gen: CodeGen):
        """Marshal the return value and out arguments, then build the result"""
        nullable = callable_.may_return_null
        check_null = nullable and is_pointer(self.type_conv.wire_type(callable_.return_type))
        if check_null:
            gen.line('if result == nullPtr')
            gen.indent()
            frees = ''.join(f'free {bound} >> '
                            for bound in list(owned.values()) + list(slots.values()))
            gen.line(f'then {frees}return Nothing')
            gen.line('else do')
            gen.indent()

        values = []
        if callable_.return_type != VOID:
            conv = self.type_conv.f_to_h(callable_.return_type, callable_.return_transfer)
            values.append(convert(gen, Var('result'), conv))
        for i, arg in enumerate(callable_.args):
            if arg.direction == Direction.IN:
                continue
            slot = slots[i]
            conv = self.type_conv.f_to_h(arg.type, arg.transfer)
            values.append(convert(gen, M(App('peek', Var(slot))), conv))
            if i in owned:
                gen.line(f'free {owned[i]}')
            gen.line(f'free {slot}')

        if not values:
            value = '()'
        elif len(values) == 1:
            value = values[0]
        else:
            value = '(' + ', '.join(values) + ')'
        if nullable:
            value = f'(Just {value})'
        gen.line(f'return {value}')

        if check_null:
            gen.dedent()
            gen.dedent()
