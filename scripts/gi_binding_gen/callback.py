"""
Signal binding generation module

Generates, per object signal, the Haskell callback type and an on<Signal>
function that connects a Haskell callback through a trampoline. The
trampoline receives the raw arguments from the native closure marshaller,
which only understands basic scalars and C strings.
"""

from typing import TYPE_CHECKING

from .codegen import CodeGen
from .errors import ConversionError
from .ir import BasicType, Direction, TBasicType
from .marshal import App, Conversion, IDENTITY, M, Var, prime
from .naming import escape_reserved, uc_first, upper_name
from .types import CSTRING, con, io, klass, ptr
from .func import VOID, convert

if TYPE_CHECKING:
    from .config import Config
    from .func import FuncGenerator
    from .ir import Callable, Name, Signal, Type
    from .types import TypeMapper, TypeRep

STRING_TYPES = (BasicType.UTF8, BasicType.FILENAME)

NULLABLE_NEW_CSTRING = Conversion('maybe (return nullPtr) newCString', monadic=True)


def signal_identifier(signal: str) -> str:
    """button-press-event -> buttonPressEvent"""
    first, *rest = signal.split('-')
    return first + ''.join(uc_first(w) for w in rest if w)


def _is_string(t: 'Type') -> bool:
    return isinstance(t, TBasicType) and t.basic in STRING_TYPES


class SignalGenerator:
    """Generates signal connection wrappers and their trampolines"""

    def __init__(self, cfg: 'Config', type_conv: 'TypeMapper', func_gen: 'FuncGenerator'):
        self.cfg = cfg
        self.type_conv = type_conv
        self.func_gen = func_gen

    def callback_type_name(self, owner: 'Name', signal: 'Name') -> str:
        return upper_name(self.cfg, owner) + uc_first(signal_identifier(signal.name)) + 'Callback'

    def connector_name(self, owner: 'Name', signal: 'Name') -> str:
        return 'on' + upper_name(self.cfg, owner) + uc_first(signal_identifier(signal.name))

    def generate(self, signal_name: 'Name', signal: 'Signal', owner: 'Name', gen: CodeGen):
        cb = signal.callable
        owner_ = upper_name(self.cfg, owner)
        root = upper_name(self.cfg, self.cfg.root_object)
        cb_type = self.callback_type_name(owner, signal_name)
        connector = self.connector_name(owner, signal_name)

        gen.line(f'-- signal {owner_}::{signal_name.name}')

        # Callback prototype; the object itself is not passed to the callback
        with gen.group():
            gen.line(f'type {cb_type} =')
            with gen.indented():
                for arg in cb.in_args:
                    gen.line(f'{self.type_conv.safe_type(arg.type)} ->')
                gen.line(str(io(self.callback_result_type(cb))))

        with gen.group():
            gen.line(f'{connector} :: {klass(root)} a => a -> {cb_type} -> IO Word32')
            gen.line(f'{connector} obj cb = connectSignal obj "{signal_name.name}" cb\' where')
            with gen.indented():
                self._gen_trampoline(cb, root, gen)

    def callback_result_type(self, cb: 'Callable') -> 'TypeRep':
        """Result of the Haskell callback

        Only a string return can signal "no value" to the native side.
        """
        shape = self.func_gen.out_type(cb)
        if cb.may_return_null and not self._nullable_string(cb):
            return shape.args[0]
        return shape

    def marshall_type(self, t: 'Type') -> 'TypeRep':
        """Type the closure marshaller hands to (or expects from) the trampoline"""
        if _is_string(t):
            return CSTRING
        if isinstance(t, TBasicType):
            return self.type_conv.safe_type(t)
        raise ConversionError(self.type_conv.safe_type(t).show(), 'a signal trampoline argument')

    def _nullable_string(self, cb: 'Callable') -> bool:
        return cb.may_return_null and _is_string(cb.return_type) and not cb.out_args

    def _gen_trampoline(self, cb: 'Callable', root: str, gen: CodeGen):
        gen.line(f"cb' :: {ptr(con(root))} ->")
        with gen.indented():
            for arg in cb.args:
                mt = self.marshall_type(arg.type)
                if arg.direction != Direction.IN:
                    mt = ptr(mt)
                gen.line(f'{mt} ->')
            ret_type = self.marshall_type(cb.return_type)
            gen.line(str(io(ret_type)))

        names = [escape_reserved(a.name) for a in cb.args]
        gen.line("cb' _ " + ''.join(n + ' ' for n in names) + '= do')
        with gen.indented():
            in_values = []
            out_values = []
            for name, arg in zip(names, cb.args):
                if arg.direction == Direction.OUT:
                    out_values.append((prime(name), name, arg))
                    continue
                e = Var(name) if arg.direction == Direction.IN else M(App('peek', Var(name)))
                value = convert(gen, e, self._from_marshall(arg.type))
                in_values.append(value)
                if arg.direction == Direction.INOUT:
                    out_values.append((prime(value), name, arg))

            results = ([] if cb.return_type == VOID else ['ret']) + [v for v, _, _ in out_values]
            call = ' '.join(['cb'] + in_values)
            if not results:
                gen.line(call)
            elif len(results) == 1:
                gen.line(f'{results[0]} <- {call}')
            else:
                gen.line(f'({", ".join(results)}) <- {call}')

            # Out arguments are written back through their pointers
            for value, slot, arg in out_values:
                bound = convert(gen, Var(value), self._to_marshall(arg.type))
                gen.line(f'poke {slot} {bound}')

            if cb.return_type == VOID:
                gen.line('return ()')
            else:
                conv = self._to_marshall(cb.return_type)
                if self._nullable_string(cb):
                    conv = NULLABLE_NEW_CSTRING
                gen.line(f'return {convert(gen, Var("ret"), conv)}')

    def _from_marshall(self, t: 'Type') -> Conversion:
        if _is_string(t):
            return self.type_conv.f_to_h(t)
        self.marshall_type(t)
        return IDENTITY

    def _to_marshall(self, t: 'Type') -> Conversion:
        if _is_string(t):
            return self.type_conv.h_to_f(t)
        self.marshall_type(t)
        return IDENTITY
