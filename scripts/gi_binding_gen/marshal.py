"""
Marshalling expressions

A conversion applied to a value becomes a chain of do-notation bindings.
Every step binds a fresh name by priming the previous one, so converting
'label' with newCString yields:

    label' <- newCString label
"""

from dataclasses import dataclass
from typing import Optional, Union

from .errors import GenerationError


@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class App:
    """Pure application, bound with let"""
    fn: str
    arg: 'Expr'


@dataclass(frozen=True)
class M:
    """Monadic expression, bound with <-"""
    expr: 'Expr'


@dataclass(frozen=True)
class EStr:
    """Verbatim monadic expression bound to a given name"""
    name: str
    text: str


Expr = Union[Var, App, M, EStr]


@dataclass(frozen=True)
class Conversion:
    """A single conversion step; fn=None is the identity"""
    fn: Optional[str] = None
    monadic: bool = False
    allocates: bool = False   # result must be freed unless ownership moves

    @property
    def is_identity(self) -> bool:
        return self.fn is None

    def __call__(self, e: Expr) -> Expr:
        if self.fn is None:
            return e
        app = App(self.fn, e)
        return M(app) if self.monadic else app


IDENTITY = Conversion()


def prime(s: str) -> str:
    return s + "'"


def expr_name(e: Expr) -> str:
    """Name the value of an expression will be bound to"""
    if isinstance(e, Var):
        return e.name
    elif isinstance(e, App):
        return prime(expr_name(e.arg))
    elif isinstance(e, M):
        return expr_name(e.expr)
    elif isinstance(e, EStr):
        return e.name
    raise GenerationError(f'expr_name: unexpected {e!r}')


def code(e: Expr) -> tuple[str, list[str]]:
    """Lower an expression into (bound name, do-notation lines)"""
    steps = _do_steps(e)
    if not steps:
        return expr_name(e), []
    return steps[0][1], [_do_str(step) for step in reversed(steps)]


def _do_steps(e: Expr) -> list[tuple[str, str, str]]:
    # (kind, bound name, expression text), outermost step first
    if isinstance(e, Var):
        return []
    elif isinstance(e, App):
        inner = expr_name(e.arg)
        return [('let', prime(inner), f'{e.fn} {inner}')] + _do_steps(e.arg)
    elif isinstance(e, M) and isinstance(e.expr, App):
        inner = expr_name(e.expr.arg)
        return [('bind', prime(inner), f'{e.expr.fn} {inner}')] + _do_steps(e.expr.arg)
    elif isinstance(e, M) and isinstance(e.expr, EStr):
        return [('bind', e.expr.name, e.expr.text)]
    raise GenerationError(f'cannot lower expression {e!r}')


def _do_str(step: tuple[str, str, str]) -> str:
    kind, name, text = step
    if kind == 'let':
        return f'let {name} = {text}'
    return f'{name} <- {text}'
