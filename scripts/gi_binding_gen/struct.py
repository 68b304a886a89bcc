"""
Struct binding generation module

Structs, unions, boxed types and callbacks are exposed as opaque data types
wrapping a pointer; their contents are only reachable through functions.
"""

from typing import TYPE_CHECKING

from .codegen import CodeGen
from .ir import Boxed, Callback, Struct, Union_
from .naming import upper_name

if TYPE_CHECKING:
    from .config import Config
    from .ir import API, Name

KIND_LABELS = {
    Struct: 'struct',
    Union_: 'union',
    Boxed: 'boxed',
    Callback: 'callback',
}


def data_decl(name_: str) -> str:
    """Opaque data declaration: data X = X (Ptr X)"""
    return f'data {name_} = {name_} (Ptr {name_})'


class StructGenerator:
    """Generates opaque pointer wrappers"""

    def __init__(self, cfg: 'Config'):
        self.cfg = cfg

    def generate(self, name: 'Name', api: 'API', gen: CodeGen):
        gen.line(f'-- {KIND_LABELS[type(api)]} {name.name}')
        with gen.group():
            gen.line(data_decl(upper_name(self.cfg, name)))
