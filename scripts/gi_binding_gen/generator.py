"""
Main generator module

Orchestrates all components to generate one Haskell module per namespace.
"""

import logging
import os
from typing import Mapping, Optional, Sequence

from .callback import SignalGenerator
from .codegen import CodeGen, render, with_comment
from .config import Config
from .enum import EnumGenerator
from .func import FuncGenerator
from .hierarchy import Hierarchy, HierarchyGenerator
from .ir import (
    API, Boxed, Callback, Constant, Enumeration, Flags, Function, Interface,
    Name, Object, Struct, Union_,
)
from .naming import uc_first, upper_name
from .struct import StructGenerator, data_decl
from .types import TypeMapper, interface_class, klass

logger = logging.getLogger(__name__)

# Items that cannot be bound: private declarations, and functions taking
# va_list or whose types are missing from the introspection data.
IGNORE = frozenset({
    'dummy_decl',
    'IOModule',
    'io_modules_load_all_in_directory',
    'io_modules_load_all_in_directory_with_scope',
    'signal_set_va_marshaller',
})

FFI_IMPORTS = ('Data.Int', 'Data.Word', 'Foreign', 'Foreign.C')


def module_name(namespace: str) -> str:
    return uc_first(namespace)


class Generator:
    """Main binding generator"""

    def __init__(self, cfg: Config, module_deps: Optional[Mapping[str, Sequence[str]]] = None):
        self.cfg = cfg
        self.module_deps = dict(module_deps or {})

    def is_ignored(self, name: Name) -> bool:
        return name.name in IGNORE or name.name in self.cfg.ignores

    def imports(self, namespace: str) -> list[str]:
        """Namespaces imported by a module, without duplicates"""
        result = []
        for ns in list(self.cfg.imports) + list(self.module_deps.get(namespace, ())):
            if ns != namespace and ns not in result:
                result.append(ns)
        return result

    def generate_all(self, namespaces: Sequence[str], output_root: str) -> list[str]:
        """Generate and write every namespace, returning the written paths"""
        print('=== Generating Haskell bindings:')
        os.makedirs(output_root, exist_ok=True)
        return [self.write_module(ns, output_root) for ns in namespaces]

    def write_module(self, namespace: str, output_root: str) -> str:
        path = os.path.join(output_root, module_name(namespace) + '.hs')
        print(f'  {namespace} => {path}')
        source = self.generate_module(namespace)
        with open(path, 'w', newline='\n') as f:
            f.write(source)
        return path

    def generate_module(self, namespace: str) -> str:
        """Generate the complete source of one namespace's module"""
        cfg = self.cfg
        hierarchy = Hierarchy.build(cfg)
        type_conv = TypeMapper(cfg, hierarchy)
        func_gen = FuncGenerator(cfg, type_conv)
        generators = _Generators(
            func=func_gen,
            enum=EnumGenerator(cfg, type_conv),
            struct=StructGenerator(cfg),
            hierarchy=HierarchyGenerator(cfg, hierarchy),
            signal=SignalGenerator(cfg, type_conv, func_gen),
        )

        body = CodeGen()
        count = 0
        for name, api in cfg.catalog.namespace(namespace):
            if self.is_ignored(name):
                logger.info('skipping ignored item %s', name)
                continue
            self._gen_code(name, api, generators, body)
            count += 1
        logger.debug('%s: generated %d items', namespace, count)

        partition = body.finalize()
        out = CodeGen()
        self._gen_header(namespace, out)
        self._gen_bootstrap(namespace, out)
        return render(out.fragments() + partition.foreign + partition.code) + '\n'

    def _gen_code(self, name: Name, api: API, g: '_Generators', gen: CodeGen):
        if isinstance(api, Constant):
            g.enum.generate_constant(name, api, gen)
        elif isinstance(api, Function):
            g.func.generate_function(name, api, gen)
        elif isinstance(api, Enumeration):
            g.enum.generate_enum(name, api, gen)
        elif isinstance(api, Flags):
            g.enum.generate_flags(name, api, gen)
        elif isinstance(api, (Callback, Struct, Union_, Boxed)):
            g.struct.generate(name, api, gen)
        elif isinstance(api, Object):
            self._gen_object(name, api, g, gen)
        elif isinstance(api, Interface):
            self._gen_interface(name, api, g, gen)

    def _gen_object(self, name: Name, obj: Object, g: '_Generators', gen: CodeGen):
        gen.line(f'-- object {name.name}')
        with gen.group():
            gen.line(data_decl(upper_name(self.cfg, name)))
        g.hierarchy.generate(name, gen)
        for method_name, method in obj.methods:
            g.func.generate_method(name, method_name, method, gen)
        for iface in obj.interfaces:
            g.hierarchy.gen_interface_instance(name, iface, gen)
        for signal_name, signal in obj.signals:
            g.signal.generate(signal_name, signal, name, gen)

    def _gen_interface(self, name: Name, iface: Interface, g: '_Generators', gen: CodeGen):
        name_ = upper_name(self.cfg, name)
        gen.line(f'-- interface {name.name}')
        with gen.group():
            gen.line(data_decl(name_))
        with gen.group():
            gen.line(f'class {interface_class(name_)} a where')
            with gen.indented():
                gen.line(f'to{name_} :: a -> {name_}')
        with gen.group():
            gen.line(f'instance {interface_class(name_)} {name_} where')
            with gen.indented():
                gen.line(f'to{name_} = id')
        for method_name, method in iface.methods:
            # Some interface methods are also exported as plain functions
            if self.cfg.catalog.has_function_symbol(method.symbol):
                logger.info('skipping %s::%s, %s is bound as a function',
                            name, method_name.name, method.symbol)
                continue
            g.func.generate_method(name, method_name, method, gen)

    def _gen_header(self, namespace: str, gen: CodeGen):
        gen.line('-- Generated code.')
        with gen.group():
            gen.line('{-# LANGUAGE ForeignFunctionInterface #-}')
        with gen.group():
            gen.line(f'module {module_name(namespace)} where')
        with gen.group():
            for imp in FFI_IMPORTS:
                gen.line(f'import {imp}')
        deps = self.imports(namespace)
        if deps:
            with gen.group():
                for dep in deps:
                    gen.line(f'import {module_name(dep)}')

    def _gen_bootstrap(self, namespace: str, gen: CodeGen):
        if namespace == 'GLib':
            self._gen_glib_bootstrap(gen)
        if namespace == self.cfg.root_object.namespace:
            self._gen_object_bootstrap(gen)

    def _gen_glib_bootstrap(self, gen: CodeGen):
        with gen.group():
            gen.line('type GType = Word')
        with gen.group():
            gen.line('data GArray a = GArray (Ptr (GArray a))')
            gen.line('data GHashTable a b = GHashTable (Ptr (GHashTable a b))')
            gen.line('data GList a = GList (Ptr (GList a))')
            gen.line('data GSList a = GSList (Ptr (GSList a))')

    def _gen_object_bootstrap(self, gen: CodeGen):
        root = upper_name(self.cfg, self.cfg.root_object)
        root_klass = klass(root)
        closure = upper_name(self.cfg, Name(self.cfg.root_object.namespace, 'Closure'))

        gen.line('-- Safe casting machinery')
        with gen.group():
            gen.line('foreign import ccall unsafe "check_object_type"')
            with gen.indented():
                gen.line(f'c_check_object_type :: Ptr {root} -> GType -> CInt')
        with gen.group():
            gen.line(f"castTo :: ({root_klass} o, {root_klass} o') =>")
            with gen.indented():
                gen.line("GType -> String -> o -> o'")
            gen.line('castTo t typeName obj =')
            with gen.indented():
                gen.line(f'let ptrObj = un{root} (to{root} obj) in')
                gen.line('if c_check_object_type ptrObj t == 1')
                with gen.indented():
                    gen.line(f'then unsafeCast{root} ({root} ptrObj)')
                    gen.line('else error $ "Cannot cast object to " ++ typeName')

        gen.line('-- Connecting objects to signals')
        with gen.group():
            gen.line('foreign import ccall unsafe "gtk2hs_closure_new"')
            with gen.indented():
                gen.line(f'gtk2hs_closure_new :: StablePtr a -> IO (Ptr {closure})')
        with gen.group():
            gen.line("foreign import ccall \"g_signal_connect_closure\" g_signal_connect_closure' ::")
            with gen.indented():
                gen.line(with_comment(f'Ptr {root} -> ', 'instance'))
                gen.line(with_comment('CString -> ', 'detailed_signal'))
                gen.line(with_comment(f'Ptr {closure} -> ', 'closure'))
                gen.line(with_comment('CInt -> ', 'after'))
                gen.line('IO Word32')
        with gen.group():
            gen.line(f'connectSignal :: {root_klass} o => o -> String -> a -> IO Word32')
            gen.line('connectSignal object signal fn = do')
            with gen.indented():
                gen.line('closure <- newStablePtr fn >>= gtk2hs_closure_new')
                gen.line("signal' <- newCString signal")
                gen.line(f"let object' = un{root} (to{root} object)")
                gen.line("handler <- g_signal_connect_closure' object' signal' closure 0")
                gen.line("free signal'")
                gen.line('return handler')


class _Generators:
    """Per-run item generators sharing one hierarchy and type mapper"""

    def __init__(self, func: FuncGenerator, enum: EnumGenerator, struct: StructGenerator,
                 hierarchy: HierarchyGenerator, signal: SignalGenerator):
        self.func = func
        self.enum = enum
        self.struct = struct
        self.hierarchy = hierarchy
        self.signal = signal
