"""Tests for whole-module assembly."""

import logging
import os

import pytest

from gi_binding_gen import Catalog, Config, Generator, Name, UnresolvableReferenceError


@pytest.fixture
def generator(cfg):
    return Generator(cfg, {'Gtk': ['GLib', 'GObject'], 'GObject': ['GLib']})


@pytest.fixture
def gtk(generator):
    return generator.generate_module('Gtk')


def line_index(source, text):
    return source.splitlines().index(text)


class TestLayout:
    def test_header(self, gtk):
        assert gtk.startswith('\n'.join([
            '-- Generated code.',
            '',
            '{-# LANGUAGE ForeignFunctionInterface #-}',
            '',
            'module Gtk where',
            '',
            'import Data.Int',
            'import Data.Word',
            'import Foreign',
            'import Foreign.C',
            '',
            'import GLib',
            'import GObject',
            '',
        ]))

    def test_no_dependency_imports(self, cfg):
        source = Generator(cfg).generate_module('GLib')
        assert 'import GObject' not in source
        assert 'import Foreign.C' in source

    def test_configured_imports(self, catalog, cfg):
        cfg = Config(catalog=catalog, prefixes=cfg.prefixes, imports=('GLib',))
        source = Generator(cfg).generate_module('Gtk')
        assert 'import GLib' in source.splitlines()

    def test_foreign_declarations_precede_wrappers(self, gtk):
        lines = gtk.splitlines()
        foreign = [i for i, line in enumerate(lines) if line.startswith('foreign import')]
        assert foreign
        assert max(foreign) < line_index(gtk, 'gtk_MAJOR_VERSION :: Int32')

    def test_items_keep_catalog_order(self, gtk):
        assert (line_index(gtk, '-- constant MAJOR_VERSION')
                < line_index(gtk, '-- enum ResponseType')
                < line_index(gtk, '-- object Widget')
                < line_index(gtk, '-- object Button'))

    def test_single_blank_line_between_fragments(self, gtk):
        assert '\n\n\n' not in gtk
        assert gtk.endswith('\n') and not gtk.endswith('\n\n')

    def test_deterministic(self, generator):
        assert generator.generate_module('Gtk') == generator.generate_module('Gtk')


class TestItems:
    def test_objects(self, gtk):
        assert 'data GtkButton = GtkButton (Ptr GtkButton)' in gtk
        assert 'class GtkContainerKlass o => GtkButtonKlass o' in gtk
        assert 'instance IGtkBuildable GtkButton where' in gtk
        assert 'onGtkButtonActivateLink :: GObjectKlass a => a -> GtkButtonActivateLinkCallback -> IO Word32' in gtk

    def test_object_outside_hierarchy(self, gtk):
        assert 'data GtkOrphan = GtkOrphan (Ptr GtkOrphan)' in gtk
        assert 'GtkOrphanKlass' not in gtk

    def test_interface(self, gtk):
        lines = gtk.splitlines()
        start = lines.index('class IGtkBuildable a where')
        assert lines[start + 1] == '    toGtkBuildable :: a -> GtkBuildable'
        assert 'instance IGtkBuildable GtkBuildable where' in lines

    def test_duplicate_interface_method_is_suppressed(self, gtk):
        assert '-- method GtkBuildable::set_name' in gtk
        assert '-- method GtkBuildable::get_name' not in gtk
        assert gtk.count('gtkBuildableGetName ::') == 1

    def test_deny_list(self, gtk):
        assert 'gtk_dummy_decl' not in gtk

    def test_configured_ignores(self, catalog, cfg):
        cfg = Config(catalog=catalog, prefixes=cfg.prefixes, ignores={'check_version'})
        source = Generator(cfg).generate_module('Gtk')
        assert 'gtk_check_version' not in source
        assert 'gtk_events_pending' in source


class TestBootstrap:
    def test_glib(self, generator, gtk):
        glib = generator.generate_module('GLib')
        assert 'type GType = Word' in glib
        assert 'data GList a = GList (Ptr (GList a))' in glib
        assert 'type GType = Word' not in gtk

    def test_gobject(self, generator, gtk):
        gobject = generator.generate_module('GObject')
        assert 'connectSignal :: GObjectKlass o => o -> String -> a -> IO Word32' in gobject
        assert "castTo :: (GObjectKlass o, GObjectKlass o') =>" in gobject
        assert '    gtk2hs_closure_new :: StablePtr a -> IO (Ptr GClosure)' in gobject
        assert 'castToGObject = toGObject' in gobject
        assert 'connectSignal ::' not in gtk

    def test_bootstrap_precedes_foreign_declarations(self, generator):
        gobject = generator.generate_module('GObject')
        assert (line_index(gobject, 'connectSignal object signal fn = do')
                < line_index(gobject, 'foreign import ccall unsafe "g_initially_unowned_get_type"'))

    def test_custom_root(self):
        catalog = Catalog.from_dict({'items': [
            {'name': 'Base.Thing', 'kind': 'object'},
            {'name': 'Base.Closure', 'kind': 'struct'},
        ]})
        cfg = Config(catalog=catalog, root_object=Name('Base', 'Thing'))
        source = Generator(cfg).generate_module('Base')
        assert 'connectSignal :: BaseThingKlass o => o -> String -> a -> IO Word32' in source
        assert 'castToBaseThing = toBaseThing' in source


class TestOutput:
    def test_generate_all_writes_modules(self, generator, tmp_path, capsys):
        paths = generator.generate_all(['GLib', 'Gtk'], str(tmp_path / 'out'))
        assert [os.path.basename(p) for p in paths] == ['GLib.hs', 'Gtk.hs']
        written = (tmp_path / 'out' / 'Gtk.hs').read_text()
        assert written == generator.generate_module('Gtk')
        assert '=== Generating Haskell bindings:' in capsys.readouterr().out

    def test_missing_reference_aborts_the_namespace(self):
        catalog = Catalog.from_dict({'items': [
            {'name': 'Gtk.frob', 'kind': 'function', 'symbol': 'gtk_frob',
             'callable': {'args': [{'name': 'w', 'type': 'Gtk.Missing'}]}},
        ]})
        with pytest.raises(UnresolvableReferenceError):
            Generator(Config(catalog=catalog)).generate_module('Gtk')

    def test_skipped_items_are_logged(self, generator, caplog):
        caplog.set_level(logging.INFO, logger='gi_binding_gen')
        generator.generate_module('Gtk')
        assert 'skipping ignored item Gtk.dummy_decl' in caplog.text
