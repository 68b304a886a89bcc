"""Tests for the command-line entry points."""

import json
import logging

import pytest

import gen_all
import gen_haskell

BROKEN = {'items': [
    {'name': 'Gtk.frob', 'kind': 'function', 'symbol': 'gtk_frob',
     'callable': {'args': [{'name': 'w', 'type': 'Gtk.Missing'}]}},
]}


@pytest.fixture
def broken_path(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text(json.dumps(BROKEN))
    return str(path)


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger('gi_binding_gen')
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestGenHaskell:
    def test_writes_requested_namespaces(self, catalog_path, tmp_path, capsys):
        out = tmp_path / 'out'
        assert gen_haskell.main([catalog_path, '-n', 'GLib', '-o', str(out)]) == 0
        assert (out / 'GLib.hs').read_text().startswith('-- Generated code.')
        assert not (out / 'Gtk.hs').exists()
        assert 'GLib =>' in capsys.readouterr().out

    def test_generation_error_exits_with_status_1(self, broken_path, tmp_path, capsys):
        assert gen_haskell.main([broken_path, '-o', str(tmp_path / 'out')]) == 1
        err = capsys.readouterr().err
        assert '  >> error: Did not find Gtk.Missing in input.' in err.splitlines()

    @pytest.mark.parametrize('flags, level', [
        ([], logging.WARNING),
        (['-v'], logging.INFO),
        (['-vv'], logging.DEBUG),
    ])
    def test_verbosity(self, catalog_path, tmp_path, flags, level):
        gen_haskell.main([catalog_path, '-n', 'GLib', '-o', str(tmp_path)] + flags)
        assert logging.getLogger('gi_binding_gen').level == level


class TestGenAll:
    def test_good_namespace(self, catalog_path, tmp_path):
        namespace, ok, output = gen_all.run_namespace((catalog_path, 'GLib', str(tmp_path)))
        assert (namespace, ok) == ('GLib', True)
        assert output == str(tmp_path / 'GLib.hs')
        assert (tmp_path / 'GLib.hs').exists()

    def test_failing_namespace_is_reported(self, broken_path, tmp_path):
        namespace, ok, output = gen_all.run_namespace((broken_path, 'Gtk', str(tmp_path)))
        assert (namespace, ok) == ('Gtk', False)
        assert output == 'error: Did not find Gtk.Missing in input.'
        assert not (tmp_path / 'Gtk.hs').exists()
