"""Shared fixtures: a small GObject/Gtk catalog."""

import json

import pytest

from gi_binding_gen import Catalog, Config, Hierarchy, TypeMapper

PREFIXES = {'GLib': 'G', 'GObject': 'G', 'Gtk': 'Gtk'}


def fn(symbol, args=(), ret='none', **extra):
    callable_ = {'args': list(args), 'return': ret}
    for key in ('may_return_null', 'return_transfer'):
        if key in extra:
            callable_[key] = extra.pop(key)
    return {'symbol': symbol, 'callable': callable_, **extra}


def arg(name, type_, **extra):
    return {'name': name, 'type': type_, **extra}


CATALOG = {
    'items': [
        {'name': 'GLib.Error', 'kind': 'boxed'},
        {'name': 'GObject.Object', 'kind': 'object'},
        {'name': 'GObject.InitiallyUnowned', 'kind': 'object',
         'fields': [{'name': 'parent_instance', 'type': 'GObject.Object'}]},
        {'name': 'GObject.Closure', 'kind': 'struct'},
        {'name': 'Gtk.MAJOR_VERSION', 'kind': 'constant', 'type': 'int32', 'value': 3},
        {'name': 'Gtk.STOCK_OK', 'kind': 'constant', 'type': 'utf8', 'value': 'gtk-ok'},
        {'name': 'Gtk.ResponseType', 'kind': 'enum', 'members': [
            {'name': 'none', 'value': -1},
            {'name': 'ok', 'value': -5},
            {'name': 'yes', 'value': 1},
            {'name': 'accept', 'value': 1},
        ]},
        {'name': 'Gtk.AccelFlags', 'kind': 'flags', 'members': [
            {'name': 'visible', 'value': 1},
            {'name': 'locked', 'value': 2},
        ]},
        {'name': 'Gtk.Border', 'kind': 'struct',
         'fields': [{'name': 'left', 'type': 'int16'}]},
        {'name': 'Gtk.Callback', 'kind': 'callback', 'callable': {
            'args': [arg('widget', 'Gtk.Widget')]}},
        {'name': 'Gtk.Widget', 'kind': 'object',
         'fields': [{'name': 'parent_instance', 'type': 'GObject.InitiallyUnowned'}],
         'methods': [
             {'name': 'show', **fn('gtk_widget_show')},
             {'name': 'set_name', **fn('gtk_widget_set_name', [arg('name', 'utf8')])},
             {'name': 'get_name', **fn('gtk_widget_get_name', ret='utf8',
                                       may_return_null=True)},
             {'name': 'get_size_request', **fn('gtk_widget_get_size_request', [
                 arg('width', 'int32', direction='out'),
                 arg('height', 'int32', direction='out'),
             ])},
         ],
         'signals': [
             {'name': 'show', 'callable': {}},
             {'name': 'query-tooltip', 'callable': {
                 'args': [arg('x', 'int32'), arg('y', 'int32'),
                          arg('keyboard_mode', 'boolean')],
                 'return': 'boolean'}},
         ]},
        {'name': 'Gtk.Container', 'kind': 'object',
         'fields': [{'name': 'widget', 'type': 'Gtk.Widget'}],
         'methods': [
             {'name': 'add', **fn('gtk_container_add', [arg('widget', 'Gtk.Widget')])},
         ]},
        {'name': 'Gtk.Button', 'kind': 'object',
         'fields': [{'name': 'bin', 'type': 'Gtk.Container'}],
         'interfaces': ['Gtk.Buildable'],
         'methods': [
             {'name': 'new_with_label', 'flags': ['constructor'],
              **fn('gtk_button_new_with_label', [arg('label', 'utf8')], ret='Gtk.Widget')},
             {'name': 'set_label', **fn('gtk_button_set_label', [arg('label', 'utf8')])},
         ],
         'signals': [
             {'name': 'activate-link', 'callable': {
                 'args': [arg('uri', 'utf8')], 'return': 'utf8',
                 'may_return_null': True}},
         ]},
        {'name': 'Gtk.Buildable', 'kind': 'interface', 'methods': [
            {'name': 'set_name', **fn('gtk_buildable_set_name', [arg('name', 'utf8')])},
            {'name': 'get_name', **fn('gtk_buildable_get_name', ret='utf8')},
        ]},
        {'name': 'Gtk.buildable_get_name', 'kind': 'function',
         **fn('gtk_buildable_get_name', [arg('buildable', 'Gtk.Buildable')], ret='utf8')},
        {'name': 'Gtk.Orphan', 'kind': 'object',
         'fields': [{'name': 'border', 'type': 'Gtk.Border'}]},
        {'name': 'Gtk.check_version', 'kind': 'function',
         **fn('gtk_check_version', [arg('required_major', 'uint32')], ret='utf8',
              may_return_null=True)},
        {'name': 'Gtk.events_pending', 'kind': 'function',
         **fn('gtk_events_pending', ret='boolean')},
        {'name': 'Gtk.dummy_decl', 'kind': 'function', **fn('gtk_dummy_decl')},
    ],
}


@pytest.fixture
def catalog():
    return Catalog.from_dict(CATALOG)


@pytest.fixture
def cfg(catalog):
    return Config(catalog=catalog, prefixes=PREFIXES)


@pytest.fixture
def hierarchy(cfg):
    return Hierarchy.build(cfg)


@pytest.fixture
def type_conv(cfg, hierarchy):
    return TypeMapper(cfg, hierarchy)


@pytest.fixture
def catalog_path(tmp_path):
    path = tmp_path / 'catalog.json'
    path.write_text(json.dumps(CATALOG))
    return str(path)
