"""Tests for the type mapping resolver."""

import pytest

from gi_binding_gen import (
    Arg, BasicType, ConversionError, Direction, Name, TArray, TBasicType, TError,
    TGHash, TGList, TInterface, Transfer, TypeMapper, UnresolvableReferenceError,
)
from gi_binding_gen.types import BASIC_TYPES, READ_AND_FREE_CSTRING, TypeRep, con, maybe, ptr, tuple_of


def basic(b):
    return TBasicType(b)


def iface(dotted):
    return TInterface(Name.parse(dotted))


class TestTypeRep:
    def test_show(self):
        assert con('Int32').show() == 'Int32'
        assert ptr(con('GtkWidget')).show() == 'Ptr GtkWidget'
        assert ptr(ptr(con('Int32'))).show() == 'Ptr (Ptr Int32)'
        assert maybe(tuple_of([con('Int32'), con('Bool')])).show() == 'Maybe (Int32, Bool)'
        assert con('GHashTable', con('[Char]'), con('Int32')).show() == 'GHashTable [Char] Int32'

    def test_structural_equality(self):
        assert ptr(con('A')) == TypeRep('Ptr', (TypeRep('A'),))


class TestBasicTypes:
    @pytest.mark.parametrize('b, safe, wire', [
        (BasicType.NONE, '()', '()'),
        (BasicType.BOOLEAN, 'Bool', 'CInt'),
        (BasicType.INT8, 'Int8', 'Int8'),
        (BasicType.UINT32, 'Word32', 'Word32'),
        (BasicType.INT64, 'Int64', 'Int64'),
        (BasicType.DOUBLE, 'Double', 'Double'),
        (BasicType.GTYPE, 'Word', 'GType'),
        (BasicType.UTF8, '[Char]', 'CString'),
        (BasicType.FILENAME, '[Char]', 'CString'),
    ])
    def test_mapping(self, type_conv, b, safe, wire):
        assert type_conv.safe_type(basic(b)).show() == safe
        assert type_conv.wire_type(basic(b)).show() == wire

    @pytest.mark.parametrize('b', [
        BasicType.INT8, BasicType.UINT8, BasicType.INT16, BasicType.UINT16,
        BasicType.INT32, BasicType.UINT32, BasicType.INT64, BasicType.UINT64,
        BasicType.FLOAT, BasicType.DOUBLE,
    ])
    def test_identical_representations_convert_by_identity(self, type_conv, b):
        assert type_conv.h_to_f(basic(b)).is_identity
        assert type_conv.f_to_h(basic(b)).is_identity

    def test_boolean(self, type_conv):
        assert type_conv.h_to_f(basic(BasicType.BOOLEAN)).fn == '(fromIntegral . fromEnum)'
        assert type_conv.f_to_h(basic(BasicType.BOOLEAN)).fn == '(/= 0)'

    def test_string(self, type_conv):
        to_wire = type_conv.h_to_f(basic(BasicType.UTF8))
        assert to_wire.fn == 'newCString'
        assert to_wire.monadic and to_wire.allocates
        assert type_conv.f_to_h(basic(BasicType.UTF8)).fn == 'peekCString'

    def test_owned_string_is_freed(self, type_conv):
        conv = type_conv.f_to_h(basic(BasicType.UTF8), Transfer.EVERYTHING)
        assert conv == READ_AND_FREE_CSTRING

    def test_in_out_roundtrip_preserves_values(self):
        # Haskell semantics of the scalar conversions
        semantics = {
            None: lambda v: v,
            '(fromIntegral . fromEnum)': int,
            '(/= 0)': lambda v: v != 0,
            'fromIntegral': lambda v: v,
        }
        samples = {
            BasicType.BOOLEAN: [True, False],
            BasicType.INT8: [-128, 0, 127],
            BasicType.UINT16: [0, 65535],
            BasicType.INT64: [-2 ** 63, 2 ** 63 - 1],
            BasicType.DOUBLE: [-1.5, 0.0, 2.25],
            BasicType.GTYPE: [0, 80],
        }
        for b, values in samples.items():
            mapping = BASIC_TYPES[b]
            to_wire = semantics[mapping.h_to_f.fn]
            to_safe = semantics[mapping.f_to_h.fn]
            for v in values:
                assert to_safe(to_wire(v)) == v


class TestContainers:
    def test_list(self, type_conv):
        t = TGList(iface('Gtk.Widget'))
        assert type_conv.safe_type(t).show() == 'GList GtkWidget'
        assert type_conv.wire_type(t).show() == 'Ptr (GList GtkWidget)'
        assert type_conv.h_to_f(t).fn == '(\\(GList x) -> x)'
        assert type_conv.f_to_h(t).fn == 'GList'

    def test_array_and_hash(self, type_conv):
        assert type_conv.safe_type(TArray(basic(BasicType.INT32))).show() == 'GArray Int32'
        t = TGHash(basic(BasicType.UTF8), basic(BasicType.INT32))
        assert type_conv.safe_type(t).show() == 'GHashTable [Char] Int32'

    def test_error(self, type_conv):
        assert type_conv.safe_type(TError()).show() == 'GError'
        assert type_conv.wire_type(TError()).show() == 'Ptr GError'


class TestReferences:
    def test_enum(self, type_conv):
        t = iface('Gtk.ResponseType')
        assert type_conv.safe_type(t).show() == 'GtkResponseType'
        assert type_conv.wire_type(t).show() == 'Word'
        assert type_conv.h_to_f(t).fn == '(fromIntegral . fromEnum)'
        assert type_conv.f_to_h(t).fn == '(toEnum . fromIntegral)'

    def test_flags(self, type_conv):
        t = iface('Gtk.AccelFlags')
        assert type_conv.wire_type(t).show() == 'Word'
        assert type_conv.h_to_f(t).fn == 'fromIntegral'
        assert type_conv.f_to_h(t).fn == 'fromIntegral'

    def test_object_in_hierarchy(self, type_conv):
        t = iface('Gtk.Widget')
        assert type_conv.wire_type(t).show() == 'Ptr GtkWidget'
        assert type_conv.capability_class(t) == 'GtkWidgetKlass'
        assert type_conv.h_to_f(t).fn == '(\\(GtkWidget x) -> x) $ toGtkWidget'
        assert type_conv.f_to_h(t).fn == 'GtkWidget'

    def test_root_object(self, type_conv):
        assert type_conv.capability_class(iface('GObject.Object')) == 'GObjectKlass'

    def test_object_outside_hierarchy(self, type_conv):
        t = iface('Gtk.Orphan')
        assert type_conv.capability_class(t) is None
        assert type_conv.h_to_f(t).fn == '(\\(GtkOrphan x) -> x)'

    def test_interface(self, type_conv):
        t = iface('Gtk.Buildable')
        assert type_conv.capability_class(t) == 'IGtkBuildable'
        assert type_conv.h_to_f(t).fn == '(\\(GtkBuildable x) -> x) $ toGtkBuildable'

    def test_struct(self, type_conv):
        t = iface('Gtk.Border')
        assert type_conv.capability_class(t) is None
        assert type_conv.h_to_f(t).fn == '(\\(GtkBorder x) -> x)'
        assert type_conv.f_to_h(t).fn == 'GtkBorder'

    @pytest.mark.parametrize('dotted', [
        'Gtk.ResponseType', 'Gtk.AccelFlags', 'Gtk.Widget', 'Gtk.Buildable', 'Gtk.Border',
        'Gtk.Callback', 'GLib.Error',
    ])
    def test_references_never_convert_by_identity(self, type_conv, dotted):
        t = iface(dotted)
        assert type_conv.safe_type(t) != type_conv.wire_type(t)
        assert not type_conv.h_to_f(t).is_identity
        assert not type_conv.f_to_h(t).is_identity

    def test_constant_is_not_a_type(self, type_conv):
        with pytest.raises(ConversionError):
            type_conv.h_to_f(iface('Gtk.MAJOR_VERSION'))

    def test_missing_reference(self, type_conv):
        with pytest.raises(UnresolvableReferenceError, match='Did not find Gtk.Missing in input.'):
            type_conv.safe_type(iface('Gtk.Missing'))

    def test_without_hierarchy_objects_unwrap(self, cfg):
        conv = TypeMapper(cfg)
        assert conv.capability_class(iface('Gtk.Widget')) is None
        assert conv.h_to_f(iface('Gtk.Widget')).fn == '(\\(GtkWidget x) -> x)'


class TestDirections:
    def test_out_args_go_through_pointers(self, type_conv):
        out = Arg('width', basic(BasicType.INT32), direction=Direction.OUT)
        assert type_conv.arg_wire_type(out).show() == 'Ptr Int32'
        inout = Arg('flags', iface('Gtk.AccelFlags'), direction=Direction.INOUT)
        assert type_conv.arg_wire_type(inout).show() == 'Ptr Word'

    def test_converter(self, type_conv):
        t = basic(BasicType.BOOLEAN)
        assert type_conv.converter(t, Direction.IN) == type_conv.h_to_f(t)
        assert type_conv.converter(t, Direction.OUT) == type_conv.f_to_h(t)
        with pytest.raises(ValueError):
            type_conv.converter(t, Direction.INOUT)
