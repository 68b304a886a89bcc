"""
GNOME stack binding configuration

Configures the binding generator for the GNOME libraries:
- Namespace prefixes (GObject.Object -> GObject, Gio.File -> GFile)
- Module dependencies, imported by each generated module
- Items that cannot be bound
"""

from gi_binding_gen import Catalog, Config, Generator


# ==============================================================================
# Naming
# ==============================================================================

PREFIXES = {
    'GLib': 'G',
    'GObject': 'G',
    'Gio': 'G',
    'GModule': 'G',
    'Gdk': 'Gdk',
    'GdkPixbuf': 'Gdk',
    'Gtk': 'Gtk',
    'Pango': 'Pango',
    'Atk': 'Atk',
    'cairo': 'Cairo',
}

# Local identifiers whose computed name clashes or reads badly
NAMES: dict[str, str] = {}


# ==============================================================================
# Modules
# ==============================================================================

MODULE_DEPS = {
    'GLib': [],
    'GObject': ['GLib'],
    'GModule': ['GLib'],
    'Gio': ['GLib', 'GObject'],
    'cairo': ['GLib', 'GObject'],
    'Pango': ['GLib', 'GObject', 'cairo'],
    'Atk': ['GLib', 'GObject'],
    'GdkPixbuf': ['GLib', 'GObject', 'Gio'],
    'Gdk': ['GLib', 'GObject', 'Gio', 'cairo', 'Pango', 'GdkPixbuf'],
    'Gtk': ['GLib', 'GObject', 'Gio', 'cairo', 'Pango', 'Atk', 'GdkPixbuf', 'Gdk'],
}

# Global ignores, on top of the generator's own
IGNORES = frozenset({
    'atexit',
    'log_set_handler',
    'source_set_dummy_callback',
    'test_log_set_fatal_handler',
})


def configure(catalog: Catalog, extra_ignores=()) -> Config:
    """Build the generation config for a GNOME catalog"""
    return Config(
        catalog=catalog,
        prefixes=PREFIXES,
        names=NAMES,
        ignores=IGNORES | frozenset(extra_ignores),
    )


def generator(catalog: Catalog, extra_ignores=()) -> Generator:
    """Generator over a GNOME catalog, with module dependencies"""
    return Generator(configure(catalog, extra_ignores), MODULE_DEPS)
