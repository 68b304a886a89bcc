"""
Naming module

Resolves namespaced catalog names to Haskell and C identifiers.

Examples (namespace Gtk, prefix 'Gtk'):
    literal_name  Gtk.MAJOR_VERSION     -> gtk_MAJOR_VERSION
    lower_name    Gtk.Button_set_label  -> gtkButtonSetLabel
    upper_name    Gtk.SpinButton        -> GtkSpinButton
    c_name        Gtk.IMContext         -> gtk_im_context
"""

from typing import TYPE_CHECKING

from .errors import NamingError

if TYPE_CHECKING:
    from .config import Config
    from .ir import Name

# Haskell keywords, plus names the generated code binds itself
RESERVED_WORDS = frozenset({
    'case', 'class', 'data', 'default', 'deriving', 'do', 'else', 'foreign',
    'if', 'import', 'in', 'infix', 'infixl', 'infixr', 'instance', 'let',
    'module', 'newtype', 'of', 'then', 'type', 'where',
    'result', 'cb', 'obj', 'ret',
})


def escape_reserved(s: str) -> str:
    """Append '_' to reserved identifiers"""
    if s in RESERVED_WORDS:
        return s + '_'
    return s


def lc_first(s: str) -> str:
    if not s:
        raise NamingError('lc_first: empty string')
    return s[0].lower() + s[1:]


def uc_first(s: str) -> str:
    if not s:
        raise NamingError('uc_first: empty string')
    return s[0].upper() + s[1:]


def get_prefix(cfg: 'Config', ns: str) -> str:
    """Prefix for a namespace, falling back to the namespace itself"""
    return cfg.prefixes.get(ns, ns)


def specified_name(cfg: 'Config', s: str, fallback) -> str:
    """User override for an identifier, else the computed fallback()"""
    if s in cfg.names:
        return cfg.names[s]
    return fallback()


def literal_name(cfg: 'Config', name: 'Name') -> str:
    """Name of a constant: prefix_LOCAL"""
    _check(name)
    return specified_name(
        cfg, name.name,
        lambda: lc_first(get_prefix(cfg, name.namespace)) + '_' + name.name)


def camel_to_underscores(s: str) -> str:
    """Convert CamelCase to lowercase with underscores

    Runs of single uppercase letters are kept together:
        SpinButton -> spin_button
        HSV -> hsv
        IMContext -> im_context
        VBox -> vbox
    """
    underscored = ''.join('_' + c.lower() if c.isupper() else c for c in s)
    chunks = underscored.split('_')
    # The leading '_' of the first uppercase letter yields an empty chunk.
    if not chunks or chunks[0] != '':
        raise NamingError(f'Parse error 1 on {underscored}')
    chunks = _join_one_letter_clusters(chunks[1:])
    if not chunks:
        raise NamingError(f'Parse error 2 on {underscored}')
    first, rest = chunks[0], chunks[1:]
    if len(first) == 1:
        return first + '_'.join(rest)
    return '_'.join(chunks)


def _join_one_letter_clusters(chunks: list[str]) -> list[str]:
    """Join neighboring 1-letter clusters: a_b_c_def -> abc_def"""
    result = []
    acc = ''
    for chunk in chunks:
        if len(chunk) < 2:
            acc += chunk
        else:
            result.append(acc)
            result.append(chunk)
            acc = ''
    result.append(acc)
    return [c for c in result if c]


def c_name(cfg: 'Config', name: 'Name') -> str:
    """Name in C conventions: gtk_spin_button"""
    _check(name)
    prefix = get_prefix(cfg, name.namespace).lower()
    return prefix + '_' + camel_to_underscores(name.name)


def lower_name(cfg: 'Config', name: 'Name') -> str:
    """lowerCamel function name, namespaced by the prefix"""
    _check(name)

    def lowered():
        words = [get_prefix(cfg, name.namespace)] + name.name.split('_')
        return words[0].lower() + ''.join(_uc_first_part(w) for w in words[1:])

    return specified_name(cfg, name.name, lowered)


def upper_name(cfg: 'Config', name: 'Name') -> str:
    """UpperCamel type name, namespaced by the prefix"""
    _check(name)

    def uppered():
        words = [get_prefix(cfg, name.namespace)] + name.name.split('_')
        return ''.join(_uc_first_part(w) for w in words)

    return specified_name(cfg, name.name, uppered)


def _uc_first_part(w: str) -> str:
    # Empty parts come from doubled or trailing underscores
    return uc_first(w) if w else '_'


def _check(name: 'Name'):
    if not name.name:
        raise NamingError(f'empty identifier in namespace {name.namespace!r}')
