"""
Code generation utilities

Provides an indentation-aware line buffer that keeps generated code as an
ordered list of fragments. Foreign-call declarations are staged in their own
fragments so the module assembler can partition them out at finalize time.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional


class FragmentKind(Enum):
    FOREIGN = 'foreign'   # foreign import declarations
    CODE = 'code'         # everything else


@dataclass
class Fragment:
    """A blank-line separated unit of generated code"""
    kind: FragmentKind
    lines: list[str] = field(default_factory=list)
    loose: bool = False   # collects top-level lines written outside a group


@dataclass(frozen=True)
class Partition:
    """Finalized output, split into foreign-call and wrapper declarations"""
    foreign: list[Fragment]
    code: list[Fragment]


class CodeGen:
    """Code generation helper with indentation and fragment support"""

    def __init__(self):
        self._fragments: list[Fragment] = []
        self._current: Optional[Fragment] = None
        self._indent: int = 0
        self._indent_str: str = '    '  # 4 spaces

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        frag = self._current if self._current is not None else self._loose()
        if text:
            frag.lines.append(self._indent_str * self._indent + text)
        else:
            frag.lines.append('')

    def lines(self, *texts: str):
        """Add multiple lines"""
        for text in texts:
            self.line(text)

    def indent(self):
        """Increase indentation"""
        self._indent += 1

    def dedent(self):
        """Decrease indentation"""
        if self._indent > 0:
            self._indent -= 1

    @contextmanager
    def indented(self) -> Iterator[None]:
        """Context manager for an indented run of lines"""
        self.indent()
        try:
            yield
        finally:
            self.dedent()

    @contextmanager
    def group(self) -> Iterator[Fragment]:
        """Collect the enclosed lines into their own fragment"""
        with self._fragment(FragmentKind.CODE) as frag:
            yield frag

    @contextmanager
    def foreign_import(self) -> Iterator[Fragment]:
        """Collect the enclosed lines into a foreign-call fragment"""
        with self._fragment(FragmentKind.FOREIGN) as frag:
            yield frag

    def fragments(self) -> list[Fragment]:
        return list(self._fragments)

    def finalize(self) -> Partition:
        """Split the fragments into foreign-call and wrapper partitions"""
        frags = [f for f in self._fragments if f.lines]
        return Partition(
            foreign=[f for f in frags if f.kind == FragmentKind.FOREIGN],
            code=[f for f in frags if f.kind == FragmentKind.CODE],
        )

    def output(self) -> str:
        """Get generated code as string, fragments separated by blank lines"""
        return render(f for f in self._fragments if f.lines)

    @contextmanager
    def _fragment(self, kind: FragmentKind) -> Iterator[Fragment]:
        saved_current, saved_indent = self._current, self._indent
        frag = Fragment(kind)
        self._fragments.append(frag)
        self._current = frag
        self._indent = 0
        try:
            yield frag
        finally:
            self._current, self._indent = saved_current, saved_indent

    def _loose(self) -> Fragment:
        if self._fragments and self._fragments[-1].loose:
            return self._fragments[-1]
        frag = Fragment(FragmentKind.CODE, loose=True)
        self._fragments.append(frag)
        return frag


def render(fragments) -> str:
    """Join fragments with one blank line between them"""
    return '\n\n'.join('\n'.join(f.lines) for f in fragments)


def pad_to(n: int, s: str) -> str:
    """Pad s with spaces to width n"""
    return s + ' ' * (n - len(s))


def with_comment(code: str, comment: str) -> str:
    """Code followed by a '--' comment aligned at column 40"""
    return pad_to(40, code) + '-- ' + comment
