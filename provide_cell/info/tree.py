"""Info trees: labeled nodes and wrapped text leaves."""

from typing import List, Optional, TextIO, Union
import io
import sys
import textwrap

from ..config import get_config


class InfoPrinter:
    """Writes info trees to a text stream, wrapping leaves at ``width``."""
    
    def __init__(self, stream: Optional[TextIO] = None, width: Optional[int] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.width = width if width is not None else get_config().info.width
    
    def write(self, text: str) -> None:
        self.stream.write(text)


class InfoLeaf(str):
    """A single line of text in an info tree."""
    
    def print(self, indent: int, printer: InfoPrinter) -> None:
        prefix = " " * indent
        lines = textwrap.wrap(
            self,
            width=printer.width,
            initial_indent=prefix,
            subsequent_indent=prefix + " ",
            break_long_words=False,
            break_on_hyphens=False,
        )
        if not lines:
            lines = [""]
        for line in lines:
            printer.write(line + "\n")


class InfoNode:
    """A labeled node with an ordered list of children.
    
    A node without a header prints only its children, at the same
    indentation. Children of a node are separated by a blank line unless
    the node is ``condensed``.
    """
    
    def __init__(self, header: str = ""):
        self.header = header
        self.condensed = False
        self.children: List[Union["InfoNode", InfoLeaf]] = []
    
    def add(self, child: Union["InfoNode", InfoLeaf]) -> None:
        """Append a child node or leaf."""
        self.children.append(child)
    
    def add_leaf(self, fmt: str, *args) -> None:
        """Append a leaf, %-formatting ``fmt`` with ``args`` if any are given."""
        self.add(InfoLeaf(fmt % args if args else fmt))
    
    @property
    def leaves(self) -> List[InfoLeaf]:
        return [c for c in self.children if isinstance(c, InfoLeaf)]
    
    def print(self, indent: int, printer: InfoPrinter) -> None:
        if self.header:
            printer.write(f"{' ' * indent}{self.header}:\n")
            indent += 2
        for i, child in enumerate(self.children):
            child.print(indent, printer)
            if not self.condensed and i != len(self.children) - 1:
                printer.write("\n")
    
    def __repr__(self) -> str:
        return f"InfoNode({self.header!r}, children={len(self.children)})"


def render(info, width: Optional[int] = None) -> str:
    """Render an info tree to a string."""
    buf = io.StringIO()
    info.print(0, InfoPrinter(buf, width=width))
    return buf.getvalue()
