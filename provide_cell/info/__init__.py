"""Info trees for describing cells."""

from .tree import InfoNode, InfoLeaf, InfoPrinter, render

__all__ = [
    'InfoNode',
    'InfoLeaf',
    'InfoPrinter',
    'render'
]
