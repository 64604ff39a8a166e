"""
provide-cell

Registers batches of constructors with a dependency injection container
and describes what they consume and produce as an info tree.
"""

__version__ = "0.1.0"

# Public API
from .config import Config, get_config, set_config
from .cell import Provider, provide, provide_private
from .core import Cell, CellError, RegistrationError
from .di import Container, In, Out, ProvideInfo, create_container
from .info import InfoNode, InfoPrinter, render

__all__ = [
    "Config",
    "get_config",
    "set_config",
    "Provider",
    "provide",
    "provide_private",
    "Cell",
    "CellError",
    "RegistrationError",
    "Container",
    "In",
    "Out",
    "ProvideInfo",
    "create_container",
    "InfoNode",
    "InfoPrinter",
    "render",
    "__version__"
]
