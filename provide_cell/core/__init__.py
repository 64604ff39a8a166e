"""Core infrastructure for provide-cell."""

from .cell import Cell, Info
from .errors import (
    CellError,
    ConfigurationError,
    RegistrationError,
    DuplicateProviderError,
    DependencyError,
    MissingDependencyError,
    CircularDependencyError,
    ConstructorError,
)
from .reflect import func_name, func_name_and_location, type_name

__all__ = [
    'Cell',
    'Info',
    'CellError',
    'ConfigurationError',
    'RegistrationError',
    'DuplicateProviderError',
    'DependencyError',
    'MissingDependencyError',
    'CircularDependencyError',
    'ConstructorError',
    'func_name',
    'func_name_and_location',
    'type_name'
]
