"""Dependency Injection system for provide-cell."""

from .container import Container, ContainerProtocol
from .metadata import In, Out, Input, Output, ProvideInfo, describe_constructor
from .bootstrap import create_container

__all__ = [
    'Container',
    'ContainerProtocol',
    'In',
    'Out',
    'Input',
    'Output',
    'ProvideInfo',
    'describe_constructor',
    'create_container'
]
