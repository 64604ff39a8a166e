"""Cells that register constructors with a container."""

from .provider import Provider, provide, provide_private

__all__ = [
    'Provider',
    'provide',
    'provide_private'
]
