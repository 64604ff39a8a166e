"""Protocols shared by every kind of cell."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Info(Protocol):
    """Something that can print itself into an info tree."""
    
    def print(self, indent: int, printer: "InfoPrinterProtocol") -> None:
        ...


class InfoPrinterProtocol(Protocol):
    """Line-oriented sink used when printing info trees."""
    
    width: int
    
    def write(self, text: str) -> None:
        ...


@runtime_checkable
class Cell(Protocol):
    """A unit of application wiring.
    
    Cells apply themselves to a container and can describe what they
    contribute. ``info`` takes the container so that cells which need
    it to describe themselves share the same signature as those that
    don't.
    """
    
    def apply(self, container) -> None:
        """Wire this cell into the container."""
        ...
    
    def info(self, container=None) -> Info:
        """Describe this cell."""
        ...
