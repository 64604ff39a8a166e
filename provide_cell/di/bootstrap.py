"""Bootstrap configuration for Dependency Injection."""

from typing import Iterable, Optional

from .container import Container
from ..config import Config, get_config
from ..core.cell import Cell


def create_container(config: Optional[Config] = None, cells: Iterable[Cell] = ()) -> Container:
    """Create a root container with the configuration registered.
    
    Each of ``cells`` is applied in order; the first failure propagates.
    """
    if config is None:
        config = get_config()
    
    container = Container()
    
    # Register configuration
    container.provide_instance(Config, config)
    
    for cell in cells:
        cell.apply(container)
    
    return container
