"""Provide cells: a set of constructors registered with a container."""

from typing import Any, List, Optional
import logging
import threading

from ..core.reflect import func_name_and_location
from ..di.container import ContainerProtocol
from ..di.metadata import ProvideInfo
from ..info import InfoNode


logger = logging.getLogger(__name__)

PRIVATE_SYMBOL = "🔒️"
CONSTRUCTOR_SYMBOL = "🚧"
INPUTS_SYMBOL = "⇨"
OUTPUTS_SYMBOL = "⇦"


class Provider:
    """A set of constructors.

    The same provider may be applied to any number of containers, e.g.
    one per test. The provide info of each constructor is captured by the
    first ``apply`` and reused afterwards.
    """

    def __init__(self, ctors, export: bool = True):
        self.ctors = tuple(ctors)
        self.export = export
        self._infos_lock = threading.Lock()
        self._infos: Optional[List[ProvideInfo]] = None

    @property
    def filled(self) -> bool:
        """Whether provide info has been captured."""
        with self._infos_lock:
            return self._infos is not None

    def apply(self, container: ContainerProtocol) -> None:
        """Register every constructor with the container.

        Stops at the first constructor the container rejects and re-raises
        its error. Constructors registered before it stay registered.
        """
        with self._infos_lock:
            fill_info = False
            if self._infos is None:
                self._infos = [ProvideInfo() for _ in self.ctors]
                fill_info = True
                logger.debug("Capturing provide info for %d constructors", len(self.ctors))

            for ctor, info in zip(self.ctors, self._infos):
                container.provide(
                    ctor,
                    export=self.export,
                    fill_info=info if fill_info else None
                )
                logger.debug("Registered %s (export=%s)", func_name_and_location(ctor), self.export)

    def info(self, container: Any = None) -> InfoNode:
        """Describe each constructor with its sorted inputs and outputs.

        Before the first ``apply`` the inputs and outputs are unknown and
        only an empty outputs line is shown.
        """
        with self._infos_lock:
            n = InfoNode()
            for i, ctor in enumerate(self.ctors):
                info = self._infos[i] if self._infos is not None else ProvideInfo()
                private_symbol = "" if self.export else PRIVATE_SYMBOL

                ctor_node = InfoNode(
                    f"{CONSTRUCTOR_SYMBOL}{private_symbol} {func_name_and_location(ctor)}"
                )
                ctor_node.condensed = True

                ins = sorted(str(inp) for inp in info.inputs)
                outs = sorted(str(out) for out in info.outputs)
                if ins:
                    ctor_node.add_leaf("%s %s", INPUTS_SYMBOL, ", ".join(ins))
                ctor_node.add_leaf("%s %s", OUTPUTS_SYMBOL, ", ".join(outs))
                n.add(ctor_node)
            return n

    def __repr__(self) -> str:
        kind = "provide" if self.export else "provide_private"
        return f"<{kind} cell with {len(self.ctors)} constructors>"


def provide(*ctors: Any) -> Provider:
    """Create a cell providing the given constructors.

    A constructor is any callable with annotated parameters and a declared
    result, for example::

        def new_server(cfg: Config, log: Logger) -> Server: ...
        def new_pair() -> Tuple[A, B]: ...

    Classes may be used directly and provide themselves. A parameter typed
    with an ``In`` dataclass asks for each of its fields, and returning an
    ``Out`` dataclass provides each of its fields.

    Failures are reported by the container when the cell is applied, e.g.
    when a result type is already provided.
    """
    return Provider(ctors, export=True)


def provide_private(*ctors: Any) -> Provider:
    """Like provide, but the results are only visible in the scope the cell
    is applied to and its nested scopes."""
    return Provider(ctors, export=False)
