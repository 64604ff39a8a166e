"""Dependency Injection Container implementation."""

from __future__ import annotations
from typing import Dict, Any, List, Optional, Protocol, TypeVar, Type
import logging
import threading

from ..core.errors import (
    ConstructorError,
    CircularDependencyError,
    DependencyError,
    DuplicateProviderError,
    MissingDependencyError,
)
from ..core.reflect import type_name
from .metadata import ConstructorSpec, ProvideInfo, describe_constructor


T = TypeVar('T')

logger = logging.getLogger(__name__)


class ContainerProtocol(Protocol):
    """What a cell needs from a container to register constructors."""

    def provide(
        self,
        ctor: Any,
        *,
        export: bool = True,
        fill_info: Optional[ProvideInfo] = None
    ) -> None:
        """Register ``ctor``, filling ``fill_info`` with its metadata if given.

        Raises RegistrationError if the constructor cannot be registered.
        """
        ...


class _Binding:
    """Output types of one constructor and, once built, their values."""

    def __init__(self, spec: Optional[ConstructorSpec], origin: Container):
        self.spec = spec
        self.origin = origin
        self.values: Optional[Dict[Any, Any]] = None

    @property
    def name(self) -> str:
        return self.spec.name if self.spec else "instance"


class Container:
    """Central dependency injection container.

    Containers form a tree of scopes. Exported constructors are bound in
    the root scope and are visible everywhere; private constructors are
    bound in the scope they were provided to and are visible there and in
    nested scopes. Values are built lazily, once per binding.
    """

    def __init__(self, name: str = "root", parent: Optional[Container] = None):
        self.name = name
        self._parent = parent
        self._root: Container = parent._root if parent else self
        self._bindings: Dict[Any, _Binding] = {}
        # One lock per container tree
        self._lock: threading.RLock = parent._lock if parent else threading.RLock()

    @property
    def parent(self) -> Optional[Container]:
        return self._parent

    def scope(self, name: str) -> Container:
        """Create a nested scope for private constructors."""
        return Container(name=name, parent=self)

    def _lookup(self, interface: Any) -> Optional[_Binding]:
        scope: Optional[Container] = self
        while scope is not None:
            binding = scope._bindings.get(interface)
            if binding is not None:
                return binding
            scope = scope._parent
        return None

    def provide(
        self,
        ctor: Any,
        *,
        export: bool = True,
        fill_info: Optional[ProvideInfo] = None
    ) -> None:
        """Register a constructor."""
        spec = describe_constructor(ctor)
        target = self._root if export else self

        with self._lock:
            # Everything visible from here, which includes the root
            for output in spec.outputs:
                existing = self._lookup(output.type_)
                if existing is not None:
                    raise DuplicateProviderError(
                        str(output), constructor=spec.name, existing=existing.name
                    )

            binding = _Binding(spec, origin=self)
            for output in spec.outputs:
                target._bindings[output.type_] = binding

        if fill_info is not None:
            spec.fill(fill_info)

        logger.debug(
            "Provided %s in scope %r (export=%s): %s",
            spec.name, target.name, export, ", ".join(str(o) for o in spec.outputs)
        )

    def provide_instance(self, interface: Type[T], instance: T) -> None:
        """Register an existing instance in this scope."""
        with self._lock:
            if self._lookup(interface) is not None:
                raise DuplicateProviderError(type_name(interface), constructor="instance")
            binding = _Binding(None, origin=self)
            binding.values = {interface: instance}
            self._bindings[interface] = binding

    def has(self, interface: Any) -> bool:
        """Check if a type is visible from this scope."""
        with self._lock:
            return self._lookup(interface) is not None

    def get(self, interface: Type[T]) -> T:
        """Get an instance of the requested type, building it if needed."""
        with self._lock:
            return self._resolve(interface, [])

    def _resolve(self, interface: Any, chain: List[_Binding]) -> Any:
        binding = self._lookup(interface)
        if binding is None:
            raise MissingDependencyError(type_name(interface), scope=self.name)
        if binding.values is None:
            binding.values = binding.origin._build(binding, chain)
        return binding.values[interface]

    def _try_resolve(self, interface: Any, chain: List[_Binding]) -> Any:
        if self._lookup(interface) is None:
            return _MISSING
        return self._resolve(interface, chain)

    def _build(self, binding: _Binding, chain: List[_Binding]) -> Dict[Any, Any]:
        """Call a constructor with its inputs resolved from this scope."""
        spec = binding.spec
        if binding in chain:
            names = [b.name for b in chain[chain.index(binding):]]
            raise CircularDependencyError(names + [binding.name])
        chain = chain + [binding]

        kwargs = {}
        for param in spec.params:
            if param.in_type is None:
                dep = param.inputs[0]
                value = self._try_resolve(dep.type_, chain)
                if value is _MISSING:
                    if param.has_default:
                        continue
                    if not dep.optional:
                        raise MissingDependencyError(type_name(dep.type_), scope=self.name)
                    value = None
                kwargs[param.name] = value
                continue

            fields = {}
            for field_name, dep in zip(param.field_names, param.inputs):
                value = self._try_resolve(dep.type_, chain)
                if value is _MISSING:
                    if field_name in param.field_defaults:
                        continue
                    if not dep.optional:
                        raise MissingDependencyError(type_name(dep.type_), scope=self.name)
                    value = None
                fields[field_name] = value
            kwargs[param.name] = param.in_type(**fields)

        try:
            result = spec.ctor(**kwargs)
        except DependencyError:
            raise
        except Exception as e:
            raise ConstructorError(spec.name, str(e)) from e

        logger.debug("Constructed %s", spec.name)
        return _split_result(spec, result)


_MISSING = object()


def _split_result(spec: ConstructorSpec, result: Any) -> Dict[Any, Any]:
    if spec.result_kind == "tuple":
        if not isinstance(result, tuple) or len(result) != len(spec.outputs):
            raise ConstructorError(
                spec.name, f"expected a tuple of {len(spec.outputs)} values, got {result!r}"
            )
        return {out.type_: value for out, value in zip(spec.outputs, result)}
    if spec.result_kind == "struct":
        return {
            out.type_: getattr(result, field_name)
            for out, field_name in zip(spec.outputs, spec.out_fields)
        }
    return {spec.outputs[0].type_: result}
