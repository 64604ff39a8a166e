"""Constructor introspection: what a constructor consumes and produces."""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints
import dataclasses
import functools
import inspect
import types

from ..core.errors import RegistrationError
from ..core.reflect import func_name_and_location, type_name


class In:
    """Base for parameter objects.

    A constructor parameter annotated with a dataclass deriving from ``In``
    asks for each of its fields instead of for the dataclass itself::

        @dataclass
        class Params(In):
            flower: Flower
            sun: Optional[Sun] = None

        def new_bee(p: Params) -> Bee: ...
    """


class Out:
    """Base for result objects.

    A constructor returning a dataclass deriving from ``Out`` provides each
    of its fields instead of the dataclass itself.
    """


@dataclass(frozen=True)
class Input:
    """A type a constructor depends on."""

    type_: Any
    optional: bool = False

    def __str__(self) -> str:
        name = type_name(self.type_)
        if self.optional:
            return f"{name}[optional]"
        return name


@dataclass(frozen=True)
class Output:
    """A type a constructor provides."""

    type_: Any

    def __str__(self) -> str:
        return type_name(self.type_)


@dataclass
class ProvideInfo:
    """Inputs and outputs of a registered constructor.

    Containers fill an instance passed to ``provide(..., fill_info=...)``
    in place.
    """

    inputs: List[Input] = field(default_factory=list)
    outputs: List[Output] = field(default_factory=list)


@dataclass
class ParamSpec:
    """How to produce one keyword argument of a constructor."""

    name: str
    inputs: List[Input]
    # Dataclass to assemble from ``inputs`` when the parameter is an ``In``
    in_type: Optional[type] = None
    has_default: bool = False
    field_names: Tuple[str, ...] = ()
    field_defaults: Tuple[str, ...] = ()


@dataclass
class ConstructorSpec:
    """Everything a container needs to know about a constructor."""

    ctor: Callable
    name: str
    params: List[ParamSpec]
    outputs: List[Output]
    # "single", "tuple" or "struct"
    result_kind: str = "single"
    out_fields: Tuple[str, ...] = ()

    @property
    def inputs(self) -> List[Input]:
        return [i for p in self.params for i in p.inputs]

    def fill(self, info: ProvideInfo) -> None:
        info.inputs[:] = self.inputs
        info.outputs[:] = list(self.outputs)


_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


def _strip_optional(tp: Any) -> Tuple[Any, bool]:
    if get_origin(tp) in _UNION_TYPES:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) != len(get_args(tp)):
            if len(args) == 1:
                return args[0], True
            return Union[tuple(args)], True
    return tp, False


def _hints(obj: Any, name: str) -> dict:
    try:
        return get_type_hints(obj)
    except Exception as e:
        raise RegistrationError(f"cannot resolve annotations of {name}: {e}", constructor=name)


def _struct_fields(cls: type, base: type, name: str) -> List[dataclasses.Field]:
    if not dataclasses.is_dataclass(cls):
        raise RegistrationError(
            f"{type_name(cls)} derives from {base.__name__} but is not a dataclass (used by {name})",
            constructor=name
        )
    return [f for f in dataclasses.fields(cls) if f.init]


def _is_struct(tp: Any, base: type) -> bool:
    return inspect.isclass(tp) and issubclass(tp, base)


def describe_constructor(ctor: Any) -> ConstructorSpec:
    """Introspect a constructor's signature.

    Raises RegistrationError when ``ctor`` is not a callable with fully
    annotated parameters and at least one declared result.
    """
    if not callable(ctor):
        raise RegistrationError(
            f"must provide constructor function, got {ctor!r} (type {type(ctor).__name__})"
        )

    name = func_name_and_location(ctor)
    try:
        sig = inspect.signature(ctor)
    except (TypeError, ValueError) as e:
        raise RegistrationError(f"cannot inspect signature of {name}: {e}", constructor=name)

    target = ctor
    while isinstance(target, functools.partial):
        target = target.func
    wrapped = target
    is_class = inspect.isclass(wrapped)
    if is_class:
        target = wrapped.__init__
    elif not (inspect.isfunction(target) or inspect.ismethod(target)):
        # Callable object
        target = type(target).__call__
    hints = _hints(target, name)

    params = []
    for param in sig.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            raise RegistrationError(
                f"{name}: variadic parameter {param.name!r} is not supported",
                constructor=name
            )
        if param.name not in hints:
            raise RegistrationError(
                f"{name}: parameter {param.name!r} has no type annotation",
                constructor=name
            )
        has_default = param.default is not inspect.Parameter.empty
        tp = hints[param.name]

        if _is_struct(tp, In):
            field_hints = _hints(tp, name)
            inputs, defaults = [], []
            fields = _struct_fields(tp, In, name)
            for f in fields:
                ftype, optional = _strip_optional(field_hints[f.name])
                field_has_default = (
                    f.default is not dataclasses.MISSING
                    or f.default_factory is not dataclasses.MISSING
                )
                if field_has_default:
                    defaults.append(f.name)
                inputs.append(Input(ftype, optional=optional or field_has_default))
            params.append(ParamSpec(param.name, inputs, in_type=tp,
                                    has_default=has_default,
                                    field_names=tuple(f.name for f in fields),
                                    field_defaults=tuple(defaults)))
            continue

        tp, optional = _strip_optional(tp)
        params.append(ParamSpec(param.name, [Input(tp, optional=optional or has_default)],
                                has_default=has_default))

    if is_class:
        result = wrapped
    elif "return" in hints:
        result = hints["return"]
    else:
        raise RegistrationError(f"{name}: missing return annotation", constructor=name)

    if result is None or result is type(None):
        raise RegistrationError(f"{name}: must provide at least one non-None result", constructor=name)

    result_kind, out_fields = "single", ()
    if get_origin(result) is tuple:
        elems = get_args(result)
        if not elems or Ellipsis in elems:
            raise RegistrationError(f"{name}: tuple results must list each element type", constructor=name)
        outputs = [Output(e) for e in elems]
        result_kind = "tuple"
    elif _is_struct(result, Out):
        field_hints = _hints(result, name)
        fields = _struct_fields(result, Out, name)
        outputs = [Output(field_hints[f.name]) for f in fields]
        out_fields = tuple(f.name for f in fields)
        result_kind = "struct"
    else:
        outputs = [Output(result)]

    if not outputs:
        raise RegistrationError(f"{name}: must provide at least one non-None result", constructor=name)
    seen = set()
    for out in outputs:
        if out.type_ in seen:
            raise RegistrationError(f"{name}: cannot provide {out} more than once", constructor=name)
        seen.add(out.type_)

    return ConstructorSpec(
        ctor=ctor,
        name=name,
        params=params,
        outputs=outputs,
        result_kind=result_kind,
        out_fields=out_fields
    )
