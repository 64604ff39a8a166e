"""Test provide cells against recording and real containers."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import pytest

from provide_cell import Provider, provide, provide_private, render
from provide_cell.core import Cell, RegistrationError, type_name
from provide_cell.di import Container, ProvideInfo, describe_constructor

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class A:
    pass


class B:
    pass


class C:
    pass


class D:
    pass


class E:
    pass


def new_a() -> A:
    return A()


def new_b() -> B:
    return B()


def new_e_from_ba(b: B, a: A) -> E:
    return E()


def new_cd_from_dc(d: D, c: C) -> Tuple[D, C]:
    return d, c


class RecordingContainer:
    """Container fake recording every provide call."""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.provided = []
        self.fills = 0
        self._lock = threading.Lock()

    def provide(self, ctor, *, export: bool = True, fill_info: Optional[ProvideInfo] = None):
        with self._lock:
            self.provided.append((ctor, export))
            if ctor is self.fail_on:
                raise RegistrationError(f"cannot provide {ctor.__name__}", constructor=ctor.__name__)
            if fill_info is not None:
                self.fills += 1
                describe_constructor(ctor).fill(fill_info)


def leaf_lines(node):
    return [str(leaf) for leaf in node.leaves]


# =============================================================================
# apply
# =============================================================================

def test_apply_registers_in_order_with_visibility():
    container = RecordingContainer()
    provide(new_a, new_b).apply(container)
    assert container.provided == [(new_a, True), (new_b, True)]

    container = RecordingContainer()
    provide_private(new_a, new_b).apply(container)
    assert container.provided == [(new_a, False), (new_b, False)]


def test_apply_fills_info_only_once():
    cell = provide(new_a, new_e_from_ba)
    first, second = RecordingContainer(), RecordingContainer()

    assert not cell.filled
    cell.apply(first)
    assert cell.filled
    cell.apply(second)

    assert first.fills == 2
    assert second.fills == 0
    assert len(second.provided) == 2


def test_info_identical_across_containers():
    cell = provide(new_a, new_b, new_e_from_ba)

    cell.apply(RecordingContainer())
    before = render(cell.info(), width=200)
    cell.apply(RecordingContainer())
    after = render(cell.info(), width=200)

    assert before == after
    assert type_name(E) in after


def test_apply_fails_fast():
    container = RecordingContainer(fail_on=new_b)
    cell = provide(new_a, new_b, new_e_from_ba)

    with pytest.raises(RegistrationError) as exc:
        cell.apply(container)

    assert "new_b" in str(exc.value)
    assert [ctor for ctor, _ in container.provided] == [new_a, new_b]


def test_apply_error_is_not_wrapped():
    class Boom(Exception):
        pass

    class FailingContainer:
        def provide(self, ctor, *, export=True, fill_info=None):
            raise Boom("nope")

    with pytest.raises(Boom):
        provide(new_a).apply(FailingContainer())


def test_concurrent_apply_fills_once():
    ctors = (new_a, new_b, new_e_from_ba, new_cd_from_dc)
    cell = provide(*ctors)
    containers = [RecordingContainer() for _ in range(8)]
    barrier = threading.Barrier(len(containers))

    def run(container):
        barrier.wait()
        cell.apply(container)

    with ThreadPoolExecutor(max_workers=len(containers)) as pool:
        list(pool.map(run, containers))

    for container in containers:
        assert [ctor for ctor, _ in container.provided] == list(ctors)
    assert sorted(c.fills for c in containers) == [0] * 7 + [len(ctors)]


def test_concurrent_apply_and_info():
    cell = provide(new_a, new_b, new_e_from_ba)
    containers = [RecordingContainer() for _ in range(8)]
    barrier = threading.Barrier(16)

    def run_apply(container):
        barrier.wait()
        cell.apply(container)

    def run_info(_):
        barrier.wait()
        return cell.info()

    with ThreadPoolExecutor(max_workers=16) as pool:
        applied = [pool.submit(run_apply, c) for c in containers]
        described = [pool.submit(run_info, i) for i in range(8)]
        for future in applied:
            future.result()
        trees = [future.result() for future in described]

    # Each tree is either fully described or not yet described at all
    for tree in trees:
        assert len(tree.children) == 3
        outputs = [leaf_lines(node)[-1] for node in tree.children]
        assert outputs in (
            ["⇦ "] * 3,
            [f"⇦ {type_name(A)}", f"⇦ {type_name(B)}", f"⇦ {type_name(E)}"],
        )
    assert sum(c.fills for c in containers) == 3
    assert render(cell.info(), width=200).count("⇨") == 1


def test_empty_provider():
    cell = provide()
    container = RecordingContainer()
    cell.apply(container)

    assert container.provided == []
    assert cell.info().children == []
    assert render(cell.info()) == ""


# =============================================================================
# info
# =============================================================================

def test_info_sorts_labels_but_keeps_constructor_order():
    cell = provide(new_e_from_ba, new_cd_from_dc)
    cell.apply(RecordingContainer())

    first, second = cell.info().children
    assert "new_e_from_ba" in first.header
    assert "new_cd_from_dc" in second.header

    assert leaf_lines(first) == [
        f"⇨ {type_name(A)}, {type_name(B)}",
        f"⇦ {type_name(E)}",
    ]
    assert leaf_lines(second) == [
        f"⇨ {type_name(C)}, {type_name(D)}",
        f"⇦ {type_name(C)}, {type_name(D)}",
    ]


def test_info_omits_empty_inputs():
    cell = provide(new_a)
    cell.apply(RecordingContainer())

    (node,) = cell.info().children
    assert node.condensed
    assert leaf_lines(node) == [f"⇦ {type_name(A)}"]


@pytest.mark.parametrize("count", [0, 1, 3])
def test_visibility_marker(count):
    ctors = [new_a, new_b, new_e_from_ba][:count]

    exported = provide(*ctors)
    private = provide_private(*ctors)
    exported.apply(RecordingContainer())
    private.apply(RecordingContainer())

    for node in exported.info().children:
        assert node.header.startswith("🚧 ")
        assert "🔒️" not in node.header
    for node in private.info().children:
        assert node.header.startswith("🚧🔒️ ")
    assert len(exported.info().children) == len(private.info().children) == count


def test_info_before_apply_is_empty():
    cell = provide(new_a, new_e_from_ba)

    nodes = cell.info().children
    assert len(nodes) == 2
    for node in nodes:
        assert leaf_lines(node) == ["⇦ "]


def test_info_header_has_name_and_location():
    cell = provide(new_a)
    (node,) = cell.info().children
    assert "test_provider.new_a" in node.header
    assert "(test_provider.py:" in node.header


def test_info_ignores_container_argument():
    cell = provide(new_a)
    cell.apply(RecordingContainer())
    assert render(cell.info(object())) == render(cell.info())


def test_render_layout():
    cell = provide(new_a, new_e_from_ba)
    cell.apply(RecordingContainer())

    lines = render(cell.info(), width=400).splitlines()
    assert lines[0].startswith("🚧 ") and lines[0].endswith(":")
    assert lines[1] == f"  ⇦ {type_name(A)}"
    assert lines[2] == ""
    assert lines[4] == f"  ⇨ {type_name(A)}, {type_name(B)}"
    assert lines[5] == f"  ⇦ {type_name(E)}"


def test_provider_is_a_cell():
    assert isinstance(provide(new_a), Cell)
    assert isinstance(provide_private(), Provider)


# =============================================================================
# With the real container
# =============================================================================

def test_apply_to_many_containers():
    cell = provide(new_a, new_b, new_e_from_ba)

    for _ in range(3):
        container = Container()
        cell.apply(container)
        assert isinstance(container.get(E), E)


def test_duplicate_registration_in_same_container():
    cell = provide(new_a)
    container = Container()
    cell.apply(container)

    with pytest.raises(RegistrationError):
        cell.apply(container)


def test_private_constructors_stay_in_scope():
    root = Container()
    module = root.scope("module")
    sibling = root.scope("sibling")

    provide_private(new_a, new_b).apply(module)
    provide(new_e_from_ba).apply(module)

    assert module.has(A)
    assert not root.has(A)
    assert not sibling.has(B)
    # exported, but built from its module's private inputs
    assert isinstance(sibling.get(E), E)
