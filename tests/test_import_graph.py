# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for import graph construction and import order.

Tests cover:
- Breadth-first traversal from a root module
- Cycle detection, including self imports and longer loops
- Fail-fast on unresolved imports
- One node per canonical file, one text scan per module
- Dependency-first drain order with the root excluded
"""

from unittest.mock import patch

import networkx as nx
import pytest

from wgsl_imports.errors import ImportCycleError, InvariantViolation, UnresolvedImportError
from wgsl_imports.import_graph import ImportGraph, find_any_path
from wgsl_imports.models import Module
from wgsl_imports.resolver import ModuleResolver


def write_shader(root, relative, text=""):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def build(root, entry):
    module = Module.from_path(root / entry)
    return ImportGraph.calculate(module, ModuleResolver(root))


def module_at(root, relative):
    return Module.from_path(root / relative)


@pytest.fixture
def root(tmp_path):
    return tmp_path.resolve()


class TestGraphConstruction:
    """Tests for nodes and edges."""

    def test_single_import(self, root):
        write_shader(root, "main.wgsl", "#import lib.wgsl\n")
        write_shader(root, "lib.wgsl", "fn f() {}\n")

        graph = build(root, "main.wgsl")

        main, lib = module_at(root, "main.wgsl"), module_at(root, "lib.wgsl")
        assert graph.root == main
        assert graph.nodes() == [main, lib]
        assert graph.edges() == [(main, lib)]
        assert graph.imports_of(main) == [lib]

    def test_root_without_imports(self, root):
        write_shader(root, "main.wgsl", "fn main() {}\n")

        graph = build(root, "main.wgsl")

        assert len(graph) == 1
        assert graph.modules() == []

    def test_same_file_through_two_spellings_is_one_node(self, root):
        write_shader(root, "shaders/main.wgsl", "#import lib.wgsl\n#import ./lib.wgsl::f\n")
        write_shader(root, "shaders/lib.wgsl")

        graph = build(root, "shaders/main.wgsl")

        assert len(graph) == 2
        assert len(graph.edges()) == 1

    def test_transitive_imports(self, root):
        write_shader(root, "main.wgsl", "#import a.wgsl\n")
        write_shader(root, "a.wgsl", "#import b.wgsl\n")
        write_shader(root, "b.wgsl", "#import c.wgsl\n")
        write_shader(root, "c.wgsl")

        graph = build(root, "main.wgsl")

        assert len(graph) == 4
        assert module_at(root, "c.wgsl") in graph

    def test_each_module_scanned_once(self, root):
        """Test a module reached through several importers is read once."""
        write_shader(root, "main.wgsl", "#import x.wgsl\n#import y.wgsl\n")
        write_shader(root, "x.wgsl", "#import z.wgsl\n")
        write_shader(root, "y.wgsl", "#import z.wgsl\n")
        write_shader(root, "z.wgsl")

        reads = []
        original = Module.read_to_string

        def counting_read(self):
            reads.append(self)
            return original(self)

        with patch.object(Module, "read_to_string", counting_read):
            build(root, "main.wgsl")

        assert len(reads) == 4
        assert len(set(reads)) == 4


class TestCycleDetection:
    """Tests for rejected edges that would close a cycle."""

    def test_two_file_cycle(self, root):
        write_shader(root, "a.wgsl", "#import b.wgsl\n")
        write_shader(root, "b.wgsl", "#import a.wgsl\n")

        with pytest.raises(ImportCycleError) as exc_info:
            build(root, "a.wgsl")

        assert exc_info.value.cycle_path == [module_at(root, "a.wgsl"), module_at(root, "b.wgsl")]

    def test_self_import(self, root):
        write_shader(root, "a.wgsl", "#import a.wgsl\n")

        with pytest.raises(ImportCycleError) as exc_info:
            build(root, "a.wgsl")

        assert exc_info.value.cycle_path == [module_at(root, "a.wgsl")]

    def test_cycle_below_root(self, root):
        write_shader(root, "main.wgsl", "#import a.wgsl\n")
        write_shader(root, "a.wgsl", "#import b.wgsl\n")
        write_shader(root, "b.wgsl", "#import c.wgsl\n")
        write_shader(root, "c.wgsl", "#import a.wgsl\n")

        with pytest.raises(ImportCycleError) as exc_info:
            build(root, "main.wgsl")

        cycle = exc_info.value.cycle_path
        assert cycle == [module_at(root, name) for name in ("a.wgsl", "b.wgsl", "c.wgsl")]
        assert module_at(root, "main.wgsl") not in cycle

    def test_diamond_is_not_a_cycle(self, root):
        write_shader(root, "main.wgsl", "#import x.wgsl\n#import y.wgsl\n")
        write_shader(root, "x.wgsl", "#import z.wgsl\n")
        write_shader(root, "y.wgsl", "#import z.wgsl\n")
        write_shader(root, "z.wgsl")

        graph = build(root, "main.wgsl")

        assert len(graph) == 4
        assert len(graph.edges()) == 4

    def test_find_any_path(self, root):
        a, b, c = (Module.from_path(write_shader(root, f"{n}.wgsl")) for n in "abc")
        dag = nx.DiGraph([(a, b), (b, c)])

        assert find_any_path(dag, a, c) == [a, b, c]
        assert find_any_path(dag, a, a) == [a]

    def test_find_any_path_without_path(self, root):
        a, b = (Module.from_path(write_shader(root, f"{n}.wgsl")) for n in "ab")
        dag = nx.DiGraph()
        dag.add_nodes_from([a, b])

        with pytest.raises(InvariantViolation):
            find_any_path(dag, a, b)


class TestUnresolvedDuringTraversal:
    """Tests for fail-fast resolution errors."""

    def test_unresolved_import(self, root):
        write_shader(root, "shaders/main.wgsl", "#import missing.wgsl\n")

        with pytest.raises(UnresolvedImportError) as exc_info:
            build(root, "shaders/main.wgsl")

        error = exc_info.value
        assert error.importer == module_at(root, "shaders/main.wgsl")
        assert len(error.searched) == 2

    def test_unresolved_deep_in_graph(self, root):
        write_shader(root, "main.wgsl", "#import a.wgsl\n")
        write_shader(root, "a.wgsl", "#import gone.wgsl\n")

        with pytest.raises(UnresolvedImportError) as exc_info:
            build(root, "main.wgsl")

        assert exc_info.value.importer == module_at(root, "a.wgsl")


class TestImportOrder:
    """Tests for the dependency-first drain."""

    def test_single_import_order(self, root):
        write_shader(root, "main.wgsl", "#import lib.wgsl\n")
        write_shader(root, "lib.wgsl")

        assert build(root, "main.wgsl").modules() == [module_at(root, "lib.wgsl")]

    def test_diamond_order(self, root):
        write_shader(root, "main.wgsl", "#import x.wgsl\n#import y.wgsl\n")
        write_shader(root, "x.wgsl", "#import z.wgsl\n")
        write_shader(root, "y.wgsl", "#import z.wgsl\n")
        write_shader(root, "z.wgsl")

        order = build(root, "main.wgsl").modules()

        z, x, y = (module_at(root, f"{n}.wgsl") for n in "zxy")
        assert order.count(z) == 1
        assert order.index(z) < order.index(x)
        assert order.index(z) < order.index(y)
        assert module_at(root, "main.wgsl") not in order

    def test_every_edge_respected(self, root):
        write_shader(root, "main.wgsl", "#import a.wgsl\n#import d.wgsl\n")
        write_shader(root, "a.wgsl", "#import b.wgsl\n#import c.wgsl\n")
        write_shader(root, "b.wgsl", "#import c.wgsl\n")
        write_shader(root, "c.wgsl", "#import d.wgsl\n")
        write_shader(root, "d.wgsl")

        graph = build(root, "main.wgsl")
        order = graph.modules()

        assert len(order) == len(graph) - 1
        for importer, imported in graph.edges():
            if importer == graph.root:
                continue
            assert order.index(imported) < order.index(importer)

    def test_modules_does_not_consume_graph(self, root):
        write_shader(root, "main.wgsl", "#import lib.wgsl\n")
        write_shader(root, "lib.wgsl")

        graph = build(root, "main.wgsl")

        assert graph.modules() == graph.modules()
        assert len(graph) == 2

    def test_cyclic_storage_is_invariant_violation(self, root):
        """Test draining a graph without a removable node fails loudly."""
        a, b = (Module.from_path(write_shader(root, f"{n}.wgsl")) for n in "ab")
        graph = ImportGraph(nx.DiGraph([(a, b), (b, a)]), a)

        with pytest.raises(InvariantViolation, match="no children"):
            graph.modules()

    def test_idempotent(self, root):
        write_shader(root, "main.wgsl", "#import a/util.wgsl\n#import b/util.wgsl\n#import c.wgsl\n")
        write_shader(root, "a/util.wgsl", "#import ../c.wgsl\n")
        write_shader(root, "b/util.wgsl", "#import ../c.wgsl\n")
        write_shader(root, "c.wgsl")

        first = build(root, "main.wgsl")
        second = build(root, "main.wgsl")

        assert first.modules() == second.modules()
        assert first.reduced_names() == second.reduced_names()
