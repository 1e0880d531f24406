# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Tests for alias assignment.

Tests cover:
- Bare file stems when names do not collide
- Refinement with parent directories on collision
- Repeated refinement for deep collisions
- Numeric fallback when a path runs out of components
- Uniqueness against names that were already settled
"""

from unittest.mock import MagicMock

from wgsl_imports.models import Module
from wgsl_imports.naming import reduced_names


def write_shader(root, relative, text=""):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def modules_at(root, *relatives):
    return [Module.from_path(write_shader(root, relative)) for relative in relatives]


def fake_module(name, components):
    """A module stand-in with a stem and path components by depth."""
    module = MagicMock(spec=Module)
    module.name = name
    module.nth_path_component.side_effect = components.get
    return module


class TestReducedNames:
    """Tests for alias refinement on real paths."""

    def test_unique_stems_are_kept(self, tmp_path):
        main, lib = modules_at(tmp_path, "main.wgsl", "shaders/lib.wgsl")

        assert reduced_names([main, lib]) == {main: "main", lib: "lib"}

    def test_empty(self):
        assert reduced_names([]) == {}

    def test_same_stem_different_directories(self, tmp_path):
        main, util_a, util_b = modules_at(tmp_path, "main.wgsl", "a/util.wgsl", "b/util.wgsl")

        names = reduced_names([main, util_a, util_b])

        assert names[main] == "main"
        assert names[util_a] == "util_a"
        assert names[util_b] == "util_b"

    def test_deep_collision(self, tmp_path):
        """Test a shared parent directory forces a second refinement."""
        left, right = modules_at(tmp_path, "x/common/util.wgsl", "y/common/util.wgsl")

        names = reduced_names([left, right])

        assert names[left] == "util_common_x"
        assert names[right] == "util_common_y"

    def test_only_colliding_modules_are_refined(self, tmp_path):
        util_a, util_b, noise = modules_at(
            tmp_path, "a/util.wgsl", "b/util.wgsl", "a/noise.wgsl"
        )

        names = reduced_names([util_a, util_b, noise])

        assert names[noise] == "noise"

    def test_three_way_collision(self, tmp_path):
        modules = modules_at(tmp_path, "a/util.wgsl", "b/util.wgsl", "c/util.wgsl")

        names = reduced_names(modules)

        assert sorted(names.values()) == ["util_a", "util_b", "util_c"]

    def test_aliases_unique(self, tmp_path):
        modules = modules_at(
            tmp_path,
            "main.wgsl",
            "util.wgsl",
            "a/util.wgsl",
            "b/util.wgsl",
            "a/b/util.wgsl",
            "b/a/util.wgsl",
            "x/a/util.wgsl",
        )

        names = reduced_names(modules)

        assert set(names) == set(modules)
        assert len(set(names.values())) == len(modules)


class TestReducedNamesFallbacks:
    """Tests for exhausted paths and settled names, using stand-in modules."""

    def test_numeric_suffix_when_path_exhausted(self):
        first = fake_module("util", {1: "a"})
        second = fake_module("util", {1: "a"})

        names = reduced_names([first, second])

        assert names == {first: "util_a0", second: "util_a1"}

    def test_mixed_exhausted_and_refinable(self):
        short = fake_module("util", {1: "a"})
        long = fake_module("util", {1: "a", 2: "x"})

        names = reduced_names([short, long])

        assert names[short] == "util_a0"
        assert names[long] == "util_a_x"

    def test_refined_name_never_reuses_settled_name(self):
        """Test a refinement landing on a name another module already owns is refined again."""
        settled = fake_module("util_a", {1: "p"})
        util_a = fake_module("util", {1: "a", 2: "x"})
        util_b = fake_module("util", {1: "b"})

        names = reduced_names([settled, util_a, util_b])

        assert names[settled] == "util_a"
        assert names[util_a] == "util_a_x"
        assert names[util_b] == "util_b"
        assert len(set(names.values())) == 3

    def test_settled_name_without_components_left(self):
        settled = fake_module("util0", {})
        first = fake_module("util", {})
        second = fake_module("util", {})

        names = reduced_names([settled, first, second])

        assert names[settled] == "util0"
        assert len(set(names.values())) == 3
