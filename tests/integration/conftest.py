# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Shared fixtures for integration tests.

Provides representative shader project layouts on disk.
"""

from pathlib import Path

import pytest


def write_shader(root: Path, relative: str, text: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def shader_project(tmp_path: Path) -> Path:
    """Create a shader project exercising both search locations.

    Layout:
    - shaders/main.wgsl: entry point
    - common/util.wgsl and lighting/util.wgsl: colliding stems
    - lighting/pbr.wgsl: imports its sibling util.wgsl
    - types.wgsl: imported through three different spellings
    - noise.wgsl: only reachable relative to the project root

    Returns:
        Canonical path to the project root directory
    """
    root = (tmp_path / "shader_project").resolve()

    write_shader(
        root,
        "shaders/main.wgsl",
        "#import common/util.wgsl::helper\n"
        "#import lighting/pbr.wgsl::{shade, brdf}\n"
        "#import types.wgsl as t\n"
        "\n"
        "@fragment\n"
        "fn main() -> @location(0) vec4<f32> {\n"
        "    return shade(helper());\n"
        "}\n",
    )
    write_shader(
        root,
        "common/util.wgsl",
        "#import ./../types.wgsl\n#import noise.wgsl::hash\n\nfn helper() -> f32 { return hash(1.0); }\n",
    )
    write_shader(
        root,
        "lighting/pbr.wgsl",
        "#import util.wgsl saturate, remap\n#import ../types.wgsl\n\nfn shade(x: f32) -> vec4<f32> { return vec4(x); }\n",
    )
    write_shader(root, "lighting/util.wgsl", "fn saturate(x: f32) -> f32 { return clamp(x, 0.0, 1.0); }\n")
    write_shader(root, "types.wgsl", "struct Light { color: vec3<f32> }\n")
    write_shader(root, "noise.wgsl", "fn hash(x: f32) -> f32 { return fract(sin(x)); }\n")

    return root


@pytest.fixture
def cyclic_project(tmp_path: Path) -> Path:
    """Create a project where main -> a -> b -> c -> a."""
    root = (tmp_path / "cyclic_project").resolve()

    write_shader(root, "main.wgsl", "#import a.wgsl\n")
    write_shader(root, "a.wgsl", "#import b.wgsl\n")
    write_shader(root, "b.wgsl", "#import c.wgsl\n")
    write_shader(root, "c.wgsl", "#import a.wgsl\n")

    return root
