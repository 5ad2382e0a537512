"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from coatpath.core.config import CoatingSettings
from coatpath.core.shapes import CircleGeometry, CoatingShape, RectangleGeometry


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config_dir(temp_dir):
    """Create a sample configuration directory with two coating profiles."""
    config_dir = temp_dir / "config"
    (config_dir / "profiles").mkdir(parents=True)

    default_profile = """
coating:
  coating_width: 10.0
  line_spacing: 10.0
  fill_pattern: auto
"""
    (config_dir / "profiles" / "default.yaml").write_text(default_profile)

    fine_profile = """
coating:
  coating_width: 2.0
  line_spacing: 10.0
  fill_pattern: horizontal
  masking_clearance: 1.5
  mask_avoidance: lift
"""
    (config_dir / "profiles" / "fine.yaml").write_text(fine_profile)

    return config_dir


@pytest.fixture
def sample_shapes_file(temp_dir):
    """Create a shapes file with a fill, an outline and a mask."""
    shapes = """
shapes:
  - name: panel
    type: rectangle
    x: 0
    y: 0
    width: 100
    height: 50
    coatingType: fill
    fillPattern: horizontal
    lineSpacing: 10
    coatingWidth: 2
  - name: ring
    type: circle
    x: 200
    y: 200
    radius: 20
    coating_type: outline
    outline_passes: 2
  - name: keep_out
    type: rectangle
    x: 40
    y: 0
    width: 20
    height: 50
    coating_type: masking
"""
    path = temp_dir / "shapes.yaml"
    path.write_text(shapes)
    return path


@pytest.fixture
def settings():
    """Settings with a narrow head and no clearance, easy to reason about."""
    return CoatingSettings(coating_width=2.0, line_spacing=10.0, masking_clearance=0.0)


@pytest.fixture
def panel():
    """100 x 50 horizontal-fill rectangle at the origin."""
    return CoatingShape(
        geometry=RectangleGeometry(0, 0, 100, 50),
        name="panel",
    )


@pytest.fixture
def disc():
    """Circle of radius 10 centered at (50, 50)."""
    return CoatingShape(geometry=CircleGeometry(50, 50, 10), name="disc")
