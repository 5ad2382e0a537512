"""
Demonstration of coatpath toolpath planning.

This script shows how to:
1. Describe a design with a masked region
2. Plan every shape with a batch job
3. Compare the two mask avoidance strategies
4. Measure coverage of the painted strips
"""

from coatpath.core.coating import CoatingType, FillPattern, MaskAvoidanceStrategy
from coatpath.core.config import CoatingSettings
from coatpath.core.logging import configure_logging
from coatpath.core.shapes import CircleGeometry, CoatingShape, RectangleGeometry
from coatpath.pipeline import CoatingJob
from coatpath.planning.coverage import coverage_ratio


def build_design():
    """A panel with a round keep-out and a rotated label frame."""
    return [
        CoatingShape(
            geometry=RectangleGeometry(0, 0, 300, 120),
            fill_pattern=FillPattern.AUTO,
            name="panel",
        ),
        CoatingShape(
            geometry=RectangleGeometry(60, 40, 80, 30),
            coating_type=CoatingType.OUTLINE,
            outline_passes=2,
            rotation=15,
            name="label_frame",
        ),
        CoatingShape(
            geometry=CircleGeometry(220, 60, 25),
            coating_type=CoatingType.MASKING,
            masking_clearance=3,
            name="bolt_hole",
        ),
    ]


def main():
    """Run coating demonstration."""
    configure_logging(level="WARNING")
    print("=" * 60)
    print("coatpath Coating Demo")
    print("=" * 60)

    shapes = build_design()
    print(f"\n1. Design: {len(shapes)} shapes")
    for shape in shapes:
        print(f"   - {shape.label}: {shape.coating_type.value}")

    for strategy in MaskAvoidanceStrategy:
        settings = CoatingSettings(
            coating_width=8.0, line_spacing=8.0, mask_avoidance=strategy
        )
        print(f"\n2. Planning with mask avoidance '{strategy.value}'")
        result = CoatingJob(shapes, settings, optimize_travel=True).execute()

        for item in result.shapes:
            print(
                f"   [OK] {item.shape.label}: {len(item.segments)} segments, "
                f"{item.coating_length:.0f} mm"
            )
        print(f"   [OK] Travel: {result.travel_distance():.0f} mm")

        panel = result.shapes[0]
        ratio = coverage_ratio(panel.shape, panel.segments, settings.coating_width)
        print(f"   [OK] Panel coverage: {ratio * 100:.1f}%")

    print("\n" + "=" * 60)
    print("Demo complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
