"""
Tests for the batch coating job.

Exercises ordering, masking post-processing, partial failure, cancellation
and progress callbacks on small hand-checkable designs.
"""

import pytest
from unittest.mock import MagicMock

from coatpath.core.coating import CoatingType, FillPattern, MaskAvoidanceStrategy
from coatpath.core.config import CoatingSettings
from coatpath.core.exceptions import PlanningCancelledError
from coatpath.core.geometry import Point
from coatpath.core.shapes import CircleGeometry, CoatingShape, RectangleGeometry
from coatpath.pipeline import CoatingJob, JobResult, coating_sequence
from coatpath.planning.scheduling import CancellationToken


def fill(x, y, w=20, h=20, **kwargs) -> CoatingShape:
    return CoatingShape(geometry=RectangleGeometry(x, y, w, h), **kwargs)


def mask(geometry, **kwargs) -> CoatingShape:
    return CoatingShape(geometry=geometry, coating_type=CoatingType.MASKING, **kwargs)


@pytest.fixture
def masked_design():
    """A panel with a keep-out strip, an outline crossing it and a covered badge."""
    return [
        fill(0, 0, 100, 50, name="panel", fill_pattern=FillPattern.HORIZONTAL),
        CoatingShape(
            geometry=RectangleGeometry(20, 10, 60, 30),
            coating_type=CoatingType.OUTLINE,
            name="frame",
        ),
        fill(45, 20, 10, 10, name="badge"),
        mask(RectangleGeometry(40, -10, 20, 70), name="strip"),
    ]


@pytest.mark.unit
class TestCoatingSequence:
    """Tests for coating order."""

    def test_order_then_position(self):
        shapes = [
            fill(50, 0, name="c"),
            fill(10, 0, name="b"),
            fill(90, 0, name="a", coating_order=1),
            fill(10, -5, name="d", coating_order=1),
        ]
        assert [s.name for s in coating_sequence(shapes)] == ["d", "a", "b", "c"]

    def test_excludes_masks_and_skipped(self):
        shapes = [
            fill(0, 0, name="keep"),
            fill(0, 0, name="skip", skip_coating=True),
            mask(RectangleGeometry(0, 0, 1, 1), name="mask"),
        ]
        assert [s.name for s in coating_sequence(shapes)] == ["keep"]


@pytest.mark.unit
@pytest.mark.integration
class TestCoatingJob:
    """Tests for CoatingJob.execute."""

    def test_result_structure(self, settings):
        result = CoatingJob([fill(0, 0, 100, 50, name="panel")], settings).execute()

        assert isinstance(result, JobResult)
        assert result.success
        assert [item.shape.name for item in result.shapes] == ["panel"]
        assert len(result.shapes[0].segments) == 5
        assert "panel" in result.timings
        assert "total" in result.timings

    def test_scan_fill_avoids_mask(self, settings, masked_design):
        result = CoatingJob(masked_design, settings).execute()
        panel = next(item for item in result.shapes if item.shape.name == "panel")

        for seg in panel.segments:
            lo, hi = sorted((seg.start.x, seg.end.x))
            assert hi <= 40 or lo >= 60

    def test_outline_split_after_planning(self, settings, masked_design):
        result = CoatingJob(masked_design, settings).execute()
        frame = next(item for item in result.shapes if item.shape.name == "frame")

        # top and bottom edges each lose the strip; the sides stay whole
        assert len(frame.segments) == 6
        for seg in frame.segments:
            mid_x = (seg.start.x + seg.end.x) / 2
            assert not 40 < mid_x < 60

    def test_shape_inside_mask_is_skipped(self, settings, masked_design):
        result = CoatingJob(masked_design, settings).execute()
        badge = next(item for item in result.shapes if item.shape.name == "badge")

        assert badge.skipped
        assert badge.reason == "inside_mask"
        assert badge.segments == []

    def test_concentric_split_after_planning(self, settings):
        shapes = [
            CoatingShape(
                geometry=CircleGeometry(50, 50, 20),
                fill_pattern=FillPattern.CONCENTRIC,
                name="disc",
            ),
            mask(RectangleGeometry(45, 0, 10, 100)),
        ]
        result = CoatingJob(shapes, settings).execute()
        for seg in result.shapes[0].segments:
            assert seg.start.x <= 45 + 1e-6 or seg.start.x >= 55 - 1e-6
            assert seg.end.x <= 45 + 1e-6 or seg.end.x >= 55 - 1e-6

    @pytest.mark.parametrize(
        "shape_width, settings_width, mask_x, mask_w",
        [
            # shape override samples every 20 mm, past a 6 mm strip
            (20.0, 2.0, 22.0, 6.0),
            # zero width samples only the two line ends
            (None, 0.0, 40.0, 20.0),
        ],
    )
    def test_lift_never_coats_mask(self, shape_width, settings_width, mask_x, mask_w):
        settings = CoatingSettings(
            coating_width=settings_width,
            line_spacing=10.0,
            mask_avoidance=MaskAvoidanceStrategy.LIFT,
        )
        shapes = [
            fill(
                0, 0, 100, 40,
                name="panel",
                fill_pattern=FillPattern.HORIZONTAL,
                coating_width=shape_width,
            ),
            mask(RectangleGeometry(mask_x, -10, mask_w, 60)),
        ]
        result = CoatingJob(shapes, settings).execute()
        segments = result.shapes[0].segments

        clearance = settings_width / 2
        assert segments
        for seg in segments:
            lo, hi = sorted((seg.start.x, seg.end.x))
            assert hi <= mask_x - clearance + 1e-6 or lo >= mask_x + mask_w + clearance - 1e-6

    def test_masking_disabled(self, masked_design):
        settings = CoatingSettings(coating_width=2, line_spacing=10, enable_masking=False)
        result = CoatingJob(masked_design, settings).execute()
        panel = next(item for item in result.shapes if item.shape.name == "panel")
        assert len(panel.segments) == 5

    def test_failed_shape_recorded_and_job_continues(self, settings):
        shapes = [
            fill(0, 0, name="broken", fill_pattern="spiral"),
            fill(50, 0, name="fine"),
        ]
        result = CoatingJob(shapes, settings).execute()

        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].startswith("broken")
        assert [item.shape.name for item in result.shapes] == ["fine"]

    def test_cancellation_propagates(self, settings):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(PlanningCancelledError):
            CoatingJob([fill(0, 0, name="panel")], settings).execute(token)

    def test_optimize_travel_starts_at_origin(self, settings):
        shapes = [fill(0, 0, 100, 50, name="panel")]
        plain = CoatingJob(shapes, settings).execute()
        ordered = CoatingJob(shapes, settings, optimize_travel=True).execute()

        assert ordered.shapes[0].segments[0].start == Point(0, 1)
        assert ordered.travel_distance() <= plain.travel_distance()

    def test_optimize_travel_continues_from_previous_exit(self, settings):
        shapes = [
            fill(0, 0, 20, 20, name="first", coating_order=1),
            fill(100, 0, 20, 20, name="second", coating_order=2),
        ]
        result = CoatingJob(shapes, settings, optimize_travel=True).execute()
        first_exit = result.shapes[0].segments[-1].end
        second_entry = result.shapes[1].segments[0].start

        for seg in result.shapes[1].segments:
            for p in (seg.start, seg.end):
                assert first_exit.distance_to(second_entry) <= first_exit.distance_to(p) + 1e-9

    def test_progress_callback(self, settings):
        callback = MagicMock()
        CoatingJob(
            [fill(0, 0, name="a"), fill(50, 0, name="b")],
            settings,
            progress_callback=callback,
        ).execute()

        steps = [call.args[0] for call in callback.call_args_list]
        assert steps == ["a", "b", "total"]
        assert callback.call_args_list[-1].args[1] == 1.0
