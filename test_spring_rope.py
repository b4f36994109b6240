#!/usr/bin/env python3
"""Spring-rope simulation tests."""

import pytest

from techtree.core import NodeState, Vector2D
from techtree.physics import DEFAULT_COLORS, RopeConfig, SpringRope

DT = 1.0 / 60.0


class Anchor:
    """Stand-in for a tech node: anything with a position."""

    def __init__(self, x, y):
        self.position = Vector2D(x, y)


def make_rope(start=(0.0, 0.0), end=(100.0, 0.0), seed=1, **config):
    a = Anchor(*start)
    b = Anchor(*end)
    rope = SpringRope(RopeConfig(**config), rng=seed)
    rope.connect(a, b)
    return rope, a, b


class TestConstruction:
    def test_point_count_includes_pinned_ends(self):
        rope, _, _ = make_rope(segment_count=8)
        assert rope.point_count == 10
        assert len(rope.points) == 10

    def test_points_start_evenly_spaced_and_still(self):
        rope, _, _ = make_rope(segment_count=3, end=(90.0, 0.0))
        xs = [p.x for p in rope.points]
        assert xs == pytest.approx([0.0, 30.0, 60.0, 90.0])
        assert all(v == Vector2D(0.0, 0.0) for v in rope.velocities)

    @pytest.mark.parametrize('field, value', [
        ('mass', 0.0),
        ('mass', -1.0),
        ('segment_count', 0),
        ('stiffness', -5.0),
        ('damping', -0.1),
    ])
    def test_invalid_tuning_rejected(self, field, value):
        with pytest.raises(ValueError):
            SpringRope(RopeConfig(**{field: value}))

    def test_unconnected_rope_is_inert(self):
        rope = SpringRope()
        assert not rope.connected
        assert rope.step(DT) == []
        rope.excite()
        assert rope.points == []
        assert rope.displacement_from_rest() == 0.0


class TestIntegration:
    def test_rope_at_rest_stays_at_rest(self):
        rope, _, _ = make_rope()
        for _ in range(100):
            rope.step(DT)
        assert rope.displacement_from_rest() < 1e-9

    def test_endpoints_track_moved_anchors(self):
        rope, a, b = make_rope()
        a.position = Vector2D(12.5, -40.25)
        b.position = Vector2D(300.0, 75.5)
        points = rope.step(DT)
        assert points[0] == a.position
        assert points[-1] == b.position

    def test_rope_follows_moved_anchors_back_to_rest(self):
        rope, a, b = make_rope()
        a.position = Vector2D(0.0, 50.0)
        b.position = Vector2D(100.0, 50.0)
        for _ in range(600):
            rope.step(DT)
        assert rope.displacement_from_rest() < 0.01
        assert all(p.y == pytest.approx(50.0, abs=0.01) for p in rope.points)

    def test_excited_rope_settles(self):
        # 100 units apart, 8 interior points, default tuning
        rope, _, _ = make_rope(segment_count=8)
        rope.excite()
        rope.step(DT)
        assert rope.displacement_from_rest() > 0.01

        for _ in range(499):
            rope.step(DT)
        assert rope.displacement_from_rest() < 0.01
        assert rope.is_settled()


class TestExcite:
    def test_impulse_is_perpendicular_and_jittered(self):
        rope, _, _ = make_rope(segment_count=8)
        rope.excite(50.0)
        velocities = rope.velocities
        assert velocities[0] == Vector2D(0.0, 0.0)
        assert velocities[-1] == Vector2D(0.0, 0.0)
        for v in velocities[1:-1]:
            assert v.x == 0.0
            assert 35.0 - 1e-9 <= abs(v.y) <= 65.0 + 1e-9

    def test_default_strength_comes_from_config(self):
        rope, _, _ = make_rope(impulse_strength=10.0, impulse_jitter=0.0)
        rope.excite()
        assert all(abs(v.y) == pytest.approx(10.0) for v in rope.velocities[1:-1])

    def test_coincident_anchors_ignore_excite(self):
        rope, _, _ = make_rope(start=(5.0, 5.0), end=(5.0, 5.0))
        rope.excite()
        assert all(v == Vector2D(0.0, 0.0) for v in rope.velocities)

    def test_same_seed_same_pluck(self):
        first, _, _ = make_rope(seed=99)
        second, _, _ = make_rope(seed=99)
        first.excite()
        second.excite()
        assert first.velocities == second.velocities


class TestVisualState:
    def test_state_selects_color(self):
        rope, _, _ = make_rope()
        assert rope.color == DEFAULT_COLORS['locked']
        rope.set_state(NodeState.UNLOCKED)
        assert rope.color == DEFAULT_COLORS['unlocked']

    def test_state_does_not_change_physics(self):
        plain, _, _ = make_rope(seed=5)
        colored, _, _ = make_rope(seed=5)
        colored.set_state(NodeState.AVAILABLE)
        plain.excite()
        colored.excite()
        for _ in range(30):
            plain.step(DT)
            colored.step(DT)
        assert plain.points == colored.points

    def test_custom_palette_from_dict(self):
        config = RopeConfig.from_dict({'colors': {'Unlocked': [1, 0, 0, 1]}})
        rope = SpringRope(config)
        rope.set_state(NodeState.UNLOCKED)
        assert rope.color == (1.0, 0.0, 0.0, 1.0)


if __name__ == '__main__':
    raise SystemExit(pytest.main([__file__, '-v']))
