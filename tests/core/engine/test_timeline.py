"""
Unit tests for the Timeline scheduler.

Tests TU seeding, normalization, speed tie-breaking, the bounded stall
re-check and the schedule preview.
"""

from cardclash.core.data import Side
from cardclash.core.engine import Timeline, initial_time_units
from tests.test_utils import CardBuilder


class TestInitialTimeUnits:
    """Test TU seeding for units entering a slot."""

    def test_seed_from_speed(self):
        """Test that faster units start closer to acting."""
        assert initial_time_units(130) == 870
        assert initial_time_units(60) == 940

    def test_seed_never_negative(self):
        """Test that speeds above the base clamp to zero."""
        assert initial_time_units(1500) == 0
        assert initial_time_units(1000) == 0

    def test_custom_base(self):
        """Test seeding with a configured base."""
        assert initial_time_units(50, base=200) == 150


class TestNormalization:
    """Test the countdown normalization step."""

    def test_subtracts_minimum(self, timeline):
        """Test that the smallest countdown is subtracted from every unit."""
        a = CardBuilder.unit("A", time_units=870)
        b = CardBuilder.unit("B", time_units=900)
        c = CardBuilder.unit("C", Side.ENEMY, time_units=940)

        elapsed = timeline.normalize([a, b, c])

        assert elapsed == 870
        assert (a.time_units, b.time_units, c.time_units) == (0, 30, 70)
        assert timeline.current_time == 870

    def test_no_change_when_someone_is_ready(self, timeline):
        """Test that nothing moves when the minimum is already <= 0."""
        a = CardBuilder.unit("A", time_units=0)
        b = CardBuilder.unit("B", time_units=40)

        assert timeline.normalize([a, b]) == 0
        assert (a.time_units, b.time_units) == (0, 40)

    def test_negative_minimum_is_left_alone(self, timeline):
        """Test that a negative countdown does not push others upward."""
        a = CardBuilder.unit("A", time_units=-20)
        b = CardBuilder.unit("B", time_units=40)

        timeline.normalize([a, b])

        assert (a.time_units, b.time_units) == (-20, 40)

    def test_dead_units_are_ignored(self, timeline):
        """Test that dead units neither set the minimum nor tick."""
        alive = CardBuilder.unit("Alive", time_units=300)
        dead = CardBuilder.unit("Dead", time_units=10)
        dead.current_hp = 0

        timeline.normalize([alive, dead])

        assert alive.time_units == 0
        assert dead.time_units == 10

    def test_empty_input(self, timeline):
        """Test normalization with nothing to schedule."""
        assert timeline.normalize([]) == 0
        assert timeline.normalize([None]) == 0


class TestNextActor:
    """Test actor selection."""

    def test_single_ready_unit(self, timeline):
        """Test that the unit reaching zero first acts."""
        fast = CardBuilder.unit("Fast", speed=130, time_units=initial_time_units(130))
        slow = CardBuilder.unit("Slow", Side.ENEMY, speed=60, time_units=initial_time_units(60))

        assert timeline.next_actor([fast, slow]) is fast
        assert slow.time_units == 70

    def test_tie_goes_to_higher_speed(self, timeline):
        """Test that among ready units the fastest acts first."""
        slow = CardBuilder.unit("Slow", speed=80, time_units=0)
        fast = CardBuilder.unit("Fast", Side.ENEMY, speed=120, time_units=0)

        assert timeline.next_actor([slow, fast]) is fast

    def test_equal_speed_keeps_roster_order(self, timeline):
        """Test that equal speeds resolve in the order units were passed."""
        first = CardBuilder.unit("First", speed=100, time_units=0)
        second = CardBuilder.unit("Second", Side.ENEMY, speed=100, time_units=0)

        assert timeline.next_actor([first, second]) is first
        assert timeline.next_actor([second, first]) is second

    def test_one_actor_per_cycle(self, timeline):
        """Test that other ready units wait for later cycles without advancement."""
        a = CardBuilder.unit("A", speed=120, time_units=0)
        b = CardBuilder.unit("B", speed=100, time_units=0)

        actor = timeline.next_actor([a, b])
        actor.time_units += 100

        assert timeline.next_actor([a, b]) is b
        assert a.time_units == 100
        assert timeline.current_time == 0

    def test_negative_countdown_is_ready(self, timeline):
        """Test that a unit below zero is treated as ready."""
        a = CardBuilder.unit("A", time_units=-5)
        b = CardBuilder.unit("B", time_units=10)

        assert timeline.next_actor([a, b]) is a

    def test_stall_retries_are_bounded(self):
        """Test that an empty schedule reports each attempt and gives up."""
        attempts = []
        timeline = Timeline(max_stall_retries=2, on_stall=lambda a, m: attempts.append((a, m)))
        dead = CardBuilder.unit("Dead")
        dead.current_hp = 0

        assert timeline.next_actor([dead]) is None
        assert attempts == [(1, 3), (2, 3), (3, 3)]
        assert timeline.get_stats()["stalls"] == 3

    def test_cycles_are_counted(self, timeline):
        """Test that successful selections increment the cycle counter."""
        unit = CardBuilder.unit("Solo", time_units=50)
        timeline.next_actor([unit])

        stats = timeline.get_stats()
        assert stats["cycles"] == 1
        assert stats["current_time"] == 50


class TestPreview:
    """Test the schedule preview."""

    def test_preview_sorted_by_time_units(self, timeline):
        """Test that the preview lists soonest units first."""
        a = CardBuilder.unit("A", time_units=50, unit_id="a")
        b = CardBuilder.unit("B", time_units=10, unit_id="b")
        c = CardBuilder.unit("C", time_units=30, unit_id="c")

        preview = timeline.get_preview([a, b, c], 10)

        assert [entry.unit_id for entry in preview] == ["b", "c", "a"]
        assert [entry.order for entry in preview] == [0, 1, 2]
        assert preview[0].time_units == 10

    def test_preview_count_limit(self, timeline):
        """Test that the preview is truncated to the requested count."""
        units = [CardBuilder.unit(f"U{i}", time_units=i, unit_id=f"u{i}") for i in range(5)]

        assert timeline.get_unit_ids_in_order(units, 2) == ["u0", "u1"]
        assert timeline.get_preview(units, 0) == []

    def test_preview_skips_dead(self, timeline):
        """Test that dead units do not appear in the preview."""
        alive = CardBuilder.unit("Alive", unit_id="alive")
        dead = CardBuilder.unit("Dead", unit_id="dead")
        dead.current_hp = 0

        assert timeline.get_unit_ids_in_order([alive, dead], 5) == ["alive"]

    def test_reset(self, timeline):
        """Test that reset clears elapsed time and statistics."""
        timeline.next_actor([CardBuilder.unit("Solo", time_units=40)])
        timeline.reset()

        assert timeline.current_time == 0
        assert timeline.get_stats()["cycles"] == 0
