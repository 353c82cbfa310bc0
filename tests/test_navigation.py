"""Unit tests for move_focus

Translating up/down moves relative to a message into linear indices.
"""

import pytest

from thread_focus import Direction, ThreadAssembler, assemble, move_down, move_focus, move_up
from tests.fixtures import sample_example_snapshot


@pytest.fixture
def context():
    """Assembled worked example: [A, B, C, focus, D, F, E]"""
    return ThreadAssembler().assemble("focus", sample_example_snapshot())


class TestMoveFromFocused:
    """Test moves anchored at the focused message"""

    def test_up_lands_on_nearest_ancestor(self, context):
        """Test moving up from focus selects C at index 2"""
        index = move_focus("focus", Direction.UP, context)

        assert index == 2
        assert context.sequence[index] == "C"

    def test_down_lands_on_first_descendant(self, context):
        """Test moving down from focus selects D at index 4"""
        index = move_focus("focus", Direction.DOWN, context)

        assert index == 4
        assert context.sequence[index] == "D"

    def test_up_without_ancestors_is_noop(self):
        """Test a root focus cannot move up"""
        context = assemble("root", {}, {"root": ["r1"]})

        assert move_up("root", context) is None

    def test_down_without_descendants_is_noop(self):
        """Test a leaf focus cannot move down"""
        context = assemble("leaf", {"leaf": "root"}, {})

        assert move_down("leaf", context) is None

    def test_accepts_string_direction(self, context):
        """Test plain 'up'/'down' strings are accepted"""
        assert move_focus("focus", "up", context) == 2


class TestMoveFromAncestors:
    """Test moves anchored at an ancestor"""

    def test_up_from_middle_ancestor(self, context):
        """Test moving up from B selects A"""
        assert move_up("B", context) == 0

    def test_down_from_middle_ancestor(self, context):
        """Test moving down from B selects C"""
        assert move_down("B", context) == 2

    def test_down_from_last_ancestor_reaches_focus(self, context):
        """Test moving down from C returns to the focused message"""
        index = move_down("C", context)

        assert index == 3
        assert context.sequence[index] == "focus"

    def test_up_from_first_ancestor_is_noop(self, context):
        """Test the top of the thread is a boundary"""
        assert move_up("A", context) is None


class TestMoveFromDescendants:
    """Test moves anchored at a descendant"""

    def test_up_from_first_descendant_reaches_focus(self, context):
        """Test moving up from D selects the focused message at index 3"""
        assert move_up("D", context) == 3

    def test_up_from_later_descendant(self, context):
        """Test moving up from F selects D"""
        index = move_up("F", context)

        assert context.sequence[index] == "D"

    def test_down_skips_focused_slot(self, context):
        """Test moving down from D selects F, the next row"""
        index = move_down("D", context)

        assert index == 5
        assert context.sequence[index] == "F"

    def test_down_from_last_descendant_is_noop(self, context):
        """Test the bottom of the thread is a boundary"""
        assert move_down("E", context) is None


class TestNavigationProperties:
    """Test properties that hold across threads"""

    def test_unknown_anchor_is_noop(self, context):
        """Test a stale id from another snapshot does nothing"""
        assert move_up("stale", context) is None
        assert move_down("stale", context) is None

    def test_down_then_up_round_trip_from_focus(self, context):
        """Test down then up from the focus returns to the focus index"""
        down = move_down("focus", context)
        up = move_up(context.sequence[down], context)

        assert up == context.focused_index

    @pytest.mark.parametrize("anchor", ["A", "B", "C", "focus", "D", "F"])
    def test_down_then_up_round_trip_everywhere(self, context, anchor):
        """Test down then up returns to the starting row for every non-last row"""
        start = context.index_of(anchor)
        down = move_down(anchor, context)
        up = move_up(context.sequence[down], context)

        assert up == start

    def test_every_move_stays_in_range(self, context):
        """Test no move ever produces an out-of-range index"""
        for anchor in context.sequence:
            for direction in Direction:
                index = move_focus(anchor, direction, context)
                assert index is None or 0 <= index < len(context)

    def test_moves_step_one_row(self, context):
        """Test each move lands on the adjacent row"""
        for position, anchor in enumerate(context.sequence):
            up = move_up(anchor, context)
            down = move_down(anchor, context)
            if up is not None:
                assert up == position - 1
            if down is not None:
                assert down == position + 1
