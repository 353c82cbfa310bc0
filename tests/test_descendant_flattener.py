"""Unit tests for resolve_descendants

Pre-order flattening of the reply tree below a message.
"""

import logging

from thread_focus.descendant_flattener import resolve_descendants


class TestPreOrderFlattening:
    """Test traversal order of flattened reply trees"""

    def test_no_children_gives_empty_list(self):
        """Test a message without replies has no descendants"""
        assert resolve_descendants("F", {}) == []

    def test_empty_children_list(self):
        """Test an explicit empty children list behaves like no entry"""
        assert resolve_descendants("F", {"F": []}) == []

    def test_direct_replies_keep_display_order(self):
        """Test siblings come out in their stored order"""
        assert resolve_descendants("F", {"F": ["A", "B", "C"]}) == ["A", "B", "C"]

    def test_subtree_before_next_sibling(self):
        """Test F -> [X, Y], X -> [Z] flattens to [X, Z, Y]"""
        children_of = {"F": ["X", "Y"], "X": ["Z"]}

        assert resolve_descendants("F", children_of) == ["X", "Z", "Y"]

    def test_deep_nesting(self):
        """Test multi-level subtrees are emitted depth first"""
        children_of = {
            "F": ["A", "B"],
            "A": ["A1", "A2"],
            "A1": ["A1a"],
            "B": ["B1"],
        }

        assert resolve_descendants("F", children_of) == ["A", "A1", "A1a", "A2", "B", "B1"]

    def test_start_id_excluded(self):
        """Test the starting message is never part of its own descendants"""
        result = resolve_descendants("F", {"F": ["X"]})

        assert "F" not in result

    def test_children_lists_not_mutated(self):
        """Test the stored children lists keep their order after traversal"""
        children_of = {"F": ["X", "Y"], "X": ["Z"]}

        resolve_descendants("F", children_of)

        assert children_of == {"F": ["X", "Y"], "X": ["Z"]}

    def test_tuple_children_supported(self):
        """Test any sequence type works for children lists"""
        assert resolve_descendants("F", {"F": ("X", "Y")}) == ["X", "Y"]


class TestMalformedReplyTrees:
    """Test termination and truncation on malformed reply data"""

    def test_cycle_terminates(self):
        """Test X <-> Y children cycle returns a finite list"""
        children_of = {"X": ["Y"], "Y": ["X"]}

        assert resolve_descendants("X", children_of) == ["Y"]

    def test_duplicate_child_stops_traversal(self):
        """Test a child listed twice under one parent is emitted once"""
        assert resolve_descendants("F", {"F": ["X", "X"]}) == ["X"]

    def test_duplicate_truncates_later_siblings(self):
        """Test traversal stops at the first repeat, dropping what follows"""
        children_of = {"F": ["X", "Y", "X", "W"]}

        assert resolve_descendants("F", children_of) == ["X", "Y"]

    def test_reply_pointing_back_to_start(self):
        """Test a subtree cycling back to the start stops the walk"""
        children_of = {"F": ["X", "Y"], "X": ["F"]}

        assert resolve_descendants("F", children_of) == ["X"]

    def test_self_child(self):
        """Test a message listing itself as a reply yields nothing"""
        assert resolve_descendants("F", {"F": ["F"]}) == []

    def test_no_duplicates_in_result(self):
        """Test results never repeat an id on tangled input"""
        children_of = {
            "F": ["A", "B"],
            "A": ["B", "C"],
            "B": ["A"],
            "C": ["F"],
        }

        result = resolve_descendants("F", children_of)

        assert len(result) == len(set(result))

    def test_truncation_logs_warning(self, caplog):
        """Test truncation is reported through logging"""
        with caplog.at_level(logging.WARNING, logger="thread_focus.descendant_flattener"):
            resolve_descendants("F", {"F": ["X", "X"]})

        assert "revisits X" in caplog.text
