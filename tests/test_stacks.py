"""Tests for the output and locals stacks as driven through callbacks."""

import pytest

from pegrt.errors import ContractViolation, StackUnderflow, VariantMismatch
from pegrt.values import InputRange
from tests.helpers import callbacks, stack


class TestOutputStack:
    def test_push_empty_is_fresh_mapping(self):
        cb = callbacks()
        cb.push_empty()
        cb.push_empty()
        a, b = stack(cb)
        assert a == {} and b == {}
        assert a is not b

    def test_push_input_range_borrows_input(self):
        cb = callbacks(b"hello")
        cb.push_input_range(1, 4)
        (r,) = stack(cb)
        assert isinstance(r, InputRange)
        assert (r.start, r.end) == (1, 4)
        assert r.bytes() == b"ell"
        assert r.input is cb.ctx.buffer

    def test_range_may_end_one_past_input(self):
        cb = callbacks(b"ab")
        cb.push_input_range(2, 2)
        cb.push_input_range(0, 2)
        assert [r.text for r in stack(cb)] == ["", "ab"]

    @pytest.mark.parametrize("start,end", [(0, 3), (2, 1), (-1, 0)])
    def test_invalid_range_is_contract_violation(self, start, end):
        cb = callbacks(b"ab")
        with pytest.raises(ContractViolation):
            cb.push_input_range(start, end)

    def test_push_string_copies_and_decodes(self):
        cb = callbacks()
        cb.push_string("abc")
        cb.push_string(b"caf\xc3\xa9")
        assert stack(cb) == ["abc", "café"]

    def test_array_of_three_booleans_in_push_order(self):
        cb = callbacks()
        cb.push_array(False)
        for _ in range(3):
            cb.push_boolean(True)
            cb.append_to_array()
        assert stack(cb) == [[True, True, True]]

    def test_push_array_append_current(self):
        cb = callbacks()
        cb.push_string("x")
        cb.push_array(True)
        assert stack(cb) == [["x"]]

    def test_append_to_array_preserves_order(self):
        cb = callbacks()
        cb.push_array(False)
        for s in ("a", "b", "c"):
            cb.push_string(s)
            cb.append_to_array()
        assert stack(cb) == [["a", "b", "c"]]

    def test_append_to_non_array(self):
        cb = callbacks()
        cb.push_boolean(True)
        cb.push_boolean(False)
        with pytest.raises(VariantMismatch):
            cb.append_to_array()

    def test_make_label(self):
        cb = callbacks()
        cb.push_boolean(False)
        cb.make_label("done")
        assert stack(cb) == [{"done": False}]

    def test_merge_labels_disjoint(self):
        cb = callbacks()
        # pushed {b:2} then {a:1}: popped {a:1} first, then {b:2}
        cb.push_string("2")
        cb.make_label("b")
        cb.push_string("1")
        cb.make_label("a")
        cb.merge_labels(2)
        assert stack(cb) == [{"a": "1", "b": "2"}]

    def test_merge_labels_collision_later_popped_wins(self):
        cb = callbacks()
        cb.push_string("1")
        cb.make_label("a")
        cb.push_string("2")
        cb.make_label("a")
        # pop order: {a:2} then {a:1}; {a:1} is merged later and wins
        cb.merge_labels(2)
        assert stack(cb) == [{"a": "1"}]

    def test_merge_labels_does_not_mutate_inputs(self):
        cb = callbacks()
        cb.push_empty()
        first = stack(cb)[0]
        cb.push_string("v")
        cb.make_label("k")
        cb.merge_labels(2)
        assert first == {}
        assert stack(cb) == [{"k": "v"}]

    def test_merge_zero_labels_pushes_empty_mapping(self):
        cb = callbacks()
        cb.merge_labels(0)
        assert stack(cb) == [{}]

    def test_merge_labels_requires_mappings(self):
        cb = callbacks()
        cb.push_boolean(True)
        with pytest.raises(VariantMismatch):
            cb.merge_labels(1)

    def test_make_object_uses_factory(self):
        seen = []

        def factory(class_name, value):
            seen.append((class_name, value))
            return (class_name, value)

        cb = callbacks(factory=factory)
        cb.push_string("42")
        cb.make_object("Number")
        assert stack(cb) == [("Number", "42")]
        assert seen == [("Number", "42")]

    def test_pop_discards_top(self):
        cb = callbacks()
        cb.push_boolean(True)
        cb.push_boolean(False)
        cb.pop()
        assert stack(cb) == [True]

    def test_pop_empty_underflows(self):
        cb = callbacks()
        with pytest.raises(StackUnderflow):
            cb.pop()

    def test_make_label_on_empty_underflows(self):
        cb = callbacks()
        with pytest.raises(StackUnderflow):
            cb.make_label("x")

    def test_negative_merge_count(self):
        cb = callbacks()
        with pytest.raises(ContractViolation):
            cb.merge_labels(-1)


class TestLocalsStack:
    def test_push_moves_values_in_pop_order(self):
        cb = callbacks()
        cb.push_string("first")
        cb.push_string("second")
        cb.locals_push(2)
        assert stack(cb) == []
        assert cb.ctx.locals.items == ["second", "first"]

    def test_load_by_depth_from_top(self):
        cb = callbacks()
        cb.push_string("a")
        cb.push_string("b")
        cb.locals_push(2)
        # locals top is "a" (popped last)
        cb.locals_load(0)
        cb.locals_load(1)
        assert stack(cb) == ["a", "b"]
        assert len(cb.ctx.locals) == 2

    def test_push_pop_round_trip(self):
        cb = callbacks()
        cb.push_boolean(True)
        cb.locals_push(1)
        depth = len(cb.ctx.locals)
        cb.push_string("x")
        cb.push_string("y")
        cb.locals_push(2)
        cb.locals_pop(2)
        assert len(cb.ctx.locals) == depth
        cb.locals_load(0)
        assert stack(cb) == [True]

    def test_nested_scopes(self):
        cb = callbacks()
        cb.push_string("outer")
        cb.locals_push(1)
        cb.push_string("inner")
        cb.locals_push(1)
        cb.locals_load(1)
        cb.locals_pop(1)
        cb.locals_load(0)
        assert stack(cb) == ["outer", "outer"]

    def test_loaded_array_is_a_copy(self):
        cb = callbacks()
        cb.push_array(False)
        cb.locals_push(1)
        cb.locals_load(0)
        cb.push_boolean(True)
        cb.append_to_array()
        assert stack(cb) == [[True]]
        assert cb.ctx.locals.items == [[]]

    def test_pop_underflow(self):
        cb = callbacks()
        cb.push_boolean(True)
        cb.locals_push(1)
        with pytest.raises(StackUnderflow):
            cb.locals_pop(2)

    def test_load_out_of_range(self):
        cb = callbacks()
        with pytest.raises(StackUnderflow):
            cb.locals_load(0)

    def test_push_from_empty_output_underflows(self):
        cb = callbacks()
        with pytest.raises(StackUnderflow):
            cb.locals_push(1)


class TestTextArguments:
    def test_make_label_decodes_bytes(self):
        cb = callbacks()
        cb.push_boolean(True)
        cb.make_label(b"name")
        assert stack(cb) == [{"name": True}]

    def test_make_object_decodes_bytes(self):
        seen = []
        cb = callbacks(factory=lambda cls, v: seen.append(cls) or v)
        cb.push_string("1")
        cb.make_object(b"Number")
        assert seen == ["Number"]

    @pytest.mark.parametrize("op", ["push_string", "make_label", "make_object"])
    def test_invalid_utf8_is_variant_mismatch(self, op):
        cb = callbacks()
        cb.push_boolean(True)
        with pytest.raises(VariantMismatch, match="UTF-8") as exc:
            getattr(cb, op)(b"\xff\xfe")
        assert isinstance(exc.value.__cause__, UnicodeDecodeError)

    @pytest.mark.parametrize("op", ["push_string", "make_label", "make_object"])
    def test_non_text_is_variant_mismatch(self, op):
        cb = callbacks()
        cb.push_boolean(True)
        with pytest.raises(VariantMismatch, match="expected text"):
            getattr(cb, op)(42)
