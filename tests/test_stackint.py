import pytest

from dicecore.stackint import StackEmptyError, StackInt

MAX = 9223372036854775807

STEPS = [
    ("i", 1, [1], False),
    ("i", 2, [2, 1], False),
    ("i", 3, [3, 2, 1], False),
    ("i", 4, [4, 3, 2, 1], False),
    ("i", 5, [5, 4, 3, 2, 1], False),
    ("i", 6, [6, 5, 4, 3, 2, 1], False),
    ("i", 78930943, [78930943, 6, 5, 4, 3, 2, 1], False),
    ("i", 11918629, [11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("i", MAX, [MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("i", 25324944, [25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("i", 22402494, [22402494, 25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("i", 51881029, [51881029, 22402494, 25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("i", 79283552, [79283552, 51881029, 22402494, 25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("i", 67459748, [67459748, 79283552, 51881029, 22402494, 25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [79283552, 51881029, 22402494, 25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [51881029, 22402494, 25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [22402494, 25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [25324944, MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [MAX, 11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [11918629, 78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [78930943, 6, 5, 4, 3, 2, 1], False),
    ("r", 0, [6, 5, 4, 3, 2, 1], False),
    ("r", 0, [5, 4, 3, 2, 1], False),
    ("r", 0, [4, 3, 2, 1], False),
    ("r", 0, [3, 2, 1], False),
    ("r", 0, [2, 1], False),
    ("r", 0, [1], False),
    ("r", 0, [], False),
    ("r", 0, [], True),
    ("r", 0, [], True),
    ("r", 0, [], True),
    ("i", 1, [1], False),
    ("i", 2, [2, 1], False),
]


def test_stack_operations_table():
    stack = StackInt()
    for op, val, expected, empty in STEPS:
        if op == "i":
            stack.push(val)
        elif empty:
            with pytest.raises(StackEmptyError):
                stack.pop()
        else:
            stack.pop()
        assert stack.iterate(50) == expected


def test_pop_returns_top_value():
    stack = StackInt()
    for v in (1, MAX, 78930943):
        stack.push(v)
    assert [stack.pop() for _ in range(3)] == [78930943, MAX, 1]


def test_length_tracks_pushes_and_pops():
    stack = StackInt()
    for i in range(20):
        stack.push(i)
    stack.pop()
    assert len(stack) == 19


def test_many_values_across_chunks():
    stack = StackInt()
    values = [i * 1_000_003 for i in range(600)]
    for v in values:
        stack.push(v)
    assert stack.iterate(1000) == values[::-1]
    assert [stack.pop() for _ in values] == values[::-1]
    with pytest.raises(StackEmptyError):
        stack.pop()


@pytest.mark.parametrize("n", [0, -5])
def test_iterate_invalid_n_is_empty(n):
    stack = StackInt()
    stack.push(3)
    assert stack.iterate(n) == []


def test_iterate_limits_count():
    stack = StackInt()
    for i in range(10):
        stack.push(i)
    assert stack.iterate(3) == [9, 8, 7]


def test_negative_push_rejected():
    stack = StackInt()
    with pytest.raises(ValueError, match="negative"):
        stack.push(-7)
    assert len(stack) == 0