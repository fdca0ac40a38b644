import pytest

from logic.rotating_queue import RotatingQueue


def test_hands_out_items_in_order_and_wraps():
    queue = RotatingQueue(['G1', 'G2', 'G3'])
    assert [queue.next() for _ in range(4)] == ['G1', 'G2', 'G3', 'G1']


def test_append_extends_the_cycle():
    queue = RotatingQueue()
    queue.append('a')
    queue.append('b')
    assert len(queue) == 2
    assert [queue.next() for _ in range(3)] == ['a', 'b', 'a']


def test_next_on_empty_queue_raises():
    with pytest.raises(IndexError):
        RotatingQueue().next()


def test_each_queue_has_its_own_cursor():
    first = RotatingQueue([1, 2])
    first.next()
    second = RotatingQueue([1, 2])
    assert second.next() == 1
