# logic/rotating_queue.py


class RotatingQueue:
    """
    Round-robin cursor over a fixed list of items.
    next() hands out the items in order and wraps from the last back to the first.
    """

    def __init__(self, items=()):
        self._items = list(items)
        self._index = 0

    def __len__(self):
        return len(self._items)

    @property
    def items(self):
        return self._items

    def append(self, item):
        self._items.append(item)

    def next(self):
        if not self._items:
            raise IndexError('next() on an empty RotatingQueue')
        item = self._items[self._index]
        self._index = (self._index + 1) % len(self._items)
        return item
