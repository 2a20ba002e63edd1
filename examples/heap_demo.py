"""
d-ary Min-Heap Demo for TinyDS.

This example demonstrates the MinHeap priority queue with injected
comparators and different fan-outs.
"""

from tiny_ds.algorithms.heap import MinHeap


def demonstrate_task_queue():
    """Use the heap as a task queue ordered by priority."""
    print("\n=== Task Queue Demo ===")

    queue = MinHeap(lambda a, b: a[0] - b[0], fan_out=4)
    for task in [(3, "write report"), (1, "fix outage"), (2, "review PR"), (5, "lunch")]:
        queue.insert(task)
        print(f"  Queued {task[1]!r} with priority {task[0]}")

    print(f"\nNext up: {queue.peek()[1]!r}")
    while len(queue) > 0:
        priority, name = queue.extract()
        print(f"  Handling {name!r} (priority {priority})")

    print(f"Extract from empty queue: {queue.extract()}")


def demonstrate_fan_outs():
    """The same items come out in the same order for every fan-out."""
    print("\n=== Fan-out Demo ===")

    items = [42, 7, 19, 3, 88, 7, 61, 25]
    for fan_out in (1, 2, 4, 8):
        heap = MinHeap.from_iterable(items, fan_out=fan_out)
        ordered = [heap.extract() for _ in range(len(heap))]
        print(f"  fan_out={fan_out}: {ordered}")


def demonstrate_custom_order():
    """Order strings by length, longest first, without touching the strings."""
    print("\n=== Custom Comparator Demo ===")

    heap = MinHeap(lambda a, b: len(b) - len(a), fan_out=3)
    heap.extend(["fig", "banana", "kiwi", "watermelon", "plum"])
    print(f"  Longest first: {[heap.extract() for _ in range(len(heap))]}")


if __name__ == "__main__":
    demonstrate_task_queue()
    demonstrate_fan_outs()
    demonstrate_custom_order()
