"""
Test cases for the bounded, closable Channel.
"""

import threading
import time
import unittest

import pytest

from .channel import END_OF_STREAM, Channel
from ..helper.error import ClosedQueueError, InvalidConfigurationError


class TestChannel(unittest.TestCase):
    """Test Channel put/take/close semantics."""

    def test_invalid_capacity(self):
        """Test capacity must be at least 1."""
        with pytest.raises(InvalidConfigurationError, match="capacity must be at least 1"):
            Channel(0)

    def test_fifo_order(self):
        """Test items come out in the order they went in."""
        channel = Channel[int](3, "numbers")
        for i in range(3):
            channel.put(i)

        self.assertEqual(channel.qsize(), 3)
        self.assertEqual([channel.take() for _ in range(3)], [0, 1, 2])
        self.assertEqual(channel.put_count, 3)
        self.assertEqual(channel.take_count, 3)

    def test_close_drains_before_end_of_stream(self):
        """Test closing keeps buffered items for consumers."""
        channel = Channel[int](5)
        channel.put(1)
        channel.put(2)
        channel.close()

        self.assertEqual(channel.take(), 1)
        self.assertEqual(channel.take(), 2)
        self.assertIs(channel.take(), END_OF_STREAM)
        self.assertIs(channel.take(), END_OF_STREAM)

    def test_put_after_close(self):
        """Test putting into a closed channel raises ClosedQueueError."""
        channel = Channel[int](1, "results")
        channel.close()

        with pytest.raises(ClosedQueueError, match="put on closed channel results"):
            channel.put(1)

    def test_close_is_idempotent(self):
        """Test closing twice is harmless."""
        channel = Channel[int](1)
        channel.close()
        channel.close()
        self.assertTrue(channel.closed)

    def test_take_blocks_until_put(self):
        """Test take waits for a producer."""
        channel = Channel[str](1)
        received = []

        consumer = threading.Thread(target=lambda: received.append(channel.take()))
        consumer.start()
        time.sleep(0.05)
        self.assertTrue(consumer.is_alive())

        channel.put("item")
        consumer.join(timeout=2.0)
        self.assertEqual(received, ["item"])

    def test_take_unblocks_on_close(self):
        """Test blocked consumers observe end-of-stream when closed."""
        channel = Channel[int](1)
        received = []

        consumers = [
            threading.Thread(target=lambda: received.append(channel.take()))
            for _ in range(3)
        ]
        for consumer in consumers:
            consumer.start()
        time.sleep(0.05)

        channel.close()
        for consumer in consumers:
            consumer.join(timeout=2.0)
            self.assertFalse(consumer.is_alive())
        self.assertEqual(received, [END_OF_STREAM] * 3)

    def test_put_blocks_when_full(self):
        """Test put waits for free space under bounded capacity."""
        channel = Channel[int](1)
        channel.put(1)

        producer = threading.Thread(target=channel.put, args=(2,))
        producer.start()
        time.sleep(0.05)
        self.assertTrue(producer.is_alive())

        self.assertEqual(channel.take(), 1)
        producer.join(timeout=2.0)
        self.assertFalse(producer.is_alive())
        self.assertEqual(channel.take(), 2)

    def test_blocked_put_fails_on_close(self):
        """Test a producer blocked on a full channel fails once it is closed."""
        channel = Channel[int](1)
        channel.put(1)
        errors = []

        def produce():
            try:
                channel.put(2)
            except ClosedQueueError as e:
                errors.append(e)

        producer = threading.Thread(target=produce)
        producer.start()
        time.sleep(0.05)
        channel.close()
        producer.join(timeout=2.0)

        self.assertEqual(len(errors), 1)
        self.assertEqual(channel.take(), 1)
        self.assertIs(channel.take(), END_OF_STREAM)

    def test_timeouts(self):
        """Test put and take honour their timeouts."""
        channel = Channel[int](1)
        with self.assertRaises(TimeoutError):
            channel.take(timeout=0.05)

        channel.put(1)
        with self.assertRaises(TimeoutError):
            channel.put(2, timeout=0.05)

    def test_iteration(self):
        """Test iterating stops at end-of-stream."""
        channel = Channel[int](3)
        for i in (1, 2, 3):
            channel.put(i)
        channel.close()

        self.assertEqual(list(channel), [1, 2, 3])

    def test_concurrent_producers_and_consumers(self):
        """Test no item is lost or duplicated under concurrent access."""
        channel = Channel[int](8)
        taken = []
        taken_lock = threading.Lock()

        def produce(start):
            for i in range(start, start + 500):
                channel.put(i)

        def consume():
            for item in channel:
                with taken_lock:
                    taken.append(item)

        producers = [threading.Thread(target=produce, args=(n * 500,)) for n in range(4)]
        consumers = [threading.Thread(target=consume) for _ in range(4)]
        for thread in producers + consumers:
            thread.start()
        for producer in producers:
            producer.join(timeout=10.0)
        channel.close()
        for consumer in consumers:
            consumer.join(timeout=10.0)

        self.assertEqual(sorted(taken), list(range(2000)))

    def test_end_of_stream_is_falsy_singleton(self):
        """Test the end-of-stream marker cannot be mistaken for an item."""
        self.assertFalse(END_OF_STREAM)
        self.assertEqual(repr(END_OF_STREAM), "END_OF_STREAM")
        self.assertIs(type(END_OF_STREAM)(), END_OF_STREAM)


if __name__ == "__main__":
    unittest.main()
