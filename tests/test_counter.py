import threading

import pytest

from remitos.db.sqlite import SqliteCounterStore
from remitos.errors import CounterError
from remitos.order.counter import Counter, MemoryCounterStore
from remitos.utils.formatters import remito_number


class TestCounter:
    def test_starts_at_one(self, counter):
        assert counter.peek() == 1
        assert counter.take_next() == 1
        assert counter.peek() == 2

    def test_take_next_at_41(self):
        store = MemoryCounterStore({"numeroRemito": "41"})
        counter = Counter(store)
        assert remito_number(counter.take_next()) == "0041"
        assert store.data["numeroRemito"] == "42"

    def test_peek_does_not_advance(self, counter, store):
        for _ in range(3):
            counter.peek()
        assert store.read("numeroRemito") is None
        assert counter.peek() == 1

    def test_unreadable_value_refuses(self):
        store = MemoryCounterStore({"numeroRemito": "abc"})
        counter = Counter(store)
        with pytest.raises(CounterError):
            counter.peek()
        with pytest.raises(CounterError):
            counter.take_next()
        assert store.data["numeroRemito"] == "abc"

    def test_concurrent_take_next_never_repeats(self, counter):
        seen = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                n = counter.take_next()
                with lock:
                    seen.append(n)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(seen) == list(range(1, 401))
        assert counter.peek() == 401


class TestSqliteCounterStore:
    def test_survives_reopen(self, tmp_path):
        path = str(tmp_path / "data" / "remitos.db")
        first = Counter(SqliteCounterStore(path))
        assert [first.take_next() for _ in range(3)] == [1, 2, 3]

        reopened = Counter(SqliteCounterStore(path))
        assert reopened.peek() == 4

    def test_missing_key_reads_none(self, tmp_path):
        store = SqliteCounterStore(str(tmp_path / "r.db"))
        assert store.read("numeroRemito") is None
        store.write("numeroRemito", "10")
        assert store.read("numeroRemito") == "10"

    def test_swap_returns_old_value(self, tmp_path):
        store = SqliteCounterStore(str(tmp_path / "r.db"))
        assert store.swap("numeroRemito", lambda old: "2") is None
        assert store.swap("numeroRemito", lambda old: str(int(old) + 5)) == "2"
        assert store.read("numeroRemito") == "7"

    def test_corrupt_value_rolls_back(self, tmp_path):
        path = str(tmp_path / "r.db")
        store = SqliteCounterStore(path)
        store.write("numeroRemito", "x12")
        counter = Counter(store)

        with pytest.raises(CounterError):
            counter.take_next()

        assert store.read("numeroRemito") == "x12"

    def test_separate_processes_never_repeat(self, tmp_path):
        # one Counter per worker, each with its own lock and connection
        path = str(tmp_path / "shared.db")
        counters = [Counter(SqliteCounterStore(path)) for _ in range(4)]
        seen = []
        lock = threading.Lock()

        def worker(c):
            for _ in range(25):
                n = c.take_next()
                with lock:
                    seen.append(n)

        threads = [threading.Thread(target=worker, args=(c,)) for c in counters]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(seen) == list(range(1, 101))
        assert counters[0].peek() == 101


class TestRemitoNumber:
    def test_padding_and_widening(self):
        assert remito_number(1) == "0001"
        assert remito_number(9999) == "9999"
        assert remito_number(12345) == "12345"
