import threading

import pytest

from visionary.logic.frame_governor import FrameGovernor


class TestAdmission:
    def test_second_frame_dropped_while_busy(self):
        governor = FrameGovernor()
        assert governor.admit("frame-1") is True
        assert governor.admit("frame-2") is False
        assert governor.busy

    def test_admits_again_after_complete(self):
        governor = FrameGovernor()
        governor.admit("frame-1")
        governor.complete()
        assert governor.admit("frame-2") is True

    def test_counts_admitted_and_dropped(self):
        governor = FrameGovernor()
        governor.admit()
        governor.admit()
        governor.admit()
        assert governor.admitted == 1
        assert governor.dropped == 2

    def test_only_one_thread_wins(self):
        governor = FrameGovernor()
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(governor.admit())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results.count(True) == 1


class TestTextCycle:
    def test_first_cycle_is_due(self):
        assert FrameGovernor().text_cycle_due(0.0)

    def test_paced_by_interval(self):
        governor = FrameGovernor(text_interval_s=0.5)
        assert governor.text_cycle_due(10.0)
        assert not governor.text_cycle_due(10.3)
        assert governor.text_cycle_due(10.5)
        assert not governor.text_cycle_due(10.9)
        assert governor.text_cycle_due(11.0)


class TestCounters:
    def test_counter_read_waits_for_lock(self):
        governor = FrameGovernor()
        governor.admit()
        results = []
        with governor._lock:
            reader = threading.Thread(target=lambda: results.append(governor.dropped))
            reader.start()
            reader.join(timeout=0.1)
            assert reader.is_alive()
        reader.join(timeout=1.0)
        assert results == [0]
        assert governor.admitted == 1

    def test_counters_consistent_under_contention(self):
        governor = FrameGovernor()

        def worker():
            for _ in range(200):
                if governor.admit():
                    governor.complete()

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert governor.admitted + governor.dropped == 800

    def test_counters_are_read_only(self):
        governor = FrameGovernor()
        with pytest.raises(AttributeError):
            governor.dropped = 5
