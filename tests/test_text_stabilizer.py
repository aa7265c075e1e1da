from visionary.logic.text_stabilizer import StableTextCandidate, TextStabilizer


class TestTextStabilizer:
    def test_three_repeats_become_eligible(self):
        tracker = TextStabilizer()
        assert tracker.observe("Exit Left") is None
        assert tracker.observe("Exit Left") is None
        assert tracker.observe("Exit Left") == "Exit Left"
        assert tracker.candidate == StableTextCandidate("Exit Left", 3)

    def test_stays_eligible_after_threshold(self):
        tracker = TextStabilizer()
        for _ in range(3):
            tracker.observe("Exit Left")
        assert tracker.observe("Exit Left") == "Exit Left"
        assert tracker.candidate.streak == 4

    def test_dissimilar_text_resets_streak(self):
        tracker = TextStabilizer()
        tracker.observe("Exit Left")
        tracker.observe("Exit Right")
        assert tracker.candidate == StableTextCandidate("Exit Right", 1)

    def test_similar_text_keeps_original_candidate(self):
        tracker = TextStabilizer()
        tracker.observe("Exit Left")
        tracker.observe("Exit Lef")
        assert tracker.candidate == StableTextCandidate("Exit Left", 2)

    def test_no_text_drops_candidate(self):
        tracker = TextStabilizer()
        tracker.observe("Exit Left")
        tracker.observe("Exit Left")
        assert tracker.observe(None) is None
        assert tracker.candidate is None
        # no partial credit carried over
        assert tracker.observe("Exit Left") is None
        assert tracker.candidate.streak == 1

    def test_blank_text_counts_as_no_text(self):
        tracker = TextStabilizer()
        tracker.observe("Exit Left")
        tracker.observe("   ")
        assert tracker.candidate is None

    def test_custom_threshold(self):
        tracker = TextStabilizer(threshold=1)
        assert tracker.observe("Platform 2") == "Platform 2"
