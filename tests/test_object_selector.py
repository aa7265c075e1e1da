from visionary.common import Detection, build_frame_set
from visionary.logic.object_selector import ObjectSelector
from visionary.logic.state import AnnouncementState

from fakes import make_detection


def frame_set(*detections):
    return build_frame_set(detections, 0.5)


class TestBuildFrameSet:
    def test_filters_at_or_below_threshold(self):
        result = frame_set(make_detection("dog", 0.5), make_detection("cat", 0.51))
        assert list(result) == ["cat"]

    def test_last_seen_box_wins(self):
        first = Detection("cup", 0.7, (0.0, 0.0, 0.1, 0.1))
        second = Detection("cup", 0.6, (0.5, 0.5, 0.2, 0.2))
        assert frame_set(first, second) == {"cup": second}


class TestObjectSelector:
    def setup_method(self):
        self.selector = ObjectSelector()
        self.state = AnnouncementState()

    def test_picks_highest_confidence(self):
        decision = self.selector.decide(
            frame_set(make_detection("dog", 0.6), make_detection("cat", 0.9)),
            self.state,
            720,
        )
        assert decision.label == "cat"
        assert decision.text_to_say == "cat at 3 meters"
        assert decision.conf == 0.9

    def test_unchanged_frame_not_worthy(self):
        detections = frame_set(make_detection("dog", 0.6), make_detection("cat", 0.9))
        self.state.remember_object("cat", 0.9)
        assert self.selector.decide(detections, self.state, 720) is None

    def test_higher_confidence_is_worthy(self):
        self.state.remember_object("cat", 0.9)
        decision = self.selector.decide(
            frame_set(make_detection("cat", 0.95)), self.state, 720
        )
        assert decision is not None
        assert decision.conf == 0.95

    def test_lower_confidence_same_label_not_worthy(self):
        self.state.remember_object("cat", 0.9)
        assert self.selector.decide(frame_set(make_detection("cat", 0.8)), self.state, 720) is None

    def test_new_label_is_worthy_at_lower_confidence(self):
        self.state.remember_object("cat", 0.9)
        decision = self.selector.decide(frame_set(make_detection("dog", 0.6)), self.state, 720)
        assert decision.label == "dog"

    def test_empty_frame_is_skipped(self):
        assert self.selector.decide({}, self.state, 720) is None

    def test_tie_keeps_first_seen(self):
        top = self.selector.select(
            frame_set(make_detection("chair", 0.7), make_detection("table", 0.7))
        )
        assert top.label == "chair"

    def test_zero_height_box_skips_announcement(self):
        detections = frame_set(make_detection("person", 0.8, height=0.0))
        assert self.selector.decide(detections, self.state, 720) is None

    def test_decide_does_not_mutate_state(self):
        self.selector.decide(frame_set(make_detection("cat", 0.9)), self.state, 720)
        assert self.state.last_announced_label is None
