from visionary.announcer_module import AnnouncementArbiter
from visionary.common import Decision


def object_decision(label="person", conf=0.8, meters=3):
    return Decision(
        text_to_say=f"{label} at {meters} meters",
        debug_text=f"{label} {conf}",
        conf=conf,
        label=label,
    )


class TestObjectAnnouncements:
    def test_speaks_and_remembers(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_object(object_decision())
        assert speech.spoken == ["person at 3 meters"]
        assert arbiter.state.last_announced_label == "person"
        assert arbiter.state.last_announced_confidence == 0.8

    def test_preempts_current_utterance(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_object(object_decision("dog", 0.7))
        arbiter.announce_object(object_decision("car", 0.9, 5))
        assert speech.events == [
            ("speak", "dog at 3 meters"),
            ("stop", ""),
            ("speak", "car at 5 meters"),
        ]

    def test_no_stop_when_channel_idle(self, speech):
        AnnouncementArbiter(speech).announce_object(object_decision())
        assert ("stop", "") not in speech.events


class TestTextAnnouncements:
    def test_first_text_is_spoken_with_prefix(self, speech):
        arbiter = AnnouncementArbiter(speech)
        assert arbiter.announce_text("Exit Left", now=100.0)
        assert speech.spoken == ["Detected text: Exit Left"]
        assert arbiter.state.last_announced_text == "Exit Left"
        assert arbiter.state.last_text_announcement_time == 100.0

    def test_similar_text_within_cooldown_suppressed(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_text("Exit Left", now=100.0)
        assert not arbiter.announce_text("Exit Lef", now=102.0)
        assert speech.spoken == ["Detected text: Exit Left"]

    def test_dissimilar_text_within_cooldown_suppressed(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_text("Exit Left", now=100.0)
        assert not arbiter.announce_text("Platform 4", now=104.9)

    def test_dissimilar_text_after_cooldown_spoken(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_text("Exit Left", now=100.0)
        assert arbiter.announce_text("Platform 4", now=105.0)
        assert speech.spoken[-1] == "Detected text: Platform 4"

    def test_similar_text_after_cooldown_still_suppressed(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_text("Exit Left", now=100.0)
        assert not arbiter.announce_text("Exit Left", now=200.0)

    def test_text_preempts_object(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_object(object_decision())
        arbiter.announce_text("Exit Left", now=1.0)
        assert speech.events[-2:] == [("stop", ""), ("speak", "Detected text: Exit Left")]

    def test_object_preempts_text(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_text("Exit Left", now=1.0)
        arbiter.announce_object(object_decision("car", 0.9, 5))
        assert speech.events == [
            ("speak", "Detected text: Exit Left"),
            ("stop", ""),
            ("speak", "car at 5 meters"),
        ]

    def test_object_and_text_memory_independent(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_text("Exit Left", now=100.0)
        arbiter.announce_object(object_decision())
        assert arbiter.state.last_announced_text == "Exit Left"
        assert arbiter.state.last_announced_label == "person"


class TestStatusAnnouncements:
    def test_status_leaves_memory_untouched(self, speech):
        arbiter = AnnouncementArbiter(speech)
        arbiter.announce_status("Walking Stick Online")
        assert speech.spoken == ["Walking Stick Online"]
        assert arbiter.state.last_announced_label is None
        assert arbiter.state.last_announced_text is None
