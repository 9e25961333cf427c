"""Tests for arrange progress controls."""

import threading

from bedarrange.arrange import ArrangeTask, EventCtl, PartitionGroup, TwoStepArrangeCtl
from bedarrange.models import ArrangeItem
from bedarrange.nesting import ArrangeCtl, NullCtl


class RecordingCtl:
    """Control that records status updates."""

    def __init__(self, cancelled=False):
        self.statuses = []
        self.cancelled = cancelled

    def update_status(self, remaining):
        self.statuses.append(remaining)

    def was_cancelled(self):
        return self.cancelled


class TestTwoStepArrangeCtl:
    """Tests for TwoStepArrangeCtl."""

    def make_task(self, unprintable_selected):
        return ArrangeTask(
            unprintable=PartitionGroup(
                selected=[ArrangeItem(f"u{i}", 10, 10, printable=False) for i in range(unprintable_selected)]
            )
        )

    def test_offsets_remaining(self):
        """Test status is offset by the unprintable items still to arrange."""
        parent = RecordingCtl()
        ctl = TwoStepArrangeCtl(parent, self.make_task(3))

        ctl.update_status(5)
        ctl.update_status(0)

        assert parent.statuses == [8, 3]

    def test_no_unprintables(self):
        """Test status passes through when there are no unprintable items."""
        parent = RecordingCtl()
        ctl = TwoStepArrangeCtl(parent, self.make_task(0))

        ctl.update_status(4)

        assert parent.statuses == [4]

    def test_forwards_cancellation(self):
        """Test cancellation is read from the parent on every call."""
        parent = RecordingCtl()
        ctl = TwoStepArrangeCtl(parent, self.make_task(1))

        assert ctl.was_cancelled() is False
        parent.cancelled = True
        assert ctl.was_cancelled() is True

    def test_is_arrange_ctl(self):
        """Test the relay satisfies the control protocol."""
        assert isinstance(TwoStepArrangeCtl(NullCtl(), self.make_task(0)), ArrangeCtl)


class TestEventCtl:
    """Tests for EventCtl."""

    def test_callback(self):
        """Test status updates reach the callback."""
        seen = []
        ctl = EventCtl(on_status=seen.append)

        ctl.update_status(3)
        ctl.update_status(2)

        assert seen == [3, 2]
        assert ctl.last_status == 2

    def test_cancel(self):
        """Test cancel sets the event."""
        ctl = EventCtl()
        assert ctl.was_cancelled() is False

        ctl.cancel()

        assert ctl.was_cancelled() is True
        assert ctl.cancel_event.is_set()

    def test_shared_event(self):
        """Test an external event cancels the control."""
        event = threading.Event()
        ctl = EventCtl(cancel_event=event)

        event.set()

        assert ctl.was_cancelled() is True


class TestNullCtl:
    """Tests for NullCtl."""

    def test_never_cancels(self):
        """Test the null control ignores status and never cancels."""
        ctl = NullCtl()
        ctl.update_status(10)
        assert ctl.was_cancelled() is False
        assert isinstance(ctl, ArrangeCtl)
