"""
Tests for AnnotationLifecycle.

The lifecycle only talks to a PlaybackGateway, so the whole draft -> commit
flow runs here without any Qt objects.
"""

import pytest

from region_annote.domain import AnnotationStore, DraftMode, Rectangle
from region_annote.lifecycle import AnnotationLifecycle, Rejection

from conftest import draw


class TestDrawing:
    def test_starts_idle(self, lifecycle):
        assert lifecycle.mode is DraftMode.IDLE
        assert lifecycle.draft.rectangle is None
        assert lifecycle.draft.start_time is None

    def test_pointer_down_begins_draft(self, lifecycle, gateway):
        gateway.on_time_update(5.0)
        result = lifecycle.pointer_down(10, 10)

        assert result.accepted
        assert lifecycle.mode is DraftMode.DRAWING
        assert lifecycle.draft.rectangle == Rectangle(10, 10, 10, 10)
        assert lifecycle.draft.start_time == "0:05:00"

    def test_pointer_move_extends(self, lifecycle):
        lifecycle.pointer_down(10, 10)
        lifecycle.pointer_move(30, 20)
        lifecycle.pointer_move(50, 40)
        assert lifecycle.draft.rectangle == Rectangle(10, 10, 50, 40)

    def test_pointer_move_while_idle_is_rejected(self, lifecycle):
        result = lifecycle.pointer_move(5, 5)
        assert not result.accepted
        assert result.rejection is Rejection.NOT_DRAWING
        assert lifecycle.draft.rectangle is None

    def test_pointer_up_pauses_and_waits_for_comment(self, lifecycle, gateway, player):
        gateway.play()
        result = draw(lifecycle)

        assert result.accepted
        assert lifecycle.mode is DraftMode.PENDING_COMMENT
        assert player.calls[-1] == "pause"
        assert not gateway.is_playing

    def test_pointer_leave_acts_like_pointer_up(self, lifecycle, player):
        lifecycle.pointer_down(1, 1)
        lifecycle.pointer_move(9, 9)
        result = lifecycle.pointer_leave()

        assert result.accepted
        assert lifecycle.mode is DraftMode.PENDING_COMMENT
        assert player.calls == ["pause"]

    def test_pointer_up_without_press_is_noop(self, lifecycle, player):
        result = lifecycle.pointer_up()
        assert result.rejection is Rejection.NOT_DRAWING
        assert lifecycle.mode is DraftMode.IDLE
        assert player.calls == []

    def test_pointer_leave_when_idle_is_noop(self, lifecycle, player):
        lifecycle.pointer_leave()
        assert lifecycle.mode is DraftMode.IDLE
        assert player.calls == []

    def test_click_without_move_gives_zero_area_draft(self, lifecycle):
        lifecycle.pointer_down(20, 20)
        result = lifecycle.pointer_up()

        assert result.accepted
        assert lifecycle.mode is DraftMode.PENDING_COMMENT
        assert lifecycle.draft.rectangle == Rectangle(20, 20, 20, 20)

    def test_new_press_while_pending_restarts_draft(self, lifecycle, gateway):
        gateway.on_time_update(2.0)
        draw(lifecycle)
        lifecycle.set_comment("first")
        lifecycle.set_end_time(4.0)

        gateway.on_time_update(3.0)
        lifecycle.pointer_down(100, 100)

        d = lifecycle.draft
        assert d.mode is DraftMode.DRAWING
        assert d.rectangle == Rectangle(100, 100, 100, 100)
        assert d.start_time == "0:03:00"
        assert d.end_time is None
        assert d.comment == ""


class TestPendingComment:
    def test_comment_only_editable_while_pending(self, lifecycle):
        assert lifecycle.set_comment("hi").rejection is Rejection.NOT_PENDING
        lifecycle.pointer_down(0, 0)
        assert lifecycle.set_comment("hi").rejection is Rejection.NOT_PENDING
        lifecycle.pointer_up()
        assert lifecycle.set_comment("hi").accepted
        assert lifecycle.draft.comment == "hi"

    def test_scrub_bounds_span_start_to_duration(self, lifecycle, gateway):
        gateway.on_time_update(5.5)
        draw(lifecycle)
        # The decoded start drops centiseconds.
        assert lifecycle.scrub_bounds() == (5.0, 60.0)

    def test_scrub_bounds_never_inverted(self, lifecycle, gateway):
        gateway.on_duration_known(3.0)
        gateway.on_time_update(10.0)
        draw(lifecycle)
        assert lifecycle.scrub_bounds() == (10.0, 10.0)

    def test_set_end_time_encodes(self, lifecycle, gateway):
        gateway.on_time_update(5.0)
        draw(lifecycle)
        lifecycle.set_end_time(8.25)
        assert lifecycle.draft.end_time == "0:08:25"

    @pytest.mark.parametrize("value, expected", [(1.0, "0:05:00"), (999.0, "1:00:00")])
    def test_set_end_time_is_clamped(self, lifecycle, gateway, value, expected):
        gateway.on_time_update(5.0)
        draw(lifecycle)
        lifecycle.set_end_time(value)
        assert lifecycle.draft.end_time == expected

    def test_set_end_time_outside_pending_is_rejected(self, lifecycle):
        assert lifecycle.set_end_time(3.0).rejection is Rejection.NOT_PENDING

    def test_effective_end_time_follows_playback_until_set(self, lifecycle, gateway):
        gateway.on_time_update(5.0)
        draw(lifecycle)
        gateway.on_time_update(7.5)
        assert lifecycle.effective_end_time() == "0:07:50"
        lifecycle.set_end_time(9.0)
        gateway.on_time_update(12.0)
        assert lifecycle.effective_end_time() == "0:09:00"


class TestCommit:
    def test_ball_out_scenario(self, lifecycle, gateway, committed):
        gateway.on_time_update(5.0)
        lifecycle.pointer_down(10, 10)
        lifecycle.pointer_move(50, 40)
        lifecycle.pointer_up()
        lifecycle.set_end_time(8.25)
        lifecycle.set_comment("ball out")

        result = lifecycle.commit()

        assert result.accepted
        a = result.annotation
        assert a.id == "a1"
        assert a.shape == Rectangle(10, 10, 50, 40)
        assert a.start_time == "0:05:00"
        assert a.end_time == "0:08:25"
        assert a.comment == "ball out"
        assert lifecycle.store.snapshot() == (a,)
        assert committed == [a]

    def test_commit_resets_draft(self, lifecycle):
        draw(lifecycle)
        lifecycle.set_comment("x")
        lifecycle.commit()

        d = lifecycle.draft
        assert d.mode is DraftMode.IDLE
        assert d.rectangle is None
        assert d.start_time is None
        assert d.end_time is None
        assert d.comment == ""

    def test_end_time_defaults_to_current_time(self, lifecycle, gateway):
        gateway.on_time_update(2.0)
        draw(lifecycle)
        gateway.on_time_update(6.5)
        lifecycle.set_comment("late")
        assert lifecycle.commit().annotation.end_time == "0:06:50"

    def test_empty_comment_refused(self, lifecycle, committed):
        draw(lifecycle)
        assert not lifecycle.can_commit()

        result = lifecycle.commit()

        assert result.rejection is Rejection.EMPTY_COMMENT
        assert lifecycle.mode is DraftMode.PENDING_COMMENT
        assert len(lifecycle.store) == 0
        assert committed == []

    def test_whitespace_comment_is_accepted(self, lifecycle):
        draw(lifecycle)
        lifecycle.set_comment(" ")
        assert lifecycle.commit().accepted

    def test_commit_while_drawing_refused(self, lifecycle):
        lifecycle.pointer_down(0, 0)
        assert lifecycle.commit().rejection is Rejection.NOT_PENDING
        assert lifecycle.mode is DraftMode.DRAWING

    def test_commit_when_idle_refused(self, lifecycle):
        assert lifecycle.commit().rejection is Rejection.NOT_PENDING

    def test_commit_twice_yields_one_annotation(self, lifecycle, committed):
        draw(lifecycle)
        lifecycle.set_comment("once")
        first = lifecycle.commit()
        second = lifecycle.commit()

        assert first.accepted
        assert not second.accepted
        assert len(lifecycle.store) == 1
        assert len(committed) == 1

    def test_ids_are_unique_by_default(self, gateway):
        lc = AnnotationLifecycle(gateway)
        for i in range(3):
            draw(lc)
            lc.set_comment(f"c{i}")
            lc.commit()
        ids = lc.store.ids()
        assert len(set(ids)) == 3

    def test_store_keeps_commit_order(self, lifecycle, gateway):
        for t, text in [(1.0, "one"), (2.0, "two"), (3.0, "three")]:
            gateway.on_time_update(t)
            draw(lifecycle)
            lifecycle.set_comment(text)
            lifecycle.commit()
        assert [a.comment for a in lifecycle.store] == ["one", "two", "three"]

    def test_sink_error_propagates_after_store_update(self, gateway):
        def broken(_annotation):
            raise OSError("disk full")

        lc = AnnotationLifecycle(gateway, sinks=[broken])
        draw(lc)
        lc.set_comment("kept")
        with pytest.raises(OSError):
            lc.commit()
        assert len(lc.store) == 1
        assert lc.mode is DraftMode.IDLE

    def test_existing_store_is_appended(self, gateway):
        store = AnnotationStore()
        lc = AnnotationLifecycle(gateway, store=store)
        draw(lc)
        lc.set_comment("x")
        lc.commit()
        assert len(store) == 1


class TestDiscard:
    @pytest.mark.parametrize("steps", ["drawing", "pending"])
    def test_discard_returns_to_idle(self, lifecycle, committed, steps):
        lifecycle.pointer_down(1, 1)
        if steps == "pending":
            lifecycle.pointer_up()
            lifecycle.set_comment("never mind")

        result = lifecycle.discard()

        assert result.accepted
        assert lifecycle.mode is DraftMode.IDLE
        assert lifecycle.draft.rectangle is None
        assert lifecycle.draft.comment == ""
        assert committed == []
        assert len(lifecycle.store) == 0

    def test_discard_when_idle_is_harmless(self, lifecycle):
        assert lifecycle.discard().mode is DraftMode.IDLE


class TestListeners:
    def test_listeners_see_accepted_transitions_only(self, lifecycle):
        seen = []
        lifecycle.subscribe(seen.append)

        lifecycle.pointer_up()  # rejected
        lifecycle.pointer_down(0, 0)
        lifecycle.pointer_up()

        assert [t.mode for t in seen] == [DraftMode.DRAWING, DraftMode.PENDING_COMMENT]

    def test_commit_notification_carries_annotation(self, lifecycle):
        seen = []
        lifecycle.subscribe(seen.append)
        draw(lifecycle)
        lifecycle.set_comment("x")
        lifecycle.commit()
        assert seen[-1].annotation is not None
        assert seen[-1].mode is DraftMode.IDLE

    def test_draft_property_is_a_copy(self, lifecycle):
        lifecycle.pointer_down(0, 0)
        copy = lifecycle.draft
        copy.comment = "tampered"
        assert lifecycle.draft.comment == ""
