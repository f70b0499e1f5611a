from __future__ import annotations

import pytest

from exam_app.core.services.attempt_session import AttemptSession


def test_time_accumulates_across_revisits(mixed_exam, clock):
    session = AttemptSession(mixed_exam, "alice", clock=clock)

    session.visit_question(1)
    clock.advance(10)
    session.visit_question(2)
    clock.advance(5)
    session.visit_question(1)
    clock.advance(7)
    snapshot = session.submit()

    assert snapshot.question_times == {1: 17.0, 2: 5.0}
    assert snapshot.time_taken_seconds == 22.0
    assert not snapshot.auto_submitted


def test_single_choice_replaces_and_multiple_choice_toggles(mixed_exam, clock):
    session = AttemptSession(mixed_exam, "alice", clock=clock)

    session.select_option(1, 0)
    assert session.select_option(1, 2) == 2
    assert session.select_option(5, 1) == frozenset({1})
    assert session.select_option(5, 3) == frozenset({1, 3})
    assert session.select_option(5, 1) == frozenset({3})
    assert session.select_option(5, 3) is None

    assert session.submit().answers == {1: 2}


def test_invalid_selections_are_rejected(mixed_exam, clock):
    session = AttemptSession(mixed_exam, "alice", clock=clock)

    with pytest.raises(ValueError):
        session.select_option(3, 2)
    with pytest.raises(ValueError):
        session.select_option(42, 0)
    with pytest.raises(ValueError):
        session.visit_question(42)


def test_expiry_submits_automatically_and_caps_timing(mixed_exam, clock):
    session = AttemptSession(mixed_exam, "alice", clock=clock)
    session.visit_question(4)
    session.select_option(4, 1)
    clock.advance(500)

    assert session.check_expiry() is None
    assert session.remaining_seconds() == 100

    clock.advance(250)
    snapshot = session.check_expiry()

    assert snapshot is not None
    assert snapshot.auto_submitted
    assert snapshot.answers == {4: 1}
    assert snapshot.question_times == {4: 600.0}
    assert snapshot.time_taken_seconds == 600.0
    assert session.remaining_seconds() == 0
    assert session.check_expiry() is None


def test_no_changes_after_time_is_up(mixed_exam, clock):
    session = AttemptSession(mixed_exam, "alice", clock=clock)
    clock.advance(601)

    with pytest.raises(RuntimeError):
        session.select_option(1, 0)
    assert session.get_snapshot() is not None
    assert session.get_snapshot().auto_submitted


def test_submit_happens_only_once(mixed_exam, clock):
    session = AttemptSession(mixed_exam, "alice", clock=clock)
    session.submit()

    with pytest.raises(RuntimeError):
        session.submit()
    with pytest.raises(RuntimeError):
        session.visit_question(1)
