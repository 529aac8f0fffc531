# topmark:header:start
#
#   project      : ImplIndex
#   file         : test_handoff.py
#   file_relpath : tests/registry/test_handoff.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `RegistryHandoff`: buffering, replay, forwarding and duplicate policies."""

from __future__ import annotations

import pytest

from implindex.config import DuplicatePolicy
from implindex.errors import DoubleAttachment, DuplicateModule, InvalidModuleName
from implindex.model import ImplementorRecord
from implindex.registry import RegistryHandoff, RegistryPhase
from tests.conftest import Recorder, make_config, make_record, parametrize

FOO: ImplementorRecord = make_record("Foo", crate="crate_b")
BAR: ImplementorRecord = make_record("Bar", crate="crate_b")


def test_new_registry_is_buffering_and_empty() -> None:
    """A fresh registry buffers and holds nothing."""
    registry = RegistryHandoff("trait.Debug")

    assert registry.phase is RegistryPhase.BUFFERING
    assert not registry.is_attached
    assert registry.pending_names() == ()
    assert registry.stats().submitted == 0


def test_replay_delivers_buffered_modules_in_insertion_order() -> None:
    """Buffered modules are replayed synchronously, first-submitted first."""
    registry = RegistryHandoff()
    registry.submit("crateA", [])
    registry.submit("crateB", [FOO])
    intake = Recorder()

    replayed: int = registry.attach_consumer(intake)

    assert replayed == 2
    assert intake.calls == [("crateA", ()), ("crateB", (FOO,))]
    assert registry.phase is RegistryPhase.FORWARDING
    assert registry.pending() == {}


def test_replay_order_is_insertion_not_alphabetical() -> None:
    """Replay follows submission order even when names sort differently."""
    registry = RegistryHandoff()
    for name in ("zeta", "alpha", "mu"):
        registry.submit(name, [])
    intake = Recorder()

    registry.attach_consumer(intake)

    assert intake.names == ["zeta", "alpha", "mu"]


def test_attach_first_forwards_without_replay() -> None:
    """With nothing buffered, attachment replays nothing and later submits are live."""
    registry = RegistryHandoff()
    intake = Recorder()

    assert registry.attach_consumer(intake) == 0
    assert intake.calls == []

    registry.submit("crateC", [FOO])

    assert intake.calls == [("crateC", (FOO,))]
    assert registry.pending_names() == ()
    stats = registry.stats()
    assert (stats.replayed, stats.forwarded) == (0, 1)


def test_forwarded_submissions_are_never_buffered() -> None:
    """After attachment, each submit is delivered once and nothing accumulates."""
    registry = RegistryHandoff()
    registry.submit("a", [])
    intake = Recorder()
    registry.attach_consumer(intake)

    registry.submit("b", [FOO])
    registry.submit("b", [FOO])

    assert intake.names == ["a", "b", "b"]
    assert registry.pending() == {}
    assert registry.stats().delivered == 3


def test_identical_resubmission_is_idempotent() -> None:
    """Submitting identical records twice before attachment yields one delivery."""
    registry = RegistryHandoff()
    registry.submit("x", [FOO])
    registry.submit("x", [FOO])
    intake = Recorder()

    registry.attach_consumer(intake)

    assert intake.calls == [("x", (FOO,))]


@parametrize("policy", list(DuplicatePolicy))
def test_identical_resubmission_is_idempotent_under_every_policy(
    policy: DuplicatePolicy,
) -> None:
    """No policy turns an identical resubmission into an error or a second entry."""
    registry = RegistryHandoff(config=make_config(duplicate_policy=policy))
    registry.submit("x", [FOO, BAR])
    registry.submit("x", [FOO, BAR])

    assert registry.pending()["x"].records == (FOO, BAR)
    assert registry.stats().rejected == 0


def test_overwrite_policy_last_write_wins_and_keeps_position() -> None:
    """Under ``overwrite`` the later records replace the earlier ones in place."""
    registry = RegistryHandoff(config=make_config(duplicate_policy=DuplicatePolicy.OVERWRITE))
    registry.submit("first", [FOO])
    registry.submit("second", [])
    registry.submit("first", [BAR])
    intake = Recorder()

    registry.attach_consumer(intake)

    assert intake.calls == [("first", (BAR,)), ("second", ())]


def test_default_policy_is_overwrite() -> None:
    """Without configuration, duplicates overwrite."""
    registry = RegistryHandoff()
    registry.submit("m", [FOO])
    registry.submit("m", [BAR])

    assert registry.config.duplicate_policy is DuplicatePolicy.OVERWRITE
    assert registry.pending()["m"].records == (BAR,)


def test_reject_policy_raises_and_leaves_buffer_unchanged() -> None:
    """Under ``reject`` a conflicting resubmission fails and changes nothing."""
    registry = RegistryHandoff(config=make_config(duplicate_policy=DuplicatePolicy.REJECT))
    registry.submit("m", [FOO])

    with pytest.raises(DuplicateModule) as excinfo:
        registry.submit("m", [BAR])

    assert excinfo.value.module_name == "m"
    assert registry.pending()["m"].records == (FOO,)
    stats = registry.stats()
    assert (stats.submitted, stats.rejected) == (1, 1)


def test_merge_append_policy_appends_new_records_only() -> None:
    """Under ``merge-append`` records not already buffered are appended in order."""
    registry = RegistryHandoff(
        config=make_config(duplicate_policy=DuplicatePolicy.MERGE_APPEND)
    )
    registry.submit("m", [FOO])
    registry.submit("m", [FOO, BAR])

    assert registry.pending()["m"].records == (FOO, BAR)


def test_duplicate_policy_does_not_apply_while_forwarding() -> None:
    """In the forwarding phase even ``reject`` forwards every submission."""
    registry = RegistryHandoff(config=make_config(duplicate_policy=DuplicatePolicy.REJECT))
    intake = Recorder()
    registry.attach_consumer(intake)

    registry.submit("m", [FOO])
    registry.submit("m", [BAR])

    assert intake.calls == [("m", (FOO,)), ("m", (BAR,))]


def test_double_attachment_is_rejected_and_first_consumer_kept() -> None:
    """A second attach fails, gets no replay and does not steal live deliveries."""
    registry = RegistryHandoff("trait.Debug")
    registry.submit("a", [])
    first = Recorder()
    second = Recorder()
    registry.attach_consumer(first)

    with pytest.raises(DoubleAttachment) as excinfo:
        registry.attach_consumer(second)
    registry.submit("b", [FOO])

    assert excinfo.value.registry_name == "trait.Debug"
    assert first.names == ["a", "b"]
    assert second.calls == []


def test_double_attachment_with_same_intake_is_still_rejected() -> None:
    """Re-attaching the same callable is also a logic error."""
    registry = RegistryHandoff()
    intake = Recorder()
    registry.attach_consumer(intake)

    with pytest.raises(DoubleAttachment):
        registry.attach_consumer(intake)


@parametrize("bad_name", ["", "   ", None, 42])
def test_invalid_module_name_is_rejected_without_state_change(bad_name: object) -> None:
    """Empty or non-string names raise and leave the registry untouched."""
    registry = RegistryHandoff()
    registry.submit("ok", [])

    with pytest.raises(InvalidModuleName):
        registry.submit(bad_name, [FOO])  # type: ignore[arg-type]

    assert registry.pending_names() == ("ok",)
    assert registry.stats().submitted == 1


def test_invalid_module_name_is_rejected_while_forwarding() -> None:
    """Validation also happens before a live forward."""
    registry = RegistryHandoff()
    intake = Recorder()
    registry.attach_consumer(intake)

    with pytest.raises(InvalidModuleName):
        registry.submit("", [])

    assert intake.calls == []


def test_records_are_frozen_at_submit_time() -> None:
    """Mutating the caller's list after submit does not affect the buffer."""
    registry = RegistryHandoff()
    records: list[ImplementorRecord] = [FOO]
    registry.submit("m", records)
    records.append(BAR)
    intake = Recorder()

    registry.attach_consumer(intake)

    assert intake.calls == [("m", (FOO,))]


def test_records_accept_any_iterable() -> None:
    """Generators are materialized once."""
    registry = RegistryHandoff()
    registry.submit("m", (r for r in [FOO, BAR]))

    assert registry.pending()["m"].records == (FOO, BAR)


def test_never_attached_registry_retains_everything() -> None:
    """Without a consumer, buffered data stays available and is reported as undelivered."""
    registry = RegistryHandoff()
    registry.submit("a", [FOO])
    registry.submit("b", [])

    assert registry.undelivered() == ("a", "b")
    assert registry.phase is RegistryPhase.BUFFERING


def test_pending_is_a_read_only_snapshot() -> None:
    """The pending view cannot be used to mutate the buffer."""
    registry = RegistryHandoff()
    registry.submit("a", [])
    view = registry.pending()

    with pytest.raises(TypeError):
        view["b"] = view["a"]  # type: ignore[index]
    registry.submit("c", [])

    assert list(view) == ["a"]


def test_intake_error_during_replay_propagates_and_registry_stays_attached() -> None:
    """A failing intake aborts the replay; the remaining modules are not re-buffered."""
    registry = RegistryHandoff()
    for name in ("a", "boom", "c"):
        registry.submit(name, [])
    seen: list[str] = []

    def intake(module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        if module_name == "boom":
            raise RuntimeError("consumer failed")
        seen.append(module_name)

    with pytest.raises(RuntimeError, match="consumer failed"):
        registry.attach_consumer(intake)

    assert seen == ["a"]
    assert registry.is_attached
    assert registry.pending_names() == ()
    assert registry.stats().replayed == 1

    registry.submit("d", [])
    assert seen == ["a", "d"]


def test_intake_error_during_forwarding_propagates_to_submitter() -> None:
    """Live forwarding errors reach the producer; nothing is buffered instead."""
    registry = RegistryHandoff()

    def intake(module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        raise ValueError(module_name)

    registry.attach_consumer(intake)

    with pytest.raises(ValueError, match="late"):
        registry.submit("late", [])
    assert registry.pending_names() == ()
    assert registry.stats().forwarded == 0


def test_failed_forward_is_not_counted_as_submitted() -> None:
    """Counters still add up after the intake raises while forwarding."""
    registry = RegistryHandoff()
    registry.submit("early", [FOO])
    failing = {"boom"}
    intake = Recorder()

    def flaky(module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        if module_name in failing:
            raise RuntimeError(module_name)
        intake(module_name, records)

    registry.attach_consumer(flaky)
    registry.submit("late", [])
    with pytest.raises(RuntimeError, match="boom"):
        registry.submit("boom", [])

    stats = registry.stats()
    assert stats.submitted == 2
    assert stats.replayed == 1
    assert stats.forwarded == 1
    assert stats.submitted == stats.delivered
    assert intake.names == ["early", "late"]


def test_intake_may_submit_reentrantly() -> None:
    """An intake that submits again is forwarded immediately, without deadlock."""
    registry = RegistryHandoff()
    registry.submit("outer", [])
    seen: list[str] = []

    def intake(module_name: str, records: tuple[ImplementorRecord, ...]) -> None:
        seen.append(module_name)
        if module_name == "outer":
            registry.submit("nested", [])

    registry.attach_consumer(intake)

    assert seen == ["outer", "nested"]


def test_repr_mentions_name_and_phase() -> None:
    """The repr is useful in logs."""
    registry = RegistryHandoff("trait.Debug")

    assert repr(registry) == "RegistryHandoff(name='trait.Debug', phase=buffering)"
