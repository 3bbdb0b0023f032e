"""Tests for src.core.approval — parent routing and approval responses."""

import pytest

from src.core.approval import (
    PARENTS,
    ApprovalError,
    approval_hint,
    other_parent,
    resolve_routing,
    respond,
    toggle_requires_approval,
)
from src.core.event_form import EventDraft
from src.data.models import EventStatus, Participant


class TestOtherParent:
    def test_parent_a_maps_to_parent_b(self):
        assert other_parent(Participant.PARENT_A) is Participant.PARENT_B

    def test_parent_b_maps_to_parent_a(self):
        assert other_parent(Participant.PARENT_B) is Participant.PARENT_A

    def test_accepts_raw_ids(self):
        assert other_parent("parentA") is Participant.PARENT_B

    @pytest.mark.parametrize("parent", PARENTS)
    def test_symmetric(self, parent):
        assert other_parent(other_parent(parent)) is parent
        assert other_parent(parent) is not parent

    def test_child_is_never_an_approver(self):
        with pytest.raises(ApprovalError):
            other_parent(Participant.CHILD)

    def test_unknown_id_raises(self):
        with pytest.raises(ApprovalError):
            other_parent("grandma")


class TestToggle:
    def test_switching_on_sets_pending_and_approver(self):
        draft = EventDraft(title="Dentist")
        toggled = toggle_requires_approval(draft, Participant.PARENT_A)
        assert toggled.status is EventStatus.PENDING
        assert toggled.requested_by is Participant.PARENT_A
        assert toggled.needs_approval_from is Participant.PARENT_B

    def test_switching_off_clears_approver(self):
        draft = EventDraft(
            title="Dentist",
            status=EventStatus.PENDING,
            requested_by=Participant.PARENT_A,
            needs_approval_from=Participant.PARENT_B,
        )
        toggled = toggle_requires_approval(draft, Participant.PARENT_A)
        assert toggled.status is EventStatus.CONFIRMED
        assert toggled.needs_approval_from is None

    def test_toggle_does_not_mutate_original(self):
        draft = EventDraft(title="Dentist")
        toggle_requires_approval(draft, Participant.PARENT_B)
        assert draft.status is EventStatus.CONFIRMED

    def test_toggle_rederives_from_acting_parent(self):
        draft = EventDraft(title="Dentist", requested_by=Participant.PARENT_A)
        toggled = toggle_requires_approval(draft, Participant.PARENT_B)
        assert toggled.requested_by is Participant.PARENT_B
        assert toggled.needs_approval_from is Participant.PARENT_A


class TestResolveRouting:
    def test_confirmed_has_no_approver(self):
        requester, approver = resolve_routing(
            EventStatus.CONFIRMED, Participant.PARENT_B, Participant.PARENT_A,
        )
        assert requester is Participant.PARENT_B
        assert approver is None

    def test_declined_has_no_approver(self):
        _, approver = resolve_routing(EventStatus.DECLINED, "parentA", Participant.PARENT_A)
        assert approver is None

    def test_pending_routes_to_other_parent(self):
        requester, approver = resolve_routing(
            EventStatus.PENDING, Participant.PARENT_A, Participant.PARENT_A,
        )
        assert requester is Participant.PARENT_A
        assert approver is Participant.PARENT_B

    def test_missing_requester_defaults_to_acting_parent(self):
        requester, approver = resolve_routing(
            EventStatus.PENDING, None, Participant.PARENT_B,
        )
        assert requester is Participant.PARENT_B
        assert approver is Participant.PARENT_A

    def test_pending_with_child_requester_fails(self):
        with pytest.raises(ApprovalError):
            resolve_routing(EventStatus.PENDING, Participant.CHILD, Participant.PARENT_A)


class TestRespond:
    def test_awaited_parent_can_approve(self, make_event):
        event = make_event(status="pending", needs_approval_from="parentB")
        patch = respond(event, Participant.PARENT_B, approve=True)
        assert patch == {"status": "confirmed", "needs_approval_from": None}

    def test_awaited_parent_can_decline(self, make_event):
        event = make_event(status="pending", needs_approval_from="parentB")
        patch = respond(event, "parentB", approve=False)
        assert patch == {"status": "declined", "needs_approval_from": None}

    def test_requester_cannot_answer_own_request(self, make_event):
        event = make_event(status="pending", needs_approval_from="parentB")
        with pytest.raises(ApprovalError, match="awaits approval from parentB"):
            respond(event, Participant.PARENT_A, approve=True)

    def test_child_cannot_answer(self, make_event):
        event = make_event(status="pending", needs_approval_from="parentB")
        with pytest.raises(ApprovalError):
            respond(event, Participant.CHILD, approve=True)

    def test_non_pending_event_rejected(self, make_event):
        event = make_event(status="confirmed")
        with pytest.raises(ApprovalError, match="not awaiting approval"):
            respond(event, Participant.PARENT_B, approve=True)

    def test_legacy_event_without_status_is_not_pending(self, make_event):
        event = make_event(status=None)
        with pytest.raises(ApprovalError):
            respond(event, Participant.PARENT_B, approve=False)


class TestApprovalHint:
    def test_pending_names_approver(self, make_event):
        event = make_event(status="pending", needs_approval_from="parentB")
        assert approval_hint(event) == "Needs approval from parentB"

    def test_pending_without_approver(self, make_event):
        event = make_event(status="pending", needs_approval_from=None)
        assert approval_hint(event) == "Needs approval"

    def test_confirmed_has_no_hint(self, make_event):
        assert approval_hint(make_event()) is None
