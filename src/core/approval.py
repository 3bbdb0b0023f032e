"""
Family Calendar Lite — Approval Workflow.

An event is either confirmed straight away or posted as `pending` by one
parent, awaiting the other parent. The child is never a requester or an
approver.

    confirmed <--toggle--> pending --respond--> confirmed | declined
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from src.data.models import Event, EventStatus, Participant, get_status

if TYPE_CHECKING:
    from src.core.event_form import EventDraft

logger = logging.getLogger(__name__)

PARENTS = (Participant.PARENT_A, Participant.PARENT_B)


class ApprovalError(Exception):
    """Raised when an approval request cannot be routed or answered."""


def _as_participant(value: Participant | str | None) -> Participant | None:
    if value is None:
        return None
    try:
        return Participant(value)
    except ValueError as exc:
        raise ApprovalError(f"Unknown participant: {value!r}") from exc


def other_parent(parent: Participant | str) -> Participant:
    """The parent who approves requests made by `parent`."""
    parent = _as_participant(parent)
    if parent is Participant.PARENT_A:
        return Participant.PARENT_B
    if parent is Participant.PARENT_B:
        return Participant.PARENT_A
    raise ApprovalError(f"{parent!r} cannot take part in approvals")


def toggle_requires_approval(draft: EventDraft, acting_parent: Participant) -> EventDraft:
    """Flip a draft between confirmed and pending on behalf of acting_parent."""
    wants_approval = draft.status != EventStatus.PENDING
    return replace(
        draft,
        status=EventStatus.PENDING if wants_approval else EventStatus.CONFIRMED,
        requested_by=acting_parent,
        needs_approval_from=other_parent(acting_parent) if wants_approval else None,
    )


def resolve_routing(
    status: EventStatus,
    requested_by: Participant | str | None,
    acting_parent: Participant,
) -> tuple[Participant, Participant | None]:
    """Return (requested_by, needs_approval_from) for an event about to be saved.

    The approver is always derived from the requester, never guessed:
    a pending event whose requester is not a parent fails the save.
    """
    requester = _as_participant(requested_by) or acting_parent
    if status != EventStatus.PENDING:
        return requester, None
    if requester not in PARENTS:
        raise ApprovalError(
            f"Pending event has no resolvable approver (requested by {requester.value})"
        )
    return requester, other_parent(requester)


def respond(event: Event, responder: Participant | str, approve: bool) -> dict:
    """Answer a pending request. Only the awaited parent may respond.

    Returns the backend patch moving the event out of `pending`.
    """
    if get_status(event) is not EventStatus.PENDING:
        raise ApprovalError(f"Event '{event.title}' is not awaiting approval")

    responder = _as_participant(responder)
    approver = _as_participant(event.needs_approval_from)
    if approver is None or responder is not approver:
        raise ApprovalError(
            f"Event '{event.title}' awaits approval from "
            f"{approver.value if approver else 'nobody'}, not {responder.value}"
        )

    new_status = EventStatus.CONFIRMED if approve else EventStatus.DECLINED
    logger.info("'%s' %s by %s", event.title, new_status.value, responder.value)
    return {"status": new_status.value, "needs_approval_from": None}


def approval_hint(event: Event) -> str | None:
    """Short caption for pending events, None otherwise."""
    if get_status(event) is not EventStatus.PENDING:
        return None
    if event.needs_approval_from:
        return f"Needs approval from {Participant(event.needs_approval_from).value}"
    return "Needs approval"
