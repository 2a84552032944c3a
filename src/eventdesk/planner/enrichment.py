"""Meeting enrichment -- attach notes presence and attendee details to meetings.

enrich_meetings_with_details() turns a list of Meeting records into
EnrichedMeeting views by resolving two kinds of references concurrently:
the meeting's (single, optional) note and every attendee's user record.

All meetings are processed concurrently; within a meeting the note lookup
and every attendee lookup run concurrently as well. Results are reassembled
in input order, so completion order of the underlying lookups never shows
in the output.

Failure is all-or-nothing: if any lookup raises, the whole call raises and
no partial list is returned. Lookups are not retried and carry no timeout.
A user id with no matching record is not an error; its slot is None.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Protocol

import structlog

from src.eventdesk.core.monitoring import (
    enrichment_lookups_total,
    meetings_enriched_total,
)
from src.eventdesk.planner.schemas import (
    AttendeeProjection,
    EnrichedMeeting,
    Meeting,
    MeetingNote,
    User,
)

logger = structlog.get_logger(__name__)


class MeetingLookupProtocol(Protocol):
    """Minimal interface the enrichment step needs from the data layer."""

    async def get_note_by_meeting_id(self, meeting_id: str) -> MeetingNote | None: ...

    async def get_user(self, user_id: str) -> User | None: ...


async def _resolve_attendee(
    repository: MeetingLookupProtocol, user_id: str
) -> AttendeeProjection | None:
    enrichment_lookups_total.labels(kind="user").inc()
    user = await repository.get_user(user_id)
    if user is None:
        return None
    return AttendeeProjection.from_user(user)


async def _has_notes(repository: MeetingLookupProtocol, meeting_id: str) -> bool:
    enrichment_lookups_total.labels(kind="note").inc()
    note = await repository.get_note_by_meeting_id(meeting_id)
    return note is not None


async def _gather_all_or_nothing(aws: list) -> list:
    """Run awaitables concurrently; on the first failure cancel the rest and re-raise."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except Exception:
        for task in tasks:
            task.cancel()
        # Let cancelled lookups unwind before the error leaves this call
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def enrich_meeting(
    meeting: Meeting, repository: MeetingLookupProtocol
) -> EnrichedMeeting:
    """Enrich one meeting: note lookup and attendee lookups run concurrently."""
    has_notes, *attendees = await _gather_all_or_nothing(
        [
            _has_notes(repository, meeting.id),
            *(_resolve_attendee(repository, uid) for uid in meeting.attendee_ids),
        ]
    )
    return EnrichedMeeting(
        **meeting.model_dump(),
        has_notes=has_notes,
        attendees=attendees,
    )


async def enrich_meetings_with_details(
    meetings: Sequence[Meeting], repository: MeetingLookupProtocol
) -> list[EnrichedMeeting]:
    """Enrich every meeting concurrently, preserving input order.

    Args:
        meetings: Meetings to enrich, in the order the caller wants back.
        repository: Data layer providing note and user lookups.

    Returns:
        One EnrichedMeeting per input meeting, in the same order.

    Raises:
        Exception: The first lookup failure. Lookups still in flight for the
            batch are cancelled before it propagates.
    """
    if not meetings:
        return []

    try:
        enriched = await _gather_all_or_nothing(
            [enrich_meeting(meeting, repository) for meeting in meetings]
        )
    except Exception:
        logger.warning(
            "meetings.enrichment_failed", meeting_count=len(meetings), exc_info=True
        )
        raise

    meetings_enriched_total.inc(len(enriched))
    logger.debug("meetings.enriched", meeting_count=len(enriched))
    return enriched
