from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.core.consistency import DEFAULT_TOLERANCE
from go_dutch.core.meeting import Meeting, SettlementReport
from go_dutch.services.meetings import load_meeting


@dataclass(frozen=True)
class MeetingSettlement:
    meeting: Meeting
    report: SettlementReport


async def compute_meeting_settlement(
    session: AsyncSession,
    *,
    user_id: int,
    meeting_id: int,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Optional[MeetingSettlement]:
    # Always recomputed from the stored expenses; nothing is cached.
    meeting = await load_meeting(session, user_id=user_id, meeting_id=meeting_id)
    if meeting is None:
        return None
    return MeetingSettlement(meeting=meeting, report=meeting.compute_settlement(tolerance=tolerance))
