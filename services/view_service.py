"""
View service.

Builds the broadcast-ready snapshot of a room. Votes stay masked until the
room is revealed; only the "has voted" flag leaks before that.
"""
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, List, Optional

from models import Room
from schemas import ParticipantView, RoomState


def parse_vote(vote: Optional[str]) -> Optional[Decimal]:
    """Return the numeric value of a card, or None for symbolic cards ("?", coffee)."""
    if vote is None:
        return None
    # the whole trimmed string must be a decimal that also fits in a float;
    # a numeric prefix is not enough: "3abc" is not read as 3
    try:
        number = Decimal(vote.strip())
    except (InvalidOperation, AttributeError):
        return None
    if not number.is_finite() or not math.isfinite(float(number)):
        return None
    return number


def compute_average(votes: Iterable[Optional[str]]) -> Optional[float]:
    """
    Average of the numeric votes, rounded to one decimal place.

    Non-numeric votes are excluded rather than counted as zero. Rounding is
    half away from zero at the tenths digit, e.g. 4/3 -> 1.3 and 1.25 -> 1.3.
    """
    numbers = [n for n in (parse_vote(v) for v in votes) if n is not None]
    if not numbers:
        return None
    mean = sum(numbers) / len(numbers)
    try:
        return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # too many digits to carry a tenths place; rounding is moot at this size
        return float(mean)


def get_room_state(room: Room) -> RoomState:
    participants: List[ParticipantView] = []
    for connection_id, participant in room.participants.items():
        participants.append(ParticipantView(
            id=connection_id,
            name=participant.name,
            vote=participant.vote if room.revealed else None,
            hasVoted=participant.vote is not None,
        ))

    average = None
    if room.revealed:
        average = compute_average(p.vote for p in room.participants.values())

    return RoomState(
        scrumMaster=room.facilitator_id,
        revealed=room.revealed,
        participants=participants,
        average=average,
    )
