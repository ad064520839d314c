"""Allocation state and audit trail of the Fair Share allocator.

The allocator keeps all its working state in a single
:class:`AllocationState` object created for one allocation call; nothing is
shared between calls. Every round of the allocation appends one immutable
:class:`Round` record describing the party states at the end of the round,
the seats awarded and the votes transferred in it.

Seat and vote accounting:

-   ``votes`` of a party never change after the state is created; they are
    the original votes used for the threshold, for tie breaking and for the
    summary.
-   ``unspent`` votes go up with incoming transfers and down as seats are
    bought, and are zeroed (transferred away or lost) when the party is
    finalized.
-   A finalized party never gains seats again.

Since the seat costs are rounded to whole votes, the votes spent on seats
plus the unspent and transferred votes only approximately equal the
original total. This is a known, bounded approximation.
"""

from __future__ import annotations

import dataclasses
from numbers import Number
from typing import Any, Dict, Iterable, List, Optional, Tuple

import fairshare.util


BELOW_THRESHOLD = 'below_threshold'
FINALIZED = 'finalized'

INITIAL = 'initial'
ALLOCATION = 'allocation'


@dataclasses.dataclass
class PartyState:
    """Allocation-time state of a single party."""
    key: str
    votes: Number
    seats: int = 0
    unspent: Number = 0
    finalized: bool = False

    @property
    def current_votes(self) -> Number:
        '''Votes still in play for the party (zero once finalized).'''
        return 0 if self.finalized else self.unspent

    def snapshot(self) -> PartySnapshot:
        return PartySnapshot(
            key=self.key,
            votes=self.votes,
            seats=self.seats,
            unspent=self.unspent,
            finalized=self.finalized,
            current_votes=self.current_votes,
        )


@dataclasses.dataclass(frozen=True)
class PartySnapshot:
    key: str
    votes: Number
    seats: int
    unspent: Number
    finalized: bool
    current_votes: Number


@dataclasses.dataclass(frozen=True)
class Transfer:
    """Votes moved away from a party that was finalized.

    :param source: The party the votes come from.
    :param target: The receiving party, or None if the preference list of
        the source was exhausted and the votes were lost.
    :param votes: Number of votes moved.
    :param reason: ``below_threshold`` for parties disqualified by the
        threshold in the first round, ``finalized`` for parties eliminated
        in later rounds.
    """
    source: str
    target: Optional[str]
    votes: Number
    reason: str

    @property
    def is_lost(self) -> bool:
        return self.target is None


@dataclasses.dataclass(frozen=True)
class SeatAward:
    """Seats bought by a party in one round.

    :param party: The party awarded the seats.
    :param seats: Number of seats awarded.
    :param unspent_before: Unspent votes of the party before the purchase.
    :param cost: Seat cost the seats were bought at.
    """
    party: str
    seats: int
    unspent_before: Number
    cost: int


@dataclasses.dataclass(frozen=True)
class Round:
    """An immutable record of one round of the allocation.

    The party snapshots show the state at the end of the round.
    Only the first (``initial``) round has the total votes and threshold
    fields filled in.
    """
    number: int
    type: str
    description: str
    parties: Dict[str, PartySnapshot]
    transfers: Tuple[Transfer, ...]
    seat_cost: int
    seats_allocated: int
    seats_remaining: int
    seats_filled: int
    seat_awards: Tuple[SeatAward, ...] = ()
    finalized_party: Optional[str] = None
    total_votes: Optional[Number] = None
    threshold_votes: Optional[Number] = None
    threshold_seats: Optional[int] = None


@dataclasses.dataclass(frozen=True)
class FinalParty:
    key: str
    original_votes: Number
    final_seats: int
    votes_per_seat: int


@dataclasses.dataclass(frozen=True)
class AllocationSummary:
    total_votes: Number
    total_seats: int
    threshold: Number
    threshold_votes: Number
    initial_cost_per_seat: int
    final_parties: Tuple[FinalParty, ...]


@dataclasses.dataclass(frozen=True)
class AllocationResult:
    """The outcome of a Fair Share allocation.

    :param seats: Final seat counts for all parties, including those with no
        seats.
    :param steps: Human readable description of the allocation, for display.
    :param rounds: The structured audit trail, one record per round.
    :param summary: Totals and per-party breakdown sorted by seats.
    """
    seats: Dict[str, int]
    steps: Tuple[str, ...]
    rounds: Tuple[Round, ...]
    summary: AllocationSummary

    @property
    def seats_filled(self) -> int:
        return sum(self.seats.values())

    @property
    def converged(self) -> bool:
        '''Whether all seats were allocated.

        False either if there were no votes at all or if the allocation was
        stopped by the round limit.
        '''
        return self.seats_filled == self.summary.total_seats

    @property
    def transfers(self) -> List[Transfer]:
        return [transfer for rnd in self.rounds for transfer in rnd.transfers]

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


class AllocationState:
    """Working state of a single allocation, owned by the allocator.

    :param votes: Votes for parties, already validated and non-negative.
    :param n_seats: Total number of seats to fill.
    """
    def __init__(self, votes: Dict[str, Number], n_seats: int):
        self.n_seats = n_seats
        self.parties = {
            key: PartyState(key=key, votes=n_votes)
            for key, n_votes in votes.items()
        }
        self.total_votes = sum(votes.values())

    def __getitem__(self, key: str) -> PartyState:
        return self.parties[key]

    def __contains__(self, key: str) -> bool:
        return key in self.parties

    @property
    def seats_filled(self) -> int:
        return sum(party.seats for party in self.parties.values())

    @property
    def remaining_seats(self) -> int:
        return self.n_seats - self.seats_filled

    @property
    def total_unspent(self) -> Number:
        return sum(party.unspent for party in self.active())

    def active(self) -> List[PartyState]:
        '''Parties still contesting seats, in party identifier order.'''
        return sorted(
            (party for party in self.parties.values() if not party.finalized),
            key=lambda party: str(party.key)
        )

    def active_keys(self) -> List[str]:
        return [party.key for party in self.active()]

    def seats(self) -> Dict[str, int]:
        return {key: party.seats for key, party in self.parties.items()}

    def snapshot(self) -> Dict[str, PartySnapshot]:
        return {key: party.snapshot() for key, party in self.parties.items()}

    def finalize(self,
                 key: str,
                 target: Optional[str],
                 n_votes: Number,
                 reason: str,
                 ) -> Optional[Transfer]:
        '''Finalize a party, moving n_votes of its votes to target.

        The unspent votes of the party are zeroed. If target is None, the
        votes are lost.

        :returns: The transfer record, or None if there were no votes to move.
        '''
        party = self.parties[key]
        if party.finalized:
            raise ValueError(f'party {key} is already finalized')
        if target is not None and self.parties[target].finalized:
            raise ValueError(f'cannot transfer votes to finalized {target}')
        party.unspent = 0
        party.finalized = True
        if n_votes <= 0:
            return None
        if target is not None:
            self.parties[target].unspent += n_votes
        return Transfer(source=key, target=target, votes=n_votes, reason=reason)

    def final_parties(self) -> Tuple[FinalParty, ...]:
        '''Per-party breakdown, most seats first.'''
        finals = [
            FinalParty(
                key=party.key,
                original_votes=party.votes,
                final_seats=party.seats,
                votes_per_seat=(
                    round_votes_per_seat(party.votes, party.seats)
                ),
            )
            for party in self.parties.values()
        ]
        return tuple(sorted(finals, key=lambda fp: fp.final_seats, reverse=True))


def round_votes_per_seat(n_votes: Number, n_seats: int) -> int:
    if n_seats <= 0:
        return 0
    return fairshare.util.round_half_up(n_votes / n_seats)


def transfers_from(rounds: Iterable[Round], source: str) -> List[Transfer]:
    '''All transfers of votes away from the given party.'''
    return [
        transfer for rnd in rounds for transfer in rnd.transfers
        if transfer.source == source
    ]
