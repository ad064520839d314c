'''The Fair Share Voting seat allocator.

Fair Share Voting allocates seats to party lists in rounds. Every party buys
as many seats as it can afford at the current seat cost (the unspent votes of
all contesting parties divided by the number of seats still unfilled);
then the weakest remaining party is finalized and its unspent votes are
transferred to the first party on its preference list that is still
contesting. Parties under a vote share threshold are disqualified in the
first round and transfer all their votes.

The allocation is a pure function of its inputs: each call creates its own
:class:`fairshare.allocation.AllocationState` and returns an
:class:`fairshare.allocation.AllocationResult` with the final seats and the
full audit trail.
'''

import logging
import math
from typing import Dict, List, Mapping, Optional, Tuple
from numbers import Number

import fairshare.util
import fairshare.component.transfer
import fairshare.evaluate.core
import fairshare.evaluate.threshold
from fairshare.allocation import (
    AllocationResult, AllocationState, AllocationSummary, Round, SeatAward,
    Transfer, ALLOCATION, BELOW_THRESHOLD, FINALIZED, INITIAL,
)
from fairshare.evaluate.core import Distributor
from fairshare.persist import simple_serialization

DEFAULT_N_SEATS = 650
DEFAULT_THRESHOLD = 0.05
DEFAULT_MAX_ROUNDS = 100

logger = logging.getLogger(__name__)

fmt = fairshare.util.format_votes


@simple_serialization
class FairShareTransferDistributor(Distributor):
    '''Allocate seats by Fair Share Voting with threshold and vote transfers.

    The allocation proceeds as follows:

    1.  The initial seat cost is the total number of votes divided by the
        number of seats, rounded to whole votes. Every party gets as many
        seats as the cost fits into its votes and keeps the rest as unspent
        votes.
    2.  Parties with less votes than the threshold lose the seats from step
        1 and are finalized; their original votes go to the first party in
        their preference list that qualified. This all happens in round 1.
    3.  In each following round, the seat cost is recomputed from the unspent
        votes of the contesting parties and the unfilled seats. Every
        contesting party (in party identifier order) buys as many seats as it
        can afford, up to the number of seats left. If seats are still left,
        the contesting party with the fewest seats (then fewest original
        votes, then first identifier) is finalized - even if it bought seats
        this round - and its unspent votes are transferred.

    The allocation ends when all seats are filled, when the seat cost cannot
    be computed (no votes left to spend), when no party is left contesting,
    or when the round limit is hit. In the last case a warning is logged and
    the partial result is returned; its ``converged`` property is False.

    Votes are lost rather than transferred when a finalized party has no
    contesting party on its preference list; such transfers are recorded with
    no target.

    :param threshold: The minimum fraction of all votes a party needs to
        qualify for seats, between 0 and 1. Zero disables the threshold.
    :param preferences: Default transfer preferences mapping parties to
        ordered lists of preferred recipients of their votes.
    :param max_rounds: The maximum number of rounds, including the first one.
    '''
    def __init__(self,
                 threshold: Number = DEFAULT_THRESHOLD,
                 preferences: Optional[Mapping[str, List[str]]] = None,
                 max_rounds: int = DEFAULT_MAX_ROUNDS,
                 ):
        if not 0 <= threshold <= 1:
            raise ValueError(f'threshold must be between 0 and 1, got {threshold}')
        if isinstance(max_rounds, bool) or not isinstance(max_rounds, int) \
                or max_rounds < 1:
            raise ValueError(f'invalid maximum number of rounds: {max_rounds!r}')
        self.threshold = threshold
        self.preferences = fairshare.component.transfer.validate_preferences(
            preferences
        )
        self.max_rounds = max_rounds
        self._threshold_selector = fairshare.evaluate.threshold.RelativeThreshold(
            threshold
        )

    def evaluate(self,
                 votes: Dict[str, Number],
                 n_seats: int = DEFAULT_N_SEATS,
                 ) -> Dict[str, int]:
        '''Allocate seats and return just the final seat counts.

        :param votes: Numbers of votes for parties.
        :param n_seats: Number of seats to fill.
        '''
        return self.allocate(votes, n_seats).seats

    def allocate(self,
                 votes: Dict[str, Number],
                 n_seats: int = DEFAULT_N_SEATS,
                 preferences: Optional[Mapping[str, List[str]]] = None,
                 ) -> AllocationResult:
        '''Allocate seats and return the result with its audit trail.

        :param votes: Numbers of votes for parties. Negative counts are
            treated as zero.
        :param n_seats: Number of seats to fill; must be a positive integer.
        :param preferences: Transfer preferences to use instead of the ones
            given to the constructor.
        :raises ValueError: If n_seats is not a positive integer.
        '''
        n_seats = fairshare.evaluate.core.check_n_seats(n_seats)
        votes = fairshare.evaluate.core.clean_votes(votes)
        if preferences is None:
            preferences = self.preferences
        else:
            preferences = fairshare.component.transfer.validate_preferences(
                preferences
            )
        state = AllocationState(votes, n_seats)
        steps = []
        first_round, initial_cost = self.initial_round(state, preferences, steps)
        rounds = [first_round]
        if initial_cost > 0:
            rounds.extend(self.next_rounds(state, preferences, steps))
        self._log_final(state, steps)
        summary = AllocationSummary(
            total_votes=state.total_votes,
            total_seats=n_seats,
            threshold=self.threshold,
            threshold_votes=first_round.threshold_votes,
            initial_cost_per_seat=initial_cost,
            final_parties=state.final_parties(),
        )
        return AllocationResult(
            seats=state.seats(),
            steps=tuple(steps),
            rounds=tuple(rounds),
            summary=summary,
        )

    def initial_round(self,
                      state: AllocationState,
                      preferences: Mapping[str, List[str]],
                      steps: List[str],
                      ) -> Tuple[Round, int]:
        '''Perform the initial allocation and the threshold disqualification.

        :param state: Fresh allocation state; modified in place.
        :param preferences: Transfer preferences.
        :param steps: Human readable audit log to append to.
        :returns: A 2-tuple of the round record and the initial seat cost.
            The cost is zero if there are too few votes to compute it, in
            which case no seats are allocated.
        '''
        total_votes = state.total_votes
        threshold_votes = self._threshold_selector.threshold_votes(total_votes)
        initial_cost = fairshare.util.round_half_up(total_votes / state.n_seats)
        steps.append('Round 1: Initial allocation')
        steps.append(f'Total votes: {fmt(total_votes)}')
        if initial_cost <= 0:
            logger.warning(
                'cannot compute seat cost from %s votes for %d seats,'
                ' no seats allocated', total_votes, state.n_seats
            )
            steps.append('No votes to allocate seats by')
            return Round(
                number=1,
                type=INITIAL,
                description='Initial allocation',
                parties=state.snapshot(),
                transfers=(),
                seat_cost=0,
                seats_allocated=0,
                seats_remaining=state.remaining_seats,
                seats_filled=0,
                total_votes=total_votes,
                threshold_votes=threshold_votes,
                threshold_seats=0,
            ), 0
        threshold_seats = math.ceil(threshold_votes / initial_cost)
        logger.info('initial seat cost %d, threshold %g votes',
                    initial_cost, threshold_votes)
        steps.append(f'Seat cost: {fmt(initial_cost)} votes per seat')
        steps.append(
            f'Threshold: {float(self.threshold):.0%} = minimum {threshold_seats}'
            ' seats to qualify'
        )
        for party in state.parties.values():
            party.seats = int(party.votes // initial_cost)
            party.unspent = party.votes - party.seats * initial_cost
        self._log_seats(state, steps)
        transfers = self._disqualify(state, preferences, steps, initial_cost)
        return Round(
            number=1,
            type=INITIAL,
            description='Initial allocation',
            parties=state.snapshot(),
            transfers=tuple(transfers),
            seat_cost=initial_cost,
            seats_allocated=state.seats_filled,
            seats_remaining=state.remaining_seats,
            seats_filled=state.seats_filled,
            total_votes=total_votes,
            threshold_votes=threshold_votes,
            threshold_seats=threshold_seats,
        ), initial_cost

    def _disqualify(self,
                    state: AllocationState,
                    preferences: Mapping[str, List[str]],
                    steps: List[str],
                    initial_cost: int,
                    ) -> List[Transfer]:
        '''Finalize all parties below the threshold at once.

        Unlike processing them one by one, no disqualified party receives
        votes from another, so the outcome does not depend on their order.
        '''
        qualified = set(self._threshold_selector.evaluate(
            {key: party.votes for key, party in state.parties.items()}
        ))
        below = [party for party in state.active() if party.key not in qualified]
        if not below:
            return []
        steps.append(
            'Parties below threshold: '
            + ', '.join(str(party.key) for party in below)
        )
        eligible = [key for key in state.active_keys() if key in qualified]
        transfers = []
        for party in below:
            if party.seats > 0:
                party.unspent += party.seats * initial_cost
                party.seats = 0
            target = fairshare.component.transfer.preferred_target(
                preferences, party.key, eligible
            )
            n_votes = party.votes
            transfer = state.finalize(party.key, target, n_votes,
                                      BELOW_THRESHOLD)
            if target is None:
                logger.info('%s below threshold, %g votes lost',
                            party.key, n_votes)
                steps.append(
                    f'{party.key} below threshold, {fmt(n_votes)} votes lost'
                    ' (no transfer target)'
                )
            else:
                logger.info('%s below threshold, transferring %g votes to %s',
                            party.key, n_votes, target)
                steps.append(
                    f'{party.key} below threshold transfers {fmt(n_votes)}'
                    f' votes to {target}'
                )
            if transfer is not None:
                transfers.append(transfer)
        return transfers

    def next_rounds(self,
                    state: AllocationState,
                    preferences: Mapping[str, List[str]],
                    steps: List[str],
                    ) -> List[Round]:
        '''Run the rounds following the initial one until termination.'''
        rounds = []
        round_number = 1
        while state.remaining_seats > 0:
            if round_number >= self.max_rounds:
                logger.warning(
                    'round limit %d reached with %d seats unallocated',
                    self.max_rounds, state.remaining_seats
                )
                steps.append(
                    f'Round limit of {self.max_rounds} reached,'
                    f' {state.remaining_seats} seats not allocated'
                )
                break
            round_number += 1
            next_round = self.next_round(
                state, preferences, round_number, steps
            )
            if next_round is None:
                break
            rounds.append(next_round)
        return rounds

    def next_round(self,
                   state: AllocationState,
                   preferences: Mapping[str, List[str]],
                   round_number: int,
                   steps: List[str],
                   ) -> Optional[Round]:
        '''Advance the allocation by one round.

        :param state: Current allocation state; modified in place.
        :param preferences: Transfer preferences.
        :param round_number: 1-based number of this round.
        :param steps: Human readable audit log to append to.
        :returns: The round record, or None if no progress can be made
            (no contesting parties or no unspent votes left).
        '''
        n_remaining = state.remaining_seats
        contesting = state.active()
        if not contesting:
            logger.warning('no parties left contesting %d seats', n_remaining)
            steps.append(f'No parties left to fill {n_remaining} seats')
            return None
        seat_cost = fairshare.util.round_half_up(
            state.total_unspent / n_remaining
        )
        if seat_cost < 0:
            raise fairshare.evaluate.core.VotingSystemError(
                f'negative seat cost {seat_cost} in round {round_number}'
            )
        elif seat_cost == 0:
            logger.warning('no unspent votes left to fill %d seats',
                           n_remaining)
            steps.append(f'No unspent votes left to fill {n_remaining} seats')
            return None
        logger.info('round %d: seat cost %d for %d remaining seats',
                    round_number, seat_cost, n_remaining)
        steps.append(
            f'Round {round_number}: Seat cost recalculated:'
            f' {fmt(seat_cost)} votes/seat'
        )
        awards = []
        n_awarded = 0
        for party in contesting:
            affordable = int(party.unspent // seat_cost)
            n_take = min(affordable, n_remaining - n_awarded)
            if n_take > 0:
                unspent_before = party.unspent
                party.seats += n_take
                party.unspent -= n_take * seat_cost
                n_awarded += n_take
                logger.debug('%s buys %d seats', party.key, n_take)
                steps.append(
                    f'{party.key} gains {n_take} seat(s)'
                    f' ({fmt(unspent_before)} ÷ {fmt(seat_cost)}'
                    f' = {affordable})'
                )
                awards.append(SeatAward(
                    party=party.key,
                    seats=n_take,
                    unspent_before=unspent_before,
                    cost=seat_cost,
                ))
        transfers = []
        finalized = None
        if state.remaining_seats > 0:
            transfer, finalized = self._finalize_weakest(
                state, preferences, steps
            )
            if transfer is not None:
                transfers.append(transfer)
            self._log_seats(state, steps)
        return Round(
            number=round_number,
            type=ALLOCATION,
            description=f'Round {round_number}',
            parties=state.snapshot(),
            transfers=tuple(transfers),
            seat_cost=seat_cost,
            seats_allocated=n_awarded,
            seats_remaining=state.remaining_seats,
            seats_filled=state.seats_filled,
            seat_awards=tuple(awards),
            finalized_party=finalized,
        )

    def _finalize_weakest(self,
                          state: AllocationState,
                          preferences: Mapping[str, List[str]],
                          steps: List[str],
                          ) -> Tuple[Optional[Transfer], str]:
        loser = min(
            state.active(),
            key=lambda party: (party.seats, party.votes, str(party.key))
        )
        eligible = [key for key in state.active_keys() if key != loser.key]
        target = fairshare.component.transfer.preferred_target(
            preferences, loser.key, eligible
        )
        n_votes = loser.unspent
        logger.info('finalizing %s with %d seats, transferring %g votes to %s',
                    loser.key, loser.seats, n_votes, target)
        steps.append(
            f'{loser.key} finalized (fewest seats: {loser.seats}), transfers'
            f' {fmt(n_votes)} votes to '
            + (str(target) if target is not None else 'no target')
        )
        transfer = state.finalize(loser.key, target, n_votes, FINALIZED)
        return transfer, loser.key

    @staticmethod
    def _log_seats(state: AllocationState, steps: List[str]) -> None:
        steps.append('Seats awarded: ' + ', '.join(
            f'{party.key}: {party.seats} seats, {fmt(party.unspent)} unspent'
            for party in state.active()
        ))
        steps.append(
            f'{state.seats_filled} of {state.n_seats} seats filled,'
            f' {state.remaining_seats} seats remaining'
        )

    @staticmethod
    def _log_final(state: AllocationState, steps: List[str]) -> None:
        if state.remaining_seats == 0:
            steps.append(f'Final result: all {state.n_seats} seats allocated')
        else:
            steps.append(
                f'Final result: {state.seats_filled} of {state.n_seats}'
                ' seats allocated'
            )
        distribution = fairshare.util.descending_dict({
            key: n_seats for key, n_seats in state.seats().items()
            if n_seats > 0
        })
        steps.append('Final seat distribution: ' + ', '.join(
            f'{key}: {n_seats} seats' for key, n_seats in distribution.items()
        ))
        logger.info('allocated %d of %d seats', state.seats_filled,
                    state.n_seats)


def allocate_fair_share(votes: Dict[str, Number],
                        n_seats: int = DEFAULT_N_SEATS,
                        preferences: Optional[Mapping[str, List[str]]] = None,
                        threshold: Number = DEFAULT_THRESHOLD,
                        ) -> AllocationResult:
    '''Allocate seats by Fair Share Voting, returning the full audit trail.

    A functional shortcut for :class:`FairShareTransferDistributor`.
    '''
    return FairShareTransferDistributor(threshold=threshold).allocate(
        votes, n_seats, preferences=preferences
    )
