'''Highest averages proportional allocation.

This is the single-pass divisor method used as a baseline to compare the
Fair Share allocation against. It has no threshold and no vote transfers.
'''

import bisect
import logging
from fractions import Fraction
from typing import Callable, Dict, List, Tuple, Union
from numbers import Number

import fairshare.component.divisor
import fairshare.evaluate.core
from fairshare.evaluate.core import Distributor
from fairshare.persist import simple_serialization


logger = logging.getLogger(__name__)


@simple_serialization
class HighestAverages(Distributor):
    '''Distribute seats proportionally by ordering divided vote counts.

    Divides the vote count for each party by an increasing sequence of
    divisors, sorts these quotients and awards a seat for each of the first
    n_seats quotients. With the default D'Hondt divisor, the quotients are
    `votes / d` for d = 1..n_seats.

    Quotients are computed exactly (as fractions). When quotients are equal,
    the party whose identifier sorts first gets the seat first, so the result
    never depends on the order of the input mapping.

    :param divisor_function: A callable producing the divisor from the number
        of seats awarded to the party so far. The common divisor functions
        can be referenced by string name from the
        :mod:`fairshare.component.divisor` module.
    '''
    def __init__(self,
                 divisor_function: Union[
                     str, Callable[[int], Number]
                 ] = 'd_hondt',
                 ):
        self.divisor_function = fairshare.component.divisor.construct(
            divisor_function
        )

    def evaluate(self,
                 votes: Dict[str, Number],
                 n_seats: int = 650,
                 ) -> Dict[str, int]:
        '''Distribute seats proportionally by highest averages.

        :param votes: Numbers of votes for parties. Negative counts are
            treated as zero.
        :param n_seats: Number of seats to be filled.
        :returns: Seats for every party in votes. If no party has any votes,
            all parties get zero seats.
        '''
        n_seats = fairshare.evaluate.core.check_n_seats(n_seats)
        votes = fairshare.evaluate.core.clean_votes(votes)
        seats = {party: 0 for party in votes}
        # higher rank wins ties: the first identifier gets the highest rank
        ranks = {
            party: -i for i, party in enumerate(sorted(votes, key=str))
        }
        queue: List[Tuple[Fraction, int, str]] = []
        for party, n_votes in votes.items():
            if n_votes > 0:
                self._enqueue(queue, party, n_votes, 0, ranks[party])
        if not queue:
            logger.warning('no party has any votes, no seats allocated')
            return seats
        for i in range(n_seats):
            if not queue:
                break
            quotient, _, party = queue.pop()
            seats[party] += 1
            logger.debug('seat %d to %s at quotient %g', i + 1, party,
                         float(quotient))
            self._enqueue(queue, party, votes[party], seats[party], ranks[party])
        return seats

    def _enqueue(self,
                 queue: List[Tuple[Fraction, int, str]],
                 party: str,
                 n_votes: Number,
                 n_held: int,
                 rank: int,
                 ) -> None:
        divisor = self.divisor_function(n_held)
        if divisor > 0:
            quotient = Fraction(n_votes) / divisor
            bisect.insort(queue, (quotient, rank, party))


def highest_averages(votes: Dict[str, Number],
                     n_seats: int = 650,
                     divisor_function: Union[
                         str, Callable[[int], Number]
                     ] = 'd_hondt',
                     ) -> Dict[str, int]:
    '''Allocate seats by highest averages (D'Hondt by default).

    A functional shortcut for :class:`HighestAverages`.
    '''
    return HighestAverages(divisor_function).evaluate(votes, n_seats)
