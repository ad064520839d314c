'''General allocator machinery and input validation.'''

import abc
import logging
import numbers
from collections.abc import Mapping
from typing import Any, Dict
from numbers import Number


logger = logging.getLogger(__name__)


class VotingSystemError(Exception):
    '''A voting system with a valid setup ended up in an unresolvable state.'''
    pass


class Distributor(metaclass=abc.ABCMeta):
    '''Allocate seats to parties based on their votes.'''

    @abc.abstractmethod
    def evaluate(self,
                 votes: Dict[Any, Number],
                 n_seats: int,
                 ) -> Dict[Any, int]:
        '''Allocate n_seats to parties as a dictionary.

        :param votes: Numbers of votes for parties.
        :param n_seats: Number of seats to allocate.
        :returns: Numbers of seats allocated to all parties, including those
            that got none.
        '''
        raise NotImplementedError


def check_n_seats(n_seats: Any) -> int:
    '''Make sure the number of seats to allocate is a positive integer.

    :raises ValueError: For anything else; a non-positive seat total has no
        sensible default.
    '''
    if (
        isinstance(n_seats, bool)
        or not isinstance(n_seats, numbers.Integral)
        or n_seats <= 0
    ):
        raise ValueError(
            f'number of seats must be a positive integer, got {n_seats!r}'
        )
    return int(n_seats)


def clean_votes(votes: Any) -> Dict[Any, Number]:
    '''Return a copy of the votes with negative counts clamped to zero.

    :raises TypeError: If votes is not a mapping or contains vote counts
        that are not real numbers (decimals included; use fractions).
    '''
    if not isinstance(votes, Mapping):
        raise TypeError(f'votes must be a mapping of parties, got {votes!r}')
    cleaned = {}
    for party, n_votes in votes.items():
        if n_votes is None:
            n_votes = 0
        if isinstance(n_votes, bool) \
                or not isinstance(n_votes, numbers.Real):
            raise TypeError(f'invalid vote count for {party}: {n_votes!r}')
        if n_votes < 0:
            logger.debug('clamping negative votes for %s to zero', party)
            n_votes = 0
        cleaned[party] = n_votes
    return cleaned
