'''Various utility functions for other modules of Fairshare.

There should normally be no need to use these functions directly.
'''

import math
import operator
from typing import Any, Dict, List, Tuple
from numbers import Number


def add_dict_to_dict(dict1: Dict[Any, Number],
                     dict2: Dict[Any, Number],
                     ) -> None:
    for key, addition in dict2.items():
        dict1[key] = dict1.get(key, 0) + addition


def descending_dict(d: Dict[Any, Number]) -> Dict[Any, Number]:
    return dict(sorted(d.items(), key=operator.itemgetter(1), reverse=True))


def sorted_votes(votes: Dict[Any, Number],
                 descending: bool = True,
                 ) -> List[Tuple[Any, Number]]:
    '''Return votes items sorted by value.

    Items with equal values are ordered by their keys (ascending in both
    directions) so that the result does not depend on dictionary order.
    '''
    by_key = sorted(votes.items(), key=lambda item: str(item[0]))
    return sorted(by_key, key=operator.itemgetter(1), reverse=descending)


def round_half_up(value: Number) -> int:
    '''Round to the nearest integer, with halves rounded up.

    Python's :func:`round` rounds halves to even, which would make seat costs
    differ from the common half-up convention (e.g. 2.5 would give 2).
    '''
    return int(math.floor(value + 0.5))


def clamp01(value: float) -> float:
    return max(0., min(1., value))


def largest_remainder(exact: Dict[Any, Number],
                      total: int,
                      ) -> Dict[Any, int]:
    '''Round exact quantities to integers summing to total.

    Every key gets the integer part of its exact quantity; the units left
    over are then given to the keys with the largest fractional parts, one
    each, cycling through the keys again if there are more units left than
    keys. Equal fractional parts are ordered by the input order.

    :param exact: Real-valued quantities to round, e.g. a vote share
        multiplied by the number of voters.
    :param total: The total the integers must sum to.
    '''
    rounded = {key: int(math.floor(value)) for key, value in exact.items()}
    n_left = total - sum(rounded.values())
    if n_left > 0 and rounded:
        by_remainder = sorted(
            exact.keys(),
            key=lambda key: exact[key] - rounded[key],
            reverse=True
        )
        for i in range(n_left):
            rounded[by_remainder[i % len(by_remainder)]] += 1
    return rounded


def scale_seats(seats: Dict[Any, int], total: int) -> Dict[Any, int]:
    '''Rescale a seat tally proportionally to a different total of seats.

    Useful to compare a first-past-the-post tally simulated over a smaller
    number of districts to a full-size parliament. Rounds by largest
    remainder. An empty tally (no seats at all) is returned unchanged.
    '''
    current_total = sum(seats.values())
    if current_total == 0 or current_total == total:
        return dict(seats)
    return largest_remainder(
        {key: n_seats * total / current_total for key, n_seats in seats.items()},
        total
    )


def format_votes(n_votes: Number) -> str:
    '''Format a vote count rounded to whole votes with thousands separators.'''
    return f'{round_half_up(n_votes):,}'
