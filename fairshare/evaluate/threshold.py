'''Electoral threshold evaluators.

These are seatless selectors: they return a list of parties that qualify for
seat allocation without being given a number of seats. The Fair Share
allocator uses :class:`RelativeThreshold` to decide which parties are
disqualified in its first round.
'''

from typing import Dict, List
from numbers import Number

import fairshare.util
from fairshare.persist import simple_serialization


@simple_serialization
class RelativeThreshold:
    '''Relative threshold seatless selector.

    Selects all parties with more (or equally many) votes than the specified
    fraction of total votes. A threshold of zero or less selects everyone.

    :param threshold: The relative threshold as a fraction of total votes,
        between 0 and 1.
    :param accept_equal: Whether to select parties that only just reach the
        threshold.
    '''
    def __init__(self,
                 threshold: Number,
                 accept_equal: bool = True,
                 ):
        if threshold > 1:
            raise ValueError(f'relative threshold over 1: {threshold}')
        self.threshold = threshold
        self.accept_equal = accept_equal

    def threshold_votes(self, total_votes: Number) -> Number:
        '''The number of votes corresponding to the threshold.'''
        return total_votes * self.threshold if self.threshold > 0 else 0

    def evaluate(self, votes: Dict[str, Number]) -> List[str]:
        '''Select parties by a given threshold of fraction of total votes.

        :param votes: Numbers of votes for parties.
        :returns: Qualifying parties, most votes first.
        '''
        return _select_over(
            votes,
            self.threshold_votes(sum(votes.values())),
            self.accept_equal
        )


def _select_over(votes: Dict[str, Number],
                 threshold_votes: Number,
                 accept_equal: bool,
                 ) -> List[str]:
    return [
        party for party, n_votes in fairshare.util.sorted_votes(votes)
        if (
            n_votes > threshold_votes
            or accept_equal and n_votes == threshold_votes
        )
    ]
