"""Simulate multi-district elections.

The district simulator produces synthetic vote totals to feed the
allocators, together with the first-past-the-post result the same votes
would give, for comparison. Each district's vote shares are the national
baseline shares perturbed by normally distributed noise, clamped to the
interval [0, 1] and renormalized; integer votes are then derived from the
shares by largest remainder so that each district has exactly the given
number of voters.

The simulation is random; pass a ``random_state`` to make it repeatable.
"""

import random
import logging
import dataclasses
from numbers import Number
from typing import Dict, Iterable, Optional, Tuple

import fairshare.util
from fairshare.persist import simple_serialization


logger = logging.getLogger(__name__)


class DistributionSampler:
    """Sample points from a multidimensional probability distribution.

    The distributions are taken from Python's *random* module by referencing
    the names of the generating functions. Keyword arguments are passed to
    the generating function; tuples give a different parameter value for
    each dimension.

    :param distribution: The name of the distribution to use. Must refer to a
        name of a function in Python stdlib random module that produces random
        floats.
    :param n_dims: Dimensionality of the space to sample from. Can be omitted
        if inferable from tuple parameters.
    """
    DEFAULT_PARAMS: Dict[str, Dict[str, Number]] = {
        'gauss': {'mu': 0, 'sigma': 1},
        'uniform': {'a': 0, 'b': 1},
    }

    def __init__(self,
                 distribution: str = 'gauss',
                 n_dims: Optional[int] = None,
                 **kwargs):
        self.distro_fx = getattr(random, distribution)
        if not kwargs and distribution in self.DEFAULT_PARAMS:
            kwargs = self.DEFAULT_PARAMS[distribution].copy()
        for argname, argval in kwargs.items():
            if isinstance(argval, tuple):
                if n_dims is None:
                    n_dims = len(argval)
                elif len(argval) != n_dims:
                    raise ValueError(
                        f'sampling {argname} parameter has'
                        f' {len(argval)} dimensions, expected {n_dims}'
                    )
        if n_dims is None:
            raise ValueError('cannot infer number of sampling dimensions')
        self.n_dims = n_dims
        self.gener_args = tuple(
            {
                argname: argval[i] if isinstance(argval, tuple) else argval
                for argname, argval in kwargs.items()
            }
            for i in range(self.n_dims)
        )

    def sample(self, n: int) -> Iterable[Tuple[float, ...]]:
        """Sample n points from the distribution."""
        for i in range(n):
            yield tuple(self.distro_fx(**kwargs) for kwargs in self.gener_args)


@dataclasses.dataclass(frozen=True)
class DistrictElection:
    """Outcome of a simulated multi-district election.

    :param total_votes: National vote totals by party.
    :param fptp_seats: Districts won by each party under first past the post.
    :param n_districts: Number of districts simulated.
    """
    total_votes: Dict[str, int]
    fptp_seats: Dict[str, int]
    n_districts: int


@simple_serialization
class DistrictSimulator:
    """Simulate an election in many equally sized districts.

    :param national_shares: Baseline vote shares of the parties. Their order
        matters: it breaks ties for district winners and for rounding.
        The default is the baseline shipped in :mod:`fairshare.presets`.
    :param variance: Standard deviation of the noise added to each share in
        each district.
    :param voters_per_district: Number of votes cast in each district.
    :param random_state: Seed for the random generator.
    """
    def __init__(self,
                 national_shares: Optional[Dict[str, Number]] = None,
                 variance: float = .06,
                 voters_per_district: int = 2000,
                 random_state: Optional[int] = None,
                 ):
        if national_shares is None:
            import fairshare.presets
            national_shares = fairshare.presets.SIMULATION_SHARES
        if not national_shares:
            raise ValueError('no parties to simulate')
        if voters_per_district < 0:
            raise ValueError(
                f'negative number of voters: {voters_per_district}'
            )
        self.national_shares = dict(national_shares)
        self.variance = variance
        self.voters_per_district = voters_per_district
        self.random_state = random_state
        self._sampler = DistributionSampler(
            'gauss',
            mu=tuple(self.national_shares.values()),
            sigma=tuple([variance] * len(self.national_shares)),
        )

    def simulate(self, n_districts: int) -> DistrictElection:
        """Simulate the election in n_districts districts."""
        if n_districts < 0:
            raise ValueError(f'negative number of districts: {n_districts}')
        if self.random_state is not None:
            random.seed(self.random_state)
        parties = list(self.national_shares.keys())
        total_votes = {party: 0 for party in parties}
        fptp_seats = {party: 0 for party in parties}
        for noisy in self._sampler.sample(n_districts):
            shares = self.normalize(dict(zip(parties, noisy)))
            votes = self.sample_votes(shares, self.voters_per_district)
            fairshare.util.add_dict_to_dict(total_votes, votes)
            fptp_seats[self.district_winner(votes)] += 1
        logger.info('simulated %d districts with %d voters each',
                    n_districts, self.voters_per_district)
        return DistrictElection(
            total_votes=total_votes,
            fptp_seats=fptp_seats,
            n_districts=n_districts,
        )

    def district_shares(self) -> Dict[str, float]:
        """Draw the vote shares of a single district."""
        noisy = next(iter(self._sampler.sample(1)))
        return self.normalize(dict(zip(self.national_shares.keys(), noisy)))

    @staticmethod
    def normalize(raw_shares: Dict[str, float]) -> Dict[str, float]:
        """Clamp shares to [0, 1] and rescale them to sum to one.

        If all shares are clamped to zero, every party gets an equal share.
        """
        clamped = {
            party: fairshare.util.clamp01(share)
            for party, share in raw_shares.items()
        }
        total = sum(clamped.values())
        if total <= 0:
            return {party: 1 / len(clamped) for party in clamped}
        return {party: share / total for party, share in clamped.items()}

    @staticmethod
    def sample_votes(shares: Dict[str, float], n_voters: int) -> Dict[str, int]:
        """Turn vote shares into vote counts summing exactly to n_voters."""
        return fairshare.util.largest_remainder(
            {party: share * n_voters for party, share in shares.items()},
            n_voters
        )

    @staticmethod
    def district_winner(votes: Dict[str, int]) -> str:
        """The party with most votes; the first one listed wins a tie."""
        return max(votes.keys(), key=votes.get)


def simulate_elections(n_districts: int = 650,
                       voters_per_district: int = 2000,
                       national_shares: Optional[Dict[str, Number]] = None,
                       random_state: Optional[int] = None,
                       ) -> DistrictElection:
    """Simulate a multi-district election with default noise."""
    return DistrictSimulator(
        national_shares=national_shares,
        voters_per_district=voters_per_district,
        random_state=random_state,
    ).simulate(n_districts)
