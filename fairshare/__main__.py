"""A commandline tool to allocate seats by Fair Share Voting.

Loads votes from an election setup file, a built-in preset, or a simulated
multi-district election, allocates the seats and prints the result.
"""

import argparse
import io
import logging
import sys
import warnings
from typing import Dict, Optional

import fairshare.io.election
import fairshare.presets
import fairshare.util
from fairshare.allocation import AllocationResult
from fairshare.evaluate.fairshare import (
    FairShareTransferDistributor, DEFAULT_N_SEATS, DEFAULT_THRESHOLD,
)
from fairshare.evaluate.proportional import HighestAverages
from fairshare.generate import DistrictSimulator
from fairshare.io.core import ElectionSetup
from fairshare.party import PartyMetaLookup

METHODS = ('fair_share', 'highest_averages')

argparser = argparse.ArgumentParser(
    prog='python -m fairshare',
    description=__doc__,
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
argparser.add_argument(
    '-i', '--input-file',
    type=argparse.FileType('r', encoding='utf8'),
    help='JSON election setup file to load votes from',
)
argparser.add_argument(
    '-I', '--use-stdin',
    action='store_true',
    help='load the election setup from standard input',
)
argparser.add_argument(
    '-p', '--preset',
    choices=sorted(fairshare.presets.PRESETS.keys()),
    help='use a built-in election instead of an input file',
)
argparser.add_argument(
    '--simulate',
    type=int,
    metavar='N_DISTRICTS',
    help='simulate an election in this many districts instead',
)
argparser.add_argument(
    '--voters-per-district',
    type=int,
    default=2000,
    help='number of voters in each simulated district',
)
argparser.add_argument(
    '--seed',
    type=int,
    help='random seed for the simulation',
)
argparser.add_argument(
    '-n', '--n-seats',
    type=int,
    help=(
        'allocate this many seats (overrides the number given in the setup);'
        f' defaults to {DEFAULT_N_SEATS} if the setup gives none'
    ),
)
argparser.add_argument(
    '-t', '--threshold',
    type=float,
    help=(
        'qualification threshold as a fraction of all votes (overrides the'
        f' setup); defaults to {DEFAULT_THRESHOLD} if the setup gives none'
    ),
)
argparser.add_argument(
    '-m', '--method',
    choices=METHODS,
    default='fair_share',
    help='seat allocation method',
)
argparser.add_argument(
    '-s', '--steps',
    action='store_true',
    help='show the allocation steps',
)
argparser.add_argument(
    '-j', '--json',
    action='store_true',
    help=(
        'print the result as JSON: the full allocation with its audit trail'
        ' for fair_share, the seat distribution for highest_averages'
    ),
)
argparser.add_argument(
    '-v', '--verbose',
    action='store_true',
    help='show all allocator log messages',
)
argparser.add_argument(
    '-q', '--quiet',
    action='store_true',
    help='do not show any allocator log messages',
)


def main(input_file: Optional[io.TextIOBase] = None,
         use_stdin: bool = False,
         preset: Optional[str] = None,
         simulate: Optional[int] = None,
         voters_per_district: int = 2000,
         seed: Optional[int] = None,
         n_seats: Optional[int] = None,
         threshold: Optional[float] = None,
         method: str = 'fair_share',
         steps: bool = False,
         json: bool = False,
         verbose: bool = False,
         quiet: bool = False,
         ) -> None:
    logging.basicConfig(
        level=(
            logging.DEBUG if verbose
            else (logging.WARNING if quiet else logging.INFO)
        ),
        format='%(levelname)-10s %(message)s'
    )
    if use_stdin:
        input_file = sys.stdin
    setup = load_setup(
        input_file=input_file,
        preset=preset,
        simulate=simulate,
        voters_per_district=voters_per_district,
        seed=seed,
    )
    if not setup.votes:
        warnings.warn('empty votes: cannot allocate seats, terminating')
        return
    if n_seats is None:
        n_seats = setup.n_seats or DEFAULT_N_SEATS
    if threshold is not None:
        setup.threshold = threshold
    lookup = fairshare.presets.PARTY_LOOKUP
    if json:
        if method == 'highest_averages':
            seats = HighestAverages().evaluate(setup.votes, n_seats)
            print(fairshare.io.election.dumps_seats(seats))
        else:
            result = build_distributor(setup).allocate(setup.votes, n_seats)
            print(fairshare.io.election.dumps_result(result))
        return
    print()
    if setup.name:
        print(f'Allocating seats for {setup.name}')
    show_vote_stats(setup.votes, n_seats)
    print()
    if method == 'highest_averages':
        seats = HighestAverages().evaluate(setup.votes, n_seats)
        print('Election result (highest averages):')
        show_seats(seats, lookup)
    else:
        result = build_distributor(setup).allocate(setup.votes, n_seats)
        if steps:
            show_steps(result)
            print()
        print('Election result (Fair Share Voting):')
        show_seats(result.seats, lookup)
        if not result.converged:
            print(f'Only {result.seats_filled} of {n_seats} seats allocated')


def load_setup(input_file: Optional[io.TextIOBase] = None,
               preset: Optional[str] = None,
               simulate: Optional[int] = None,
               voters_per_district: int = 2000,
               seed: Optional[int] = None,
               ) -> ElectionSetup:
    """Get the election setup from the first source given."""
    if input_file is not None:
        return fairshare.io.election.load(input_file)
    elif preset is not None:
        try:
            base = fairshare.presets.PRESETS[preset]
        except KeyError as e:
            raise ValueError(
                f'unknown preset {str(e)}, available: '
                + ', '.join(fairshare.presets.PRESETS.keys())
            ) from e
        return ElectionSetup(
            votes=dict(base.votes),
            n_seats=base.n_seats,
            preferences=base.preferences,
            threshold=base.threshold,
            name=base.name,
        )
    elif simulate is not None:
        simulation = DistrictSimulator(
            voters_per_district=voters_per_district,
            random_state=seed,
        ).simulate(simulate)
        return ElectionSetup(
            votes=simulation.total_votes,
            n_seats=simulate,
            preferences=fairshare.presets.DEFAULT_TRANSFER_PREFERENCES,
            name=f'simulated election in {simulate} districts',
        )
    else:
        raise ValueError('no input given: need a file, a preset or --simulate')


def build_distributor(setup: ElectionSetup) -> FairShareTransferDistributor:
    """Create the allocator configured by the setup."""
    if setup.system is not None:
        if not isinstance(setup.system, FairShareTransferDistributor):
            raise ValueError(
                f'unsupported allocation system: {setup.system!r}'
            )
        distributor = setup.system
        if setup.threshold is None and setup.preferences is None:
            return distributor
        return FairShareTransferDistributor(
            threshold=(
                distributor.threshold if setup.threshold is None
                else setup.threshold
            ),
            preferences=(
                distributor.preferences if setup.preferences is None
                else setup.preferences
            ),
            max_rounds=distributor.max_rounds,
        )
    return FairShareTransferDistributor(
        threshold=(
            DEFAULT_THRESHOLD if setup.threshold is None else setup.threshold
        ),
        preferences=setup.preferences,
    )


def show_vote_stats(votes: Dict[str, float], n_seats: int) -> None:
    print(f'Received {fairshare.util.format_votes(sum(votes.values()))}'
          f' votes for {len(votes)} parties')
    print(f'Awarding {n_seats} seats')


def show_seats(seats: Dict[str, int], lookup: PartyMetaLookup) -> None:
    """Show the seat distribution, largest party first."""
    if not any(seats.values()):
        print('Nobody elected')
        return
    ordered = fairshare.util.descending_dict(seats)
    left_col = [lookup.lookup(key).name for key in ordered]
    n_just_chars = len(max(left_col, key=len))
    for name, n_seats in zip(left_col, ordered.values()):
        print(name.ljust(n_just_chars), ' ', n_seats)


def show_steps(result: AllocationResult) -> None:
    print('Allocation steps:')
    for step in result.steps:
        print(' ' * 4 + step)


if __name__ == '__main__':
    args = argparser.parse_args()
    if not (args.input_file or args.use_stdin or args.preset
            or args.simulate is not None):
        argparser.print_usage()
    else:
        main(**vars(args))
