
import sys
import os
from decimal import Decimal

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import fairshare.presets
from fairshare.allocation import AllocationState, Transfer, SeatAward
from fairshare.evaluate.core import VotingSystemError
from fairshare.evaluate.fairshare import (
    FairShareTransferDistributor, allocate_fair_share
)


CASCADE_VOTES = {'A': 900, 'B': 40, 'C': 60}
CASCADE_PREFS = {'B': ['A']}

# A cannot afford a seat at the initial cost of 101 but buys one at 99
# in round 2, and is then finalized as the party with the fewest seats
LATE_VOTES = {'A': 100, 'B': 303, 'C': 303, 'D': 299}


def test_below_threshold_cascade():
    result = allocate_fair_share(CASCADE_VOTES, 10, CASCADE_PREFS, .05)
    assert result.seats == {'A': 10, 'B': 0, 'C': 0}
    first = result.rounds[0]
    assert first.number == 1
    assert first.type == 'initial'
    assert first.seat_cost == 100
    assert first.threshold_votes == pytest.approx(50)
    assert first.threshold_seats == 1
    assert first.transfers == (Transfer('B', 'A', 40, 'below_threshold'), )
    assert first.parties['B'].finalized
    assert first.parties['B'].seats == 0
    assert first.parties['A'].unspent == 40
    assert not first.parties['C'].finalized


def test_below_threshold_cascade_rounds():
    result = allocate_fair_share(CASCADE_VOTES, 10, CASCADE_PREFS, .05)
    assert [rnd.number for rnd in result.rounds] == [1, 2, 3]
    second = result.rounds[1]
    assert second.seat_cost == 100
    assert second.seats_allocated == 0
    assert second.finalized_party == 'C'
    assert second.transfers == (Transfer('C', None, 60, 'finalized'), )
    third = result.rounds[2]
    assert third.seat_cost == 40
    assert third.seat_awards == (SeatAward('A', 1, 40, 40), )
    assert third.seats_remaining == 0
    assert third.finalized_party is None


def test_below_threshold_no_target():
    result = allocate_fair_share(CASCADE_VOTES, 10, {}, .05)
    assert result.seats['B'] == 0
    assert Transfer('B', None, 40, 'below_threshold') in result.rounds[0].transfers
    assert result.seats_filled == 10


def test_below_threshold_loses_initial_seats():
    votes = {'A': 9600, 'B': 400}
    result = allocate_fair_share(votes, 100, {'B': ['A']}, .05)
    # B would have 4 seats at the initial cost of 100
    assert result.seats == {'A': 100, 'B': 0}
    assert result.rounds[0].transfers == (
        Transfer('B', 'A', 400, 'below_threshold'),
    )
    assert result.rounds[0].parties['B'].seats == 0


def test_single_dominant_party():
    result = allocate_fair_share({'A': 1000000}, 10, threshold=.05)
    assert result.seats == {'A': 10}
    assert len(result.rounds) == 1
    assert result.transfers == []
    assert result.summary.initial_cost_per_seat == 100000


def test_finalized_after_buying():
    result = allocate_fair_share(LATE_VOTES, 10, threshold=0)
    assert result.seats == {'A': 1, 'B': 3, 'C': 3, 'D': 3}
    assert result.summary.initial_cost_per_seat == 101
    second = result.rounds[1]
    assert second.seat_cost == 99
    assert second.seat_awards == (SeatAward('A', 1, 100, 99), )
    assert second.finalized_party == 'A'
    assert second.transfers == (Transfer('A', None, 1, 'finalized'), )
    assert second.parties['A'].seats == 1
    assert second.parties['A'].finalized
    assert result.rounds[2].seat_cost == 97
    assert result.rounds[2].seat_awards == (SeatAward('D', 1, 97, 97), )


def test_finalized_transfer_to_preference():
    result = allocate_fair_share(LATE_VOTES, 10, {'A': ['D']}, 0)
    assert result.rounds[1].transfers == (Transfer('A', 'D', 1, 'finalized'), )
    assert result.rounds[2].seat_cost == 98
    assert result.seats == {'A': 1, 'B': 3, 'C': 3, 'D': 3}


def test_finalize_tiebreak_by_id():
    votes = {'C': 130, 'A': 140, 'B': 130}
    result = allocate_fair_share(votes, 4, threshold=0)
    assert [rnd.finalized_party for rnd in result.rounds[1:]] == ['B', 'C', None]
    assert result.seats == {'A': 2, 'B': 1, 'C': 1}


def test_finalize_tiebreak_by_votes():
    votes = {'A': 500, 'B': 260, 'C': 240}
    result = allocate_fair_share(votes, 10, {'C': ['B']}, 0)
    assert result.rounds[1].finalized_party == 'C'
    assert result.rounds[1].transfers == (Transfer('C', 'B', 40, 'finalized'), )
    assert result.seats == {'A': 5, 'B': 3, 'C': 2}


def test_no_transfer_to_finalized():
    votes = {'A': 140, 'B': 130, 'C': 130}
    # B goes first, so C must skip it
    result = allocate_fair_share(votes, 4, {'C': ['B', 'A']}, 0)
    assert result.rounds[2].transfers == (Transfer('C', 'A', 30, 'finalized'), )


def test_below_threshold_parties_do_not_receive():
    votes = {'A': 900, 'B': 40, 'C': 30, 'D': 30}
    result = allocate_fair_share(votes, 10, {'B': ['C', 'A'], 'C': ['B']}, .05)
    assert set(result.rounds[0].transfers) == {
        Transfer('B', 'A', 40, 'below_threshold'),
        Transfer('C', None, 30, 'below_threshold'),
        Transfer('D', None, 30, 'below_threshold'),
    }


def test_zero_votes():
    result = allocate_fair_share({'A': 0, 'B': 0}, 10)
    assert result.seats == {'A': 0, 'B': 0}
    assert not result.converged
    assert len(result.rounds) == 1
    assert result.summary.initial_cost_per_seat == 0


def test_empty_votes():
    result = allocate_fair_share({}, 650)
    assert result.seats == {}
    assert result.seats_filled == 0


def test_too_few_votes():
    result = allocate_fair_share({'A': 2, 'B': 1}, 10)
    assert result.seats == {'A': 0, 'B': 0}


def test_negative_votes_clamped():
    result = allocate_fair_share({'A': -100, 'B': 1000}, 10)
    assert result.seats == {'A': 0, 'B': 10}
    assert result.summary.total_votes == 1000
    assert result.rounds[0].parties['A'].votes == 0


@pytest.mark.parametrize('n_seats', [0, -5, 2.5, None, True])
def test_invalid_seats(n_seats):
    with pytest.raises(ValueError):
        allocate_fair_share({'A': 100}, n_seats)


@pytest.mark.parametrize('threshold', [-.1, 1.5])
def test_invalid_threshold(threshold):
    with pytest.raises(ValueError):
        FairShareTransferDistributor(threshold=threshold)


def test_invalid_max_rounds():
    with pytest.raises(ValueError):
        FairShareTransferDistributor(max_rounds=0)


def test_invalid_votes():
    with pytest.raises(TypeError):
        allocate_fair_share([('A', 100)], 10)
    with pytest.raises(TypeError):
        allocate_fair_share({'A': Decimal(600), 'B': Decimal(400)}, 10)
    with pytest.raises(TypeError):
        allocate_fair_share({'A': 'many'}, 10)


def test_round_cap():
    fsv = FairShareTransferDistributor(threshold=0, max_rounds=2)
    result = fsv.allocate(LATE_VOTES, 10)
    assert len(result.rounds) == 2
    assert not result.converged
    assert result.seats_filled == 9
    assert 'Round limit' in ' '.join(result.steps)


def test_pathological_preferences_terminate():
    votes = {'A': 1000, 'B': 999, 'C': 998, 'D': 10}
    prefs = {party: ['D'] for party in votes}
    result = allocate_fair_share(votes, 37, prefs, .05)
    assert len(result.rounds) <= 100
    assert result.seats['D'] == 0
    assert all(transfer.target is None for transfer in result.transfers)
    assert result.seats_filled <= 37


def test_cyclic_preferences():
    votes = {'A': 140, 'B': 130, 'C': 130}
    prefs = {'A': ['B'], 'B': ['C'], 'C': ['A']}
    result = allocate_fair_share(votes, 4, prefs, 0)
    assert result.seats_filled == 4
    assert result.rounds[1].transfers == (Transfer('B', 'C', 30, 'finalized'), )


def test_evaluate_returns_seats():
    fsv = FairShareTransferDistributor(preferences=CASCADE_PREFS)
    assert fsv.evaluate(CASCADE_VOTES, 10) == {'A': 10, 'B': 0, 'C': 0}


def test_preferences_override():
    fsv = FairShareTransferDistributor(preferences={'B': ['C']})
    result = fsv.allocate(CASCADE_VOTES, 10, preferences=CASCADE_PREFS)
    assert result.rounds[0].transfers[0].target == 'A'


def test_repeated_calls_independent():
    fsv = FairShareTransferDistributor(preferences=CASCADE_PREFS)
    votes = dict(CASCADE_VOTES)
    first = fsv.allocate(votes, 10)
    second = fsv.allocate(votes, 10)
    assert first == second
    assert votes == CASCADE_VOTES


def test_input_order_irrelevant():
    votes = {'A': 140, 'B': 130, 'C': 130}
    reordered = {'C': 130, 'B': 130, 'A': 140}
    assert (
        allocate_fair_share(votes, 4, threshold=0).seats
        == allocate_fair_share(reordered, 4, threshold=0).seats
    )


def test_summary():
    result = allocate_fair_share(LATE_VOTES, 10, threshold=0)
    summary = result.summary
    assert summary.total_votes == 1005
    assert summary.total_seats == 10
    assert summary.threshold == 0
    assert summary.threshold_votes == 0
    assert [fp.final_seats for fp in summary.final_parties] == [3, 3, 3, 1]
    final_a = [fp for fp in summary.final_parties if fp.key == 'A'][0]
    assert final_a.original_votes == 100
    assert final_a.votes_per_seat == 100
    final_b = [fp for fp in summary.final_parties if fp.key == 'B'][0]
    assert final_b.votes_per_seat == 101


def test_steps():
    result = allocate_fair_share(CASCADE_VOTES, 10, CASCADE_PREFS, .05)
    assert result.steps[0] == 'Round 1: Initial allocation'
    assert 'Total votes: 1,000' in result.steps
    assert 'Seat cost: 100 votes per seat' in result.steps
    assert 'B below threshold transfers 40 votes to A' in result.steps
    assert result.steps[-2] == 'Final result: all 10 seats allocated'
    assert result.steps[-1] == 'Final seat distribution: A: 10 seats'


def rounds_valid(result, n_seats):
    previous = None
    for i, rnd in enumerate(result.rounds):
        assert rnd.number == i + 1
        assert rnd.seats_filled == sum(p.seats for p in rnd.parties.values())
        assert rnd.seats_filled + rnd.seats_remaining == n_seats
        if previous is not None:
            for key, party in rnd.parties.items():
                before = previous.parties[key]
                assert party.seats >= before.seats
                if before.finalized:
                    assert party.finalized
                    assert party.seats == before.seats
                    assert party.unspent == 0
            for transfer in rnd.transfers:
                assert transfer.target is None \
                    or not previous.parties[transfer.target].finalized
        for transfer in rnd.transfers:
            assert transfer.target != transfer.source
        previous = rnd


@pytest.mark.parametrize('votes, n_seats, threshold', [
    (CASCADE_VOTES, 10, .05),
    (LATE_VOTES, 10, 0),
    (fairshare.presets.UK_2024_VOTES, 650, .05),
    (fairshare.presets.UK_2024_VOTES, 100, .03),
    ({'A': 5, 'B': 4, 'C': 3, 'D': 2, 'E': 1}, 7, 0),
])
def test_invariants(votes, n_seats, threshold):
    result = allocate_fair_share(
        votes, n_seats, fairshare.presets.DEFAULT_TRANSFER_PREFERENCES,
        threshold
    )
    rounds_valid(result, n_seats)
    assert result.converged
    assert result.seats_filled == n_seats
    assert len(result.rounds) <= 100
    threshold_votes = result.summary.threshold_votes
    for party, n_votes in votes.items():
        if n_votes < threshold_votes:
            assert result.seats[party] == 0
    for transfer in result.rounds[0].transfers:
        assert transfer.reason == 'below_threshold'
        assert transfer.target is None or votes[transfer.target] >= threshold_votes
    for rnd in result.rounds[1:]:
        for transfer in rnd.transfers:
            assert transfer.reason == 'finalized'


def test_uk_2024_qualifiers():
    result = allocate_fair_share(
        fairshare.presets.UK_2024_VOTES,
        650,
        fairshare.presets.DEFAULT_TRANSFER_PREFERENCES,
        .05,
    )
    qualified = {'labour', 'conservative', 'liberal-democrats', 'reform-uk',
                 'green'}
    for party, n_seats in result.seats.items():
        if party not in qualified:
            assert n_seats == 0
    assert result.seats['labour'] == max(result.seats.values())
    assert result.seats['labour'] > result.seats['conservative']
    assert all(result.seats[party] > 0 for party in qualified)


def test_negative_cost_error():
    fsv = FairShareTransferDistributor()
    state = AllocationState({'A': 100}, 2)
    state['A'].unspent = -100
    with pytest.raises(VotingSystemError):
        fsv.next_round(state, {}, 2, [])
