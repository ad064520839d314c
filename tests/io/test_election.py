
import sys
import os
import io
import json

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import fairshare.io.election
from fairshare.io.core import ElectionSetup, ParseError
from fairshare.evaluate.fairshare import (
    FairShareTransferDistributor, allocate_fair_share
)


EXAMPLE = '''{
    "name": "Example",
    "n_seats": 10,
    "threshold": 0.05,
    "votes": {"A": 900, "B": 40, "C": 60},
    "preferences": {"B": ["A"]}
}'''


def test_parse():
    setup = fairshare.io.election.loads(EXAMPLE)
    assert setup == ElectionSetup(
        votes={'A': 900, 'B': 40, 'C': 60},
        n_seats=10,
        preferences={'B': ['A']},
        threshold=.05,
        name='Example',
    )


def test_load_file():
    setup = fairshare.io.election.load(io.StringIO(EXAMPLE))
    assert setup.n_seats == 10


def test_parse_minimal():
    setup = fairshare.io.election.loads('{"votes": {"A": 1}}')
    assert setup.votes == {'A': 1}
    assert setup.n_seats is None
    assert setup.system is None


def test_parse_system():
    fsv = FairShareTransferDistributor(threshold=.1, max_rounds=50)
    text = json.dumps({'votes': {'A': 1}, 'system': fsv.to_dict()})
    setup = fairshare.io.election.loads(text)
    assert isinstance(setup.system, FairShareTransferDistributor)
    assert setup.system.threshold == .1
    assert setup.system.max_rounds == 50


@pytest.mark.parametrize('text', [
    '{"votes": {"A": 1}',
    '[1, 2]',
    '{"votes": {"A": 1}, "seats": 10}',
    '{"n_seats": 10}',
    '{"votes": {"A": "1"}}',
    '{"votes": {"A": true}}',
    '{"votes": {"A": 1}, "n_seats": 0}',
    '{"votes": {"A": 1}, "n_seats": 2.5}',
    '{"votes": {"A": 1}, "threshold": 1.5}',
    '{"votes": {"A": 1}, "preferences": {"A": "B"}}',
    '{"votes": {"A": 1}, "preferences": ["A"]}',
    '{"votes": {"A": 1}, "system": {"class": "nonexistent.module.Class"}}',
    '{"votes": {"A": 1}, "system": {"threshold": 0.05}}',
])
def test_parse_errors(text):
    with pytest.raises(ParseError):
        fairshare.io.election.loads(text)


def test_generate_roundtrip():
    setup = fairshare.io.election.loads(EXAMPLE)
    assert fairshare.io.election.loads(
        fairshare.io.election.dumps(setup)
    ) == setup


def test_generate_omits_unset():
    text = fairshare.io.election.dumps(ElectionSetup(votes={'A': 1}))
    assert json.loads(text) == {'votes': {'A': 1}}


def test_dump_newline():
    out = io.StringIO()
    fairshare.io.election.dump(out, ElectionSetup(votes={'A': 1}))
    assert out.getvalue().endswith('\n')


def test_dumps_result():
    result = allocate_fair_share({'A': 900, 'B': 40, 'C': 60}, 10,
                                 {'B': ['A']}, .05)
    data = json.loads(fairshare.io.election.dumps_result(result))
    assert data['seats'] == {'A': 10, 'B': 0, 'C': 0}
    assert [rnd['number'] for rnd in data['rounds']] == [1, 2, 3]
    assert data['rounds'][1]['transfers'] == [{
        'source': 'C', 'target': None, 'votes': 60, 'reason': 'finalized'
    }]
    assert data['summary']['total_seats'] == 10


def test_dumps_seats():
    text = fairshare.io.election.dumps_seats({'A': 2, 'B': 1}, indent=None)
    assert text == '{"A": 2, "B": 1}'
