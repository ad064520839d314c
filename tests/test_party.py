
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import fairshare.party
import fairshare.presets
from fairshare.party import ChartEntry, PartyMeta, TableLookup


def test_lookup_known():
    lookup = TableLookup({'lab': PartyMeta('Labour', '#E4003B')})
    assert lookup.lookup('lab') == PartyMeta('Labour', '#E4003B')
    assert lookup.name('lab') == 'Labour'


def test_lookup_fallback():
    lookup = TableLookup(default_color='#000000')
    assert lookup.lookup('xyz') == PartyMeta('xyz', '#000000')


def test_chart_data():
    seats = {'A': 2, 'B': 0, 'C': 5}
    lookup = TableLookup({'C': PartyMeta('Cee', '#111111')})
    assert fairshare.party.to_chart_data(seats, lookup) == [
        ChartEntry('C', 'Cee', '#111111', 5),
        ChartEntry('A', 'A', fairshare.party.DEFAULT_COLOR, 2),
    ]


def test_chart_data_empty():
    assert fairshare.party.to_chart_data({'A': 0}) == []


def test_preset_lookup():
    entries = fairshare.party.to_chart_data(
        fairshare.presets.UK_2024_FPTP_SEATS, fairshare.presets.PARTY_LOOKUP
    )
    assert entries[0].name == 'Labour'
    assert entries[0].seats == 411
    assert 'workers-party-of-britain' not in [entry.key for entry in entries]
