'''Election data for demonstrations.

Contains the results of the 2024 United Kingdom general election (vote
totals, official first-past-the-post seats), display metadata for the
parties, default transfer preferences for parties that are finalized,
and the national vote shares used as a baseline by the district simulator.

Source of the election results: Electoral Reform Society, 2024.
'''

from typing import Dict, List

from fairshare.io.core import ElectionSetup
from fairshare.party import PartyMeta, TableLookup


N_SEATS = 650
THRESHOLD = 0.05


PARTY_META: Dict[str, PartyMeta] = {
    'labour': PartyMeta('Labour', '#E4003B'),
    'conservative': PartyMeta('Conservative', '#0087DC'),
    'liberal-democrats': PartyMeta('Liberal Democrats', '#FAA61A'),
    'green': PartyMeta('Green', '#6AB023'),
    'reform-uk': PartyMeta('Reform UK', '#12B6CF'),
    'scottish-national-party': PartyMeta('SNP', '#FADF00'),
    'sinn-fein': PartyMeta('Sinn Féin', '#2E8B57'),
    'democratic-unionist-party': PartyMeta('DUP', '#B22222'),
    'plaid-cymru': PartyMeta('Plaid Cymru', '#006400'),
    'social-democratic-and-labour-party': PartyMeta('SDLP', '#2E8B57'),
    'alliance': PartyMeta('Alliance', '#FFC107'),
    'ulster-unionist-party': PartyMeta('UUP', '#1E90FF'),
    'traditional-unionist-voice': PartyMeta('TUV', '#1E90FF'),
    'workers-party-of-britain': PartyMeta('Workers', '#A52A2A'),
    'others': PartyMeta('Others', '#9E9E9E'),
}

UK_2024_VOTES: Dict[str, int] = {
    'labour': 9708816,
    'conservative': 6828726,
    'liberal-democrats': 3519214,
    'scottish-national-party': 724758,
    'sinn-fein': 210891,
    'reform-uk': 4117610,
    'democratic-unionist-party': 172058,
    'green': 1943804,
    'plaid-cymru': 194811,
    'social-democratic-and-labour-party': 86861,
    'alliance': 117191,
    'ulster-unionist-party': 94779,
    'traditional-unionist-voice': 48685,
    'workers-party-of-britain': 210252,
    'others': 805102,
}

# the Speaker's seat is not included, so the tally sums to 649
UK_2024_FPTP_SEATS: Dict[str, int] = {
    'labour': 411,
    'conservative': 121,
    'liberal-democrats': 72,
    'scottish-national-party': 9,
    'sinn-fein': 7,
    'reform-uk': 5,
    'democratic-unionist-party': 5,
    'green': 4,
    'plaid-cymru': 4,
    'social-democratic-and-labour-party': 2,
    'alliance': 1,
    'ulster-unionist-party': 1,
    'traditional-unionist-voice': 1,
    'workers-party-of-britain': 0,
    'others': 6,
}

DEFAULT_TRANSFER_PREFERENCES: Dict[str, List[str]] = {
    'scottish-national-party': ['labour'],
    'plaid-cymru': ['labour'],
    'green': ['labour'],
    'liberal-democrats': ['labour'],
    'social-democratic-and-labour-party': ['labour'],
    'sinn-fein': ['social-democratic-and-labour-party', 'labour'],
    'reform-uk': ['conservative', 'labour'],
    'conservative': ['reform-uk', 'liberal-democrats'],
    'democratic-unionist-party': ['conservative'],
    'ulster-unionist-party': ['conservative'],
    'traditional-unionist-voice': ['conservative'],
    'alliance': ['liberal-democrats', 'labour'],
    'workers-party-of-britain': ['labour'],
    'others': ['liberal-democrats', 'labour'],
}

# ordered; the simulator breaks district ties by this order
SIMULATION_SHARES: Dict[str, float] = {
    'reform-uk': .15,
    'conservative': .25,
    'liberal-democrats': .12,
    'labour': .40,
    'green': .08,
}


UK_2024 = ElectionSetup(
    votes=UK_2024_VOTES,
    n_seats=N_SEATS,
    preferences=DEFAULT_TRANSFER_PREFERENCES,
    threshold=THRESHOLD,
    name='UK general election 2024',
)

PARTY_LOOKUP = TableLookup(PARTY_META)

PRESETS: Dict[str, ElectionSetup] = {
    'uk2024': UK_2024,
}
