'''Party display metadata for result renderers.

The allocators work with party identifiers only. Whoever displays the
results supplies a :class:`PartyMetaLookup` that turns an identifier into
a display name and color; :class:`TableLookup` is the usual implementation
backed by a dictionary, falling back to the identifier itself as the name
and a neutral gray as the color for unknown parties.
'''

import abc
import dataclasses
from typing import Dict, List, Mapping, Optional


DEFAULT_COLOR = '#888888'


@dataclasses.dataclass(frozen=True)
class PartyMeta:
    name: str
    color: str = DEFAULT_COLOR


@dataclasses.dataclass(frozen=True)
class ChartEntry:
    '''A party's slice of a seat distribution chart.'''
    key: str
    name: str
    color: str
    seats: int


class PartyMetaLookup(metaclass=abc.ABCMeta):
    '''Provides display metadata for party identifiers.'''

    @abc.abstractmethod
    def lookup(self, key: str) -> PartyMeta:
        '''Return the metadata for the party; must not fail for unknown ones.'''
        raise NotImplementedError


class TableLookup(PartyMetaLookup):
    '''Party metadata lookup backed by a dictionary.

    :param table: Metadata keyed by party identifier.
    :param default_color: Color for parties missing from the table.
    '''
    def __init__(self,
                 table: Optional[Mapping[str, PartyMeta]] = None,
                 default_color: str = DEFAULT_COLOR,
                 ):
        self.table = dict(table) if table else {}
        self.default_color = default_color

    def lookup(self, key: str) -> PartyMeta:
        try:
            return self.table[key]
        except KeyError:
            return PartyMeta(name=str(key), color=self.default_color)

    def name(self, key: str) -> str:
        return self.lookup(key).name


def to_chart_data(seats: Dict[str, int],
                  lookup: Optional[PartyMetaLookup] = None,
                  ) -> List[ChartEntry]:
    '''Prepare a seat distribution for a parliament chart.

    :param seats: Seats by party, as returned by the allocators.
    :param lookup: Source of display names and colors; without it, the
        identifiers are used as names with the default color.
    :returns: Entries for parties holding seats, most seats first.
    '''
    if lookup is None:
        lookup = TableLookup()
    held = sorted(
        ((key, n_seats) for key, n_seats in seats.items() if n_seats > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    entries = []
    for key, n_seats in held:
        meta = lookup.lookup(key)
        entries.append(ChartEntry(
            key=key, name=meta.name, color=meta.color, seats=n_seats
        ))
    return entries
