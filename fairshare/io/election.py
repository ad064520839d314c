"""JSON election setup files and allocation result output.

An election setup file is a JSON object with the following keys:

-   ``votes`` (required): an object mapping party identifiers to vote counts.
-   ``n_seats``: the number of seats to allocate.
-   ``preferences``: an object mapping party identifiers to ordered lists of
    party identifiers their votes should be transferred to.
-   ``threshold``: the qualification threshold as a fraction of all votes.
-   ``name``: a name of the election.
-   ``system``: an allocator serialized by :func:`fairshare.persist.to_dict`.

Example::

    {
        "name": "Example",
        "n_seats": 10,
        "threshold": 0.05,
        "votes": {"A": 900, "B": 40, "C": 60},
        "preferences": {"B": ["A"]}
    }

Allocation results are written as JSON by :func:`dumps_result`, for
consumers such as flow diagram renderers; :func:`dumps_seats` writes just
a seat distribution.
"""

from __future__ import annotations

import json
from numbers import Number
from typing import Any, Dict, Optional

import fairshare.persist
from fairshare.allocation import AllocationResult
from fairshare.io.core import ElectionSetup, ParseError, loaders, dumpers


KNOWN_KEYS = frozenset([
    'votes', 'n_seats', 'preferences', 'threshold', 'name', 'system'
])


def parse(text: str) -> ElectionSetup:
    """Parse an election setup from JSON text.

    :raises ParseError: If the text is not valid JSON or does not describe
        an election setup.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        raise ParseError(f'invalid JSON: {err}') from err
    if not isinstance(data, dict):
        raise ParseError('election setup must be a JSON object')
    unknown = set(data.keys()) - KNOWN_KEYS
    if unknown:
        raise ParseError('unknown election setup keys: '
                         + ', '.join(sorted(unknown)))
    return ElectionSetup(
        votes=_parse_votes(data.get('votes')),
        n_seats=_parse_n_seats(data.get('n_seats')),
        preferences=_parse_preferences(data.get('preferences')),
        threshold=_parse_threshold(data.get('threshold')),
        name=data.get('name'),
        system=_parse_system(data.get('system')),
    )


def _parse_votes(votes: Any) -> Dict[str, Number]:
    if not isinstance(votes, dict):
        raise ParseError('votes must be an object mapping parties to counts')
    for party, n_votes in votes.items():
        if isinstance(n_votes, bool) or not isinstance(n_votes, (int, float)):
            raise ParseError(f'invalid vote count for {party}: {n_votes!r}')
    return votes


def _parse_n_seats(n_seats: Any) -> Optional[int]:
    if n_seats is None:
        return None
    if isinstance(n_seats, bool) or not isinstance(n_seats, int) \
            or n_seats <= 0:
        raise ParseError(f'invalid number of seats: {n_seats!r}')
    return n_seats


def _parse_preferences(preferences: Any) -> Optional[Dict[str, list]]:
    if preferences is None:
        return None
    if not isinstance(preferences, dict):
        raise ParseError('preferences must be an object of party lists')
    for party, targets in preferences.items():
        if not isinstance(targets, list) \
                or not all(isinstance(t, str) for t in targets):
            raise ParseError(f'invalid preferences for {party}: {targets!r}')
    return preferences


def _parse_threshold(threshold: Any) -> Optional[Number]:
    if threshold is None:
        return None
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) \
            or not 0 <= threshold <= 1:
        raise ParseError(f'invalid threshold: {threshold!r}')
    return threshold


def _parse_system(system: Any) -> Any:
    if system is None:
        return None
    try:
        return fairshare.persist.from_dict(system)
    except (ValueError, TypeError, ImportError, AttributeError) as err:
        raise ParseError(f'invalid allocation system: {err}') from err


def generate(setup: ElectionSetup, indent: Optional[int] = 2) -> str:
    """Produce the JSON text of an election setup."""
    data = {'votes': setup.votes}
    for key in ('n_seats', 'preferences', 'threshold', 'name'):
        value = getattr(setup, key)
        if value is not None:
            data[key] = value
    if setup.system is not None:
        data['system'] = fairshare.persist.to_dict(setup.system)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def generate_result(result: AllocationResult,
                    indent: Optional[int] = 2,
                    ) -> str:
    """Produce the JSON text of an allocation result with its audit trail."""
    return json.dumps(
        result.to_dict(), indent=indent, ensure_ascii=False, default=float
    )


def generate_seats(seats: Dict[str, int], indent: Optional[int] = 2) -> str:
    """Produce the JSON text of a plain seat distribution."""
    return json.dumps(seats, indent=indent, ensure_ascii=False)


load, loads = loaders(parse)
dump, dumps = dumpers(generate)
dump_result, dumps_result = dumpers(generate_result)
dump_seats, dumps_seats = dumpers(generate_seats)
