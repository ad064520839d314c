'''Transfer preference resolution for the Fair Share allocator.

Parties that are eliminated pass their votes on to another party. Each party
may declare an ordered list of preferred recipients; the votes go to the
first party on that list that is still in the contest. If there is no such
party, the votes are lost (exhausted), much like an exhausted ballot in
a transferable vote system.
'''

from typing import Collection, Dict, List, Mapping, Optional


Preferences = Dict[str, List[str]]


def preferred_target(preferences: Mapping[str, List[str]],
                     source: str,
                     allowed: Collection[str],
                     ) -> Optional[str]:
    '''Select the party that should receive the votes of source.

    :param preferences: Transfer preferences, mapping parties to ordered
        lists of preferred recipients.
    :param source: The party whose votes are being transferred.
    :param allowed: Parties that can still receive votes (existing and not
        finalized). Parties on the preference list that are not in this
        collection are skipped.
    :returns: The first allowed party in the preference list of source, or
        None if the list is missing or exhausted.
    '''
    for target in preferences.get(source, ()):
        if target != source and target in allowed:
            return target
    return None    # exhausted preference list


def validate_preferences(preferences: Optional[Mapping[str, List[str]]]
                         ) -> Preferences:
    '''Check the transfer preferences and return them as a new dictionary.

    Preference lists may name parties that are absent from the votes; those
    are simply never eligible to receive transfers.

    :raises TypeError: If preferences is not a mapping.
    :raises ValueError: If any preference list is not a list of party
        identifiers.
    '''
    if preferences is None:
        return {}
    if not isinstance(preferences, Mapping):
        raise TypeError(
            f'transfer preferences must be a mapping, got {preferences!r}'
        )
    validated = {}
    for source, targets in preferences.items():
        if isinstance(targets, str) or not hasattr(targets, '__iter__'):
            raise ValueError(
                f'preferences for {source} must be a list of parties,'
                f' got {targets!r}'
            )
        validated[source] = list(targets)
    return validated
