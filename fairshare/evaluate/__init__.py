'''Allocate seats to parties according to their votes.

All allocators are distributors: they return a dictionary mapping every
party to the number of seats it was allocated (zero included).

-   :class:`FairShareTransferDistributor` implements Fair Share
    Voting with a threshold and cascading vote transfers, and can also
    return the full audit trail of the allocation.
-   :class:`HighestAverages` is a single-pass divisor method (D'Hondt by
    default) used as a baseline for comparison.

Neither allocator raises for anything reachable from valid election data;
invalid setups (e.g. a non-positive number of seats) raise ``ValueError``.
'''

from fairshare.evaluate.core import VotingSystemError, Distributor    # noqa
from fairshare.evaluate.proportional import (    # noqa
    HighestAverages, highest_averages
)
from fairshare.evaluate.fairshare import (    # noqa
    FairShareTransferDistributor, allocate_fair_share
)
