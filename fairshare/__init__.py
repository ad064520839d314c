"""Fairshare - seat allocation for Fair Share Voting.

Fair Share Voting is a hybrid proportional representation method. Parties
buy seats with their votes at a common seat cost; parties under a vote share
threshold, and parties that can no longer afford seats, are eliminated one
by one and their votes flow on to the next party named in their transfer
preferences.

The package is organized as follows:

-   The ``evaluate`` subpackage holds the allocators: the Fair Share
    transfer allocator (:mod:`evaluate.fairshare`), a highest averages
    allocator used as a baseline (:mod:`evaluate.proportional`) and the
    vote share threshold of the Fair Share allocator
    (:mod:`evaluate.threshold`).
-   The ``component`` subpackage holds building blocks such as divisor
    functions and transfer preference resolution.
-   :mod:`allocation` defines the allocation state and the audit trail
    (rounds, transfers, seat awards) returned by the Fair Share allocator.
-   :mod:`generate` simulates multi-district elections to produce vote
    totals and a first-past-the-post comparison.
-   :mod:`party` and :mod:`presets` provide party display metadata and the
    2024 UK general election data for demonstrations.

The allocators operate on party identifiers only; display names and colors
are the business of whoever renders the result.
"""
