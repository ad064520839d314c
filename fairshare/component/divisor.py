'''Divisor functions used in highest-averages proportional allocation.

This provides arguments for the
:class:`fairshare.evaluate.proportional.HighestAverages` allocator.

A divisor function takes the order number (the number of seats the party
holds so far) and returns the divisor by which to divide the number of votes
for the party. The party with the largest quotient then gets the next seat.
Divisors are integers or fractions so that the quotients stay exact.

Some systems artificially raise the first divisor to make it harder for
parties to get their first seat. Use :func:`modified_first_coef` for that.

All supported divisor functions are assembled in the `DIVISORS` dictionary
keyed by their name. `get()` retrieves from this dictionary by string key;
`construct()` also accepts callables and passes them through.
'''

from fractions import Fraction
from typing import Callable, Union
from numbers import Number

import fairshare.component.core


DIVISORS = {}


divisor_mark, get, construct = fairshare.component.core.register_functions(
    DIVISORS, 'divisor'
)


@divisor_mark
def d_hondt(order: int) -> int:
    '''D'Hondt divisor, the default of the highest averages allocator.

    Forms a simple sequence 1, 2, 3... Dividing a party's votes by it for
    orders 0 to N-1 gives the quotients `votes / d` for d = 1..N.

    Known to slightly favor larger parties.
    '''
    return order + 1


@divisor_mark
def sainte_lague(order: int) -> int:
    '''Sainte-Laguë (Webster) divisor.

    Forms a sequence 1, 3, 5...

    Known to favor mid-sized parties.
    '''
    return 2 * order + 1


@divisor_mark
def imperiali(order: int) -> Fraction:
    '''Imperiali divisor. Forms a sequence 1, 1.5, 2...'''
    return Fraction(order, 2) + 1


@divisor_mark
def danish(order: int) -> int:
    '''Danish divisor. Forms a sequence 1, 4, 7...'''
    return 3 * order + 1


@divisor_mark
def macau(order: int) -> int:
    '''Macau modified D'Hondt divisor (1, 2, 4, 8...).'''
    return 2 ** order


def modified_first_coef(divisor_fx: Callable[[int], Number],
                        first_coef: Union[int, Fraction, str] = '1.4',
                        ) -> Callable[[int], Number]:
    '''Modify the divisor for the zeroth order to an apriori coefficient.

    :param divisor_fx: The ordinary divisor function to be used for the
        subsequent orders.
    :param first_coef: The coefficient to be used when order == 0. Strings
        and floats are converted to an exact fraction.
    '''
    if not isinstance(first_coef, (int, Fraction)):
        first_coef = Fraction(first_coef)

    def _modified_divisor(order: int) -> Number:
        return divisor_fx(order) if order > 0 else first_coef
    return _modified_divisor
