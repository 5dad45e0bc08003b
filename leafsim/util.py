# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Miscellaneous utilities for LeafSim
"""
from bisect import bisect_left

from .settings import settings

# conversion factor of mm2 to m2
smm2sm = 1.0e-6
# conversion factor of g/m2 to kg/ha
gm2kgha = 10.


def limit(min, max, v):
    """limits the range of v between min and max
    """

    if min > max:
        raise RuntimeError("Min value (%f) larger than max (%f)" % (min, max))

    if v < min:       # V below range: return min
        return min
    elif v < max:     # v within range: return v
        return v
    else:             # v above range: return max
        return max


def divide(numerator, denominator, default=0.):
    """Returns numerator/denominator or `default` when the denominator is zero.

    Degenerate canopy states (no leaf area, no radiation, no live biomass)
    are common at the start and end of a crop cycle and are not errors.

    example::

        >>> divide(1., 4.)
        0.25
        >>> divide(1., 0., default=1.)
        1.0
    """
    if denominator == 0.:
        return float(default)
    return numerator/denominator


def is_greater_than(value1, value2, tolerance=None):
    """Returns True when value1 exceeds value2 by more than `tolerance`,
    defaults to settings.BIOMASS_TOLERANCE.
    """
    if tolerance is None:
        tolerance = settings.BIOMASS_TOLERANCE
    return (value1 - value2) > tolerance


class Afgen(object):
    """Linear interpolation in a table of XY pairs.

    :param tbl_xy: List or array of XY value pairs describing the function
        the X values should be strictly increasing.

    Returns the interpolated value provided with the absicca value at which
    the interpolation should take place. Outside the table range the first or
    last Y value is returned.

    example::

        >>> tbl_xy = [0,0,1,1,5,10]
        >>> f =  Afgen(tbl_xy)
        >>> f(0.5)
        0.5
        >>> f(1.5)
        2.125
        >>> f(6)
        10.0
        >>> f(-1)
        0.0
    """

    def __init__(self, tbl_xy):
        if len(tbl_xy) < 2 or len(tbl_xy) % 2 != 0:
            msg = "AFGEN table should contain XY pairs, got: %s" % (tbl_xy,)
            raise ValueError(msg)

        x_list = self.x_list = [float(x) for x in tbl_xy[0::2]]
        y_list = self.y_list = [float(y) for y in tbl_xy[1::2]]
        if any(x2 <= x1 for x1, x2 in zip(x_list, x_list[1:])):
            msg = "X values for AFGEN input list not strictly ascending: %s" % x_list
            raise ValueError(msg)

        intervals = list(zip(x_list, x_list[1:], y_list, y_list[1:]))
        self.slopes = [(y2 - y1)/(x2 - x1) for x1, x2, y1, y2 in intervals]

    def __call__(self, x):

        if x <= self.x_list[0]:
            return self.y_list[0]
        if x >= self.x_list[-1]:
            return self.y_list[-1]

        i = bisect_left(self.x_list, x) - 1
        return self.y_list[i] + self.slopes[i] * (x - self.x_list[i])
