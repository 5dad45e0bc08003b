# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Leaf area senescence driven by light competition, water deficit and frost.

Each driver estimates the leaf area that should be lost today. Light and
water senescence compare the current LAI with an equilibrium LAI that the
canopy can sustain, smoothed over the previous days with a moving average.
Frost kills the complete green leaf area when the minimum temperature drops
below a threshold. The organ loses the largest of the three estimates, the
drivers are not additive.
"""
from math import log

import numpy as np

from ..util import divide


class MovingAverage(object):
    """Moving average over the last `capacity` values.

    Values are kept in a preallocated ring buffer together with their running
    sum, so that pushing a value does not re-sum the window. Once the window
    is full, each push evicts the oldest value.

    example::

        >>> ma = MovingAverage(3)
        >>> [ma.push(v) for v in [1., 2., 3., 4.]]
        [1.0, 1.5, 2.0, 3.0]
        >>> len(ma)
        3
    """

    def __init__(self, capacity):
        if capacity < 1:
            msg = "Capacity of MovingAverage should be at least 1, got %s." % capacity
            raise ValueError(msg)
        self.capacity = int(capacity)
        self._buffer = np.zeros(self.capacity, dtype=np.float64)
        self.reset()

    def reset(self):
        self._buffer[:] = 0.
        self._next = 0
        self._count = 0
        self._total = 0.

    def push(self, value):
        """Adds `value` to the window and returns the new average."""
        if self._count == self.capacity:
            self._total -= self._buffer[self._next]
        else:
            self._count += 1
        self._buffer[self._next] = value
        self._total += value
        self._next = (self._next + 1) % self.capacity
        return self.average

    @property
    def average(self):
        return float(divide(self._total, self._count, 0.))

    @property
    def values(self):
        """Values in the window, oldest first."""
        if self._count < self.capacity:
            return self._buffer[:self._count].copy()
        return np.roll(self._buffer, -self._next)

    def __len__(self):
        return self._count

    def __repr__(self):
        return "MovingAverage(capacity=%i, average=%f)" % (self.capacity, self.average)


def frost_senescence(lai, tmin, frost_kill):
    """Returns the complete leaf area when `tmin` is below `frost_kill`."""
    if tmin < frost_kill:
        return lai
    return 0.


class LeafSenescence(object):
    """Moving averages and loss rules for light and water senescence of one
    organ.

    :param light_days: window of the equilibrium LAI for light
    :param water_days: window of the equilibrium LAI for water
    :param sd_ratio_days: window of the water supply/demand ratio
    """

    def __init__(self, light_days=10, water_days=10, sd_ratio_days=5):
        self.lai_equilib_light = MovingAverage(light_days)
        self.lai_equilib_water = MovingAverage(water_days)
        self.sd_ratio = MovingAverage(sd_ratio_days)

    def reset(self):
        self.lai_equilib_light.reset()
        self.lai_equilib_water.reset()
        self.sd_ratio.reset()

    def light(self, lai, radn, radn_transmitted, k, sen_radn_crit, time_const):
        """Leaf area lost by shading of the lower canopy.

        The canopy can sustain the LAI at which the transmitted radiation
        equals `sen_radn_crit`. Leaf area above the averaged equilibrium
        senesces with time constant `time_const` when the radiation reaching
        the bottom of the canopy is below the critical value.
        """
        crit_transmission = divide(sen_radn_crit, radn, 1.)
        if crit_transmission > 0.:
            lai_eqlb_today = divide(-log(crit_transmission), k, lai)
        else:
            lai_eqlb_today = lai
        avg_lai_eqlb = self.lai_equilib_light.push(lai_eqlb_today)

        loss = 0.
        if radn_transmitted < sen_radn_crit:
            loss = max(0., divide(lai - avg_lai_eqlb, time_const, 0.))
        return min(loss, lai)

    def water(self, lai, radn, cover_green, k, photosynthesis, dm_transp,
              sd_ratio, sen_threshold, time_const):
        """Leaf area lost when the water supply cannot sustain the canopy.

        The biomass that transpiration can support (`dm_transp`) is converted
        into a critical intercepted radiation using today's radiation use
        efficiency, and from that into the LAI the water supply can sustain.
        Leaf area above its averaged value senesces when the averaged water
        supply/demand ratio falls below `sen_threshold`.
        """
        rad_int_tot = cover_green * radn
        effective_rue = divide(photosynthesis, rad_int_tot, 0.)
        radn_canopy = divide(rad_int_tot, cover_green, radn)

        sen_radn_crit = divide(dm_transp, effective_rue, radn_canopy)
        intc_crit = divide(sen_radn_crit, radn_canopy, 1.)

        if intc_crit < 1.:
            lai_eqlb_today = divide(-log(1. - intc_crit), k, lai)
        else:
            lai_eqlb_today = lai
        avg_lai_eqlb = self.lai_equilib_water.push(lai_eqlb_today)
        avg_sd_ratio = self.sd_ratio.push(sd_ratio)

        loss = 0.
        if avg_sd_ratio < sen_threshold:
            loss = max(0., divide(lai - avg_lai_eqlb, time_const, 0.))
        return min(lai, loss)
