# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from ..traitlets import Float
from ..base import AncillaryObject
from .. import exceptions as exc


class RootWater(AncillaryObject):
    """Bucket of water extractable by the roots.

    Rain fills the bucket up to its capacity, transpiration empties it.

    :param kiosk: variable kiosk of this LeafSim instance
    :param capacity: maximum extractable water (mm)
    :param initial: initial extractable water (mm), defaults to capacity
    """

    capacity = Float(0.)
    water = Float(0.)

    def initialize(self, kiosk, capacity, initial=None):
        if capacity < 0.:
            msg = "Capacity of extractable water should be positive, got %s" % capacity
            raise exc.ParameterError(msg)
        self.capacity = capacity
        self.water = capacity if initial is None else min(initial, capacity)

    def total_extractable_water(self):
        return self.water

    def update(self, rain=0., transpiration=0.):
        """Adds rain (mm) and removes transpiration (mm) from the bucket."""
        self.water = min(self.capacity, max(0., self.water + rain - transpiration))
