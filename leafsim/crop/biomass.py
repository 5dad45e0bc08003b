# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Biomass pools and the supply, demand and allocation records exchanged
between an organ and the arbitrator.

All amounts are in g/m2. Pools are split in a structural, a metabolic and a
storage (non-structural) part, each carrying dry matter and nitrogen.
"""
from .. import exceptions as exc
from ..settings import settings


class Biomass(object):
    """Dry matter and nitrogen content of a pool of plant material.

    Pools combine component-wise::

        >>> live = Biomass(structural_wt=10., storage_wt=2., structural_n=0.3)
        >>> dead = Biomass(structural_wt=1.)
        >>> (live + dead).wt
        13.0
        >>> (live - dead).structural_wt
        9.0
        >>> (live * 0.5).n
        0.15

    Subtracting more than a pool holds raises a ConservationViolation, small
    negative results within the biomass tolerance are set to zero.
    """
    components = ["structural_wt", "metabolic_wt", "storage_wt",
                  "structural_n", "metabolic_n", "storage_n"]
    __slots__ = components

    def __init__(self, structural_wt=0., metabolic_wt=0., storage_wt=0.,
                 structural_n=0., metabolic_n=0., storage_n=0.):
        self.structural_wt = float(structural_wt)
        self.metabolic_wt = float(metabolic_wt)
        self.storage_wt = float(storage_wt)
        self.structural_n = float(structural_n)
        self.metabolic_n = float(metabolic_n)
        self.storage_n = float(storage_n)

    @property
    def wt(self):
        return self.structural_wt + self.metabolic_wt + self.storage_wt

    @property
    def n(self):
        return self.structural_n + self.metabolic_n + self.storage_n

    @property
    def nconc(self):
        return self.n/self.wt if self.wt > 0. else 0.

    def clear(self):
        for c in self.components:
            setattr(self, c, 0.)

    def copy(self):
        return Biomass(**self.as_dict())

    def as_dict(self):
        return dict((c, getattr(self, c)) for c in self.components)

    def add(self, other):
        """Adds the content of `other` to this pool in place."""
        for c in self.components:
            setattr(self, c, getattr(self, c) + getattr(other, c))

    def subtract(self, other):
        """Removes the content of `other` from this pool in place."""
        for c in self.components:
            setattr(self, c, self._checked_difference(c, getattr(self, c), getattr(other, c)))

    @staticmethod
    def _checked_difference(component, v1, v2):
        v = v1 - v2
        if v < 0.:
            if v < -settings.BIOMASS_TOLERANCE:
                msg = "Subtraction of %f from %f leaves negative %s." % (v2, v1, component)
                raise exc.ConservationViolation(msg)
            v = 0.
        return v

    def __add__(self, other):
        new = self.copy()
        new.add(other)
        return new

    def __sub__(self, other):
        new = self.copy()
        new.subtract(other)
        return new

    def __mul__(self, factor):
        return Biomass(**dict((c, getattr(self, c) * factor) for c in self.components))

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, Biomass):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        return "Biomass(wt=%.4f, n=%.4f)" % (self.wt, self.n)


class BiomassSupply(object):
    """Daily supply of dry matter or nitrogen by an organ."""
    __slots__ = ["reallocation", "retranslocation", "fixation", "uptake"]

    def __init__(self, reallocation=0., retranslocation=0., fixation=0., uptake=0.):
        self.reallocation = reallocation
        self.retranslocation = retranslocation
        self.fixation = fixation
        self.uptake = uptake

    @property
    def total(self):
        return self.reallocation + self.retranslocation + self.fixation + self.uptake

    def clear(self):
        self.reallocation = self.retranslocation = self.fixation = self.uptake = 0.

    def as_tuple(self):
        return (self.reallocation, self.retranslocation, self.fixation, self.uptake)

    def __repr__(self):
        return ("BiomassSupply(reallocation=%s, retranslocation=%s, fixation=%s, uptake=%s)"
                % self.as_tuple())


class BiomassDemand(object):
    """Daily demand (or potential allocation) of dry matter or nitrogen."""
    __slots__ = ["structural", "metabolic", "storage"]

    def __init__(self, structural=0., metabolic=0., storage=0.):
        self.structural = structural
        self.metabolic = metabolic
        self.storage = storage

    @property
    def total(self):
        return self.structural + self.metabolic + self.storage

    def clear(self):
        self.structural = self.metabolic = self.storage = 0.

    def as_tuple(self):
        return (self.structural, self.metabolic, self.storage)

    def __repr__(self):
        return "BiomassDemand(structural=%s, metabolic=%s, storage=%s)" % self.as_tuple()


class BiomassAllocation(object):
    """Arbitrated allocation of dry matter or nitrogen handed to an organ.

    `structural`, `metabolic` and `storage` are additions to the organ,
    `retranslocation` and `reallocation` are amounts taken from the organ
    to supply other organs.
    """
    __slots__ = ["structural", "metabolic", "storage", "retranslocation", "reallocation"]

    def __init__(self, structural=0., metabolic=0., storage=0.,
                 retranslocation=0., reallocation=0.):
        self.structural = structural
        self.metabolic = metabolic
        self.storage = storage
        self.retranslocation = retranslocation
        self.reallocation = reallocation

    def __repr__(self):
        return ("BiomassAllocation(structural=%s, metabolic=%s, storage=%s, "
                "retranslocation=%s, reallocation=%s)" %
                (self.structural, self.metabolic, self.storage,
                 self.retranslocation, self.reallocation))


class BiomassRemovalFractions(object):
    """Fractions of live and dead biomass removed from an organ by a
    harvest, graze or cut event.

    `*_to_remove` leaves the system, `*_to_residue` is detached and passed to
    the surface organic matter.
    """

    def __init__(self, live_to_remove=0., dead_to_remove=0.,
                 live_to_residue=0., dead_to_residue=0.):
        self.live_to_remove = live_to_remove
        self.dead_to_remove = dead_to_remove
        self.live_to_residue = live_to_residue
        self.dead_to_residue = dead_to_residue

        for label, total in [("live", live_to_remove + live_to_residue),
                             ("dead", dead_to_remove + dead_to_residue)]:
            if not 0. <= total <= 1.:
                msg = "Removal fractions of %s biomass must sum to a value in [0, 1], got %s."
                raise exc.ParameterError(msg % (label, total))
