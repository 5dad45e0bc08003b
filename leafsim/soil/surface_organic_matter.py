# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from ..traitlets import Float, List
from ..base import AncillaryObject
from .. import exceptions as exc


class ResidueAddition(object):
    """One addition of crop residues to the surface organic matter."""

    def __init__(self, mass, n, fraction_standing, crop_type, organ_name):
        self.mass = mass
        self.n = n
        self.fraction_standing = fraction_standing
        self.crop_type = crop_type
        self.organ_name = organ_name

    def __repr__(self):
        return ("ResidueAddition(%s/%s, mass=%.2f kg/ha, n=%.3f kg/ha)" %
                (self.crop_type, self.organ_name, self.mass, self.n))


class SurfaceOrganicMatter(AncillaryObject):
    """Pool of crop residues lying or standing on the soil surface.

    =========  ============================================  ===========
     Name       Description                                   Unit
    =========  ============================================  ===========
    MASS       Total residue mass                            |kg ha-1|
    N          Total residue nitrogen                        |kg ha-1|
    STANDING   Residue mass standing                         |kg ha-1|
    LYING      Residue mass lying on the surface             |kg ha-1|
    =========  ============================================  ===========
    """

    MASS = Float(0.)
    N = Float(0.)
    STANDING = Float(0.)
    LYING = Float(0.)
    additions = List()

    def initialize(self, kiosk):
        self.additions = []

    def add(self, mass, n, fraction_standing, crop_type, organ_name):
        """Adds residues of an organ.

        :param mass: residue dry matter (kg/ha)
        :param n: residue nitrogen (kg/ha)
        :param fraction_standing: fraction of the residue that stays standing
        :param crop_type: type of the crop the residue comes from
        :param organ_name: name of the organ the residue comes from
        """
        if mass < 0. or n < 0.:
            msg = "Negative residue from %s/%s: mass=%s, n=%s" % (crop_type, organ_name, mass, n)
            raise exc.ConservationViolation(msg)
        if not 0. <= fraction_standing <= 1.:
            msg = "Fraction standing residue should be in [0, 1], got %s" % fraction_standing
            raise exc.ParameterError(msg)

        self.additions.append(ResidueAddition(mass, n, fraction_standing, crop_type, organ_name))
        self.MASS += mass
        self.N += n
        self.STANDING += mass * fraction_standing
        self.LYING += mass * (1. - fraction_standing)
        self.logger.info("Added %.2f kg/ha residue of %s/%s" % (mass, crop_type, organ_name))
