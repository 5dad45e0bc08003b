# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Culms (main stem and tillers) and their potential leaf area expansion.
"""
from math import exp, floor

from ..util import smm2sm, limit


class CulmParameters(object):
    """Leaf appearance and leaf size parameters shared by all culms.

    ============  =============================================== ======
     Name          Description                                     Unit
    ============  =============================================== ======
    phyllochron   Thermal time between appearance of two leaves    |C| d
    final_leaf_no Final number of leaves on the main culm          -
    amax          Area of the largest leaf                         mm2
    x0            Position of the largest leaf                     -
    bell_a        Breadth coefficient of the leaf size curve       -
    bell_b        Skewness coefficient of the leaf size curve      -
    ============  =============================================== ======
    """

    def __init__(self, phyllochron, final_leaf_no, amax, x0, bell_a, bell_b):
        self.phyllochron = phyllochron
        self.final_leaf_no = final_leaf_no
        self.amax = amax
        self.x0 = x0
        self.bell_a = bell_a
        self.bell_b = bell_b

    def leaf_size(self, leaf_position):
        """Area (mm2) of the leaf at `leaf_position` on the main culm, bell
        shaped around the largest leaf at x0.
        """
        d = leaf_position - self.x0
        return self.amax * exp(self.bell_a * d**2 + self.bell_b * d**3)


class Culm(object):
    """A single culm contributing to the potential leaf area of the organ.

    :param culm_number: 0 for the main culm, 1, 2, ... for tillers
    :param proportion: fraction of the culm that is present, the last tiller
        can be fractional
    :param leaf_at_appearance: main culm leaf number at which this culm appears
    :param vertical_adjustment: shift of the leaf positions of a tiller
        relative to the main culm
    :param density: plants per m2
    :param shape: CulmParameters shared by all culms of the organ
    """

    def __init__(self, culm_number, proportion, leaf_at_appearance,
                 vertical_adjustment, density, shape):
        self.culm_number = culm_number
        self.proportion = proportion
        self.leaf_at_appearance = leaf_at_appearance
        self.vertical_adjustment = vertical_adjustment
        self.density = density
        self.shape = shape
        self.leaf_no = 0.

    @property
    def final_leaf_no(self):
        # tillers stop with the main culm
        return max(0., self.shape.final_leaf_no - self.leaf_at_appearance)

    def calc_potential_area(self, dlt_tt):
        """Returns the potential increase in leaf area index (m2/m2) of this
        culm for a day with thermal time `dlt_tt` and advances its leaf
        number.
        """
        if self.shape.phyllochron <= 0.:
            return 0.
        dlt_leaf_no = limit(0., self.final_leaf_no - self.leaf_no,
                            dlt_tt/self.shape.phyllochron)
        if dlt_leaf_no <= 0.:
            return 0.

        # the leaf expanding today determines the size of the new area
        expanding = floor(self.leaf_no) + 1
        position = expanding + self.leaf_at_appearance + self.vertical_adjustment
        self.leaf_no += dlt_leaf_no

        area = dlt_leaf_no * self.shape.leaf_size(position)
        return area * self.proportion * self.density * smm2sm

    def __repr__(self):
        return ("Culm(culm_number=%i, proportion=%.2f, leaf_no=%.2f)" %
                (self.culm_number, self.proportion, self.leaf_no))


def tillers_due(main_culm, culms, fertile_tiller_no, start_leaf, vertical_adjustment):
    """Returns the new tillers that appear given the leaf number of the main
    culm.

    Tiller i (1, 2, ...) appears when the main culm reaches leaf
    `start_leaf + i - 1`. The number of tillers is limited by
    `fertile_tiller_no`, a fractional remainder gives a partial tiller.
    """
    new = []
    n_tillers = len(culms) - 1
    while n_tillers < fertile_tiller_no:
        culm_number = n_tillers + 1
        leaf_at_appearance = start_leaf + culm_number - 1
        if main_culm.leaf_no < leaf_at_appearance:
            break
        proportion = min(1., fertile_tiller_no - n_tillers)
        new.append(Culm(culm_number, proportion, leaf_at_appearance,
                        vertical_adjustment, main_culm.density, main_culm.shape))
        n_tillers += 1
    return new
