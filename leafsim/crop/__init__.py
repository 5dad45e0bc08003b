# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from .biomass import (Biomass, BiomassSupply, BiomassDemand, BiomassAllocation,
                      BiomassRemovalFractions)
from .senescence import MovingAverage, LeafSenescence
from .culm import Culm, CulmParameters
from .plant import Plant
from .sorghum_leaf import SorghumLeaf
