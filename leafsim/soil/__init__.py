# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from .surface_organic_matter import SurfaceOrganicMatter, ResidueAddition
from .root_water import RootWater
