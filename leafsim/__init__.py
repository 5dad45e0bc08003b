# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""
LeafSim provides building blocks for simulating the daily growth of a single
crop organ, following the approach of the Python Crop Simulation Environment:
a rigid distinction between parameters, rate calculation and state update,
variables published through a VariableKiosk and lifecycle events delivered
as signals.

The package currently includes an implementation of the sorghum leaf organ:
dry matter and nitrogen supply and demand, application of arbitrated
allocations, canopy development from individual culms, and leaf senescence
driven by light competition, water deficit and frost.
"""
__license__ = "European Union Public License"
__version__ = "1.0.0"

import sys, os


def setup():
    """
    Set up the .leafsim folder in the user home and add it to sys.path, so that
    an optional user_settings.py placed there is picked up by the settings.
    """

    user_home = os.path.expanduser("~")
    leafsim_user_home = os.path.join(user_home, ".leafsim")
    os.makedirs(leafsim_user_home, exist_ok=True)

    if leafsim_user_home not in sys.path:
        sys.path.append(leafsim_user_home)


setup()

import logging.config
from .settings import settings
logging.config.dictConfig(settings.LOG_CONFIG)

from . import util
from . import functions
from . import crop
from . import soil
from . import tests
from .engine import OrganEngine, SimpleArbitrator


def test():
    """Run all available tests for LeafSim."""
    tests.test_all()
