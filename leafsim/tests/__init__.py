# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
""" Collection of tests for LeafSim.
"""
import unittest
import warnings

from . import test_util
from . import test_functions
from . import test_states_rates
from . import test_biomass
from . import test_senescence
from . import test_sorghum_leaf
from . import test_engine


def make_test_suite():
    """Assemble test suite and return it
    """
    allsuites = unittest.TestSuite([test_util.suite(),
                                    test_functions.suite(),
                                    test_states_rates.suite(),
                                    test_biomass.suite(),
                                    test_senescence.suite(),
                                    test_sorghum_leaf.suite(),
                                    test_engine.suite()
                                    ])
    return allsuites


def test_all():
    """Assemble test suite and run the test using the TextTestRunner
    """
    allsuites = make_test_suite()
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        unittest.TextTestRunner(verbosity=2).run(allsuites)
