# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
import datetime
import unittest
from math import exp, log

from ..base import VariableKiosk
from ..crop import SorghumLeaf, Plant
from ..crop.biomass import Biomass, BiomassAllocation, BiomassRemovalFractions
from ..soil import SurfaceOrganicMatter
from .. import exceptions as exc
from .leaf_inputs import leaf_parameters, weather


class LeafTestCase(unittest.TestCase):
    """Sets up a sown and emerged leaf with LAI=2 and 2 g/m2 structural DM."""

    day = datetime.date(2020, 1, 1)
    population = 10.
    overrides = {"INITIALLAI": 200000.}
    emerge = True

    def setUp(self):
        self.kiosk = VariableKiosk()
        self.plant = Plant(self.kiosk)
        self.som = SurfaceOrganicMatter(self.kiosk)
        parvalues = leaf_parameters(**self.overrides)
        self.leaf = SorghumLeaf(self.day, self.kiosk, parvalues, plant=self.plant,
                                surface_organic_matter=self.som)
        self.plant.sow(self.day, self.population)
        if self.emerge:
            self.plant.change_phase(self.day, "emergence")

    def tearDown(self):
        self.leaf._delete()


class Test_Construction(unittest.TestCase):

    def runTest(self):
        kiosk = VariableKiosk()
        leaf = SorghumLeaf(datetime.date(2020, 1, 1), kiosk, leaf_parameters())
        self.assertEqual(leaf.phase, "UNINITIALIZED")
        self.assertEqual(leaf.states.LAI, 0.)
        self.assertEqual(leaf.rates.DLTLAI, 0.)
        self.assertTrue(kiosk.variable_exists("COVERGREEN"))
        with self.assertRaises(AttributeError):
            leaf.states.LAI = 1.


class Test_Sowing(LeafTestCase):
    emerge = False

    def test_initial_pools(self):
        leaf = self.leaf
        self.assertEqual(leaf.phase, "SOWN")
        self.assertAlmostEqual(leaf.states.LAI, 2.)
        self.assertAlmostEqual(leaf.states.SLN, 1.5)
        self.assertAlmostEqual(leaf.live.structural_wt, 2.)
        self.assertAlmostEqual(leaf.live.structural_n, 3.)
        self.assertEqual(leaf.start_live, leaf.live)
        self.assertAlmostEqual(self.kiosk.LAI, 2.)
        self.assertAlmostEqual(leaf.states.COVERGREEN, 1. - exp(-1.))
        self.assertAlmostEqual(self.kiosk.COVERGREEN, 1. - exp(-1.))

    def test_no_culms_before_leaf_initiation(self):
        self.assertFalse(self.leaf.leaf_initialised)
        self.assertEqual(len(self.leaf.culms), 0)
        self.plant.change_phase(self.day, "emergence")
        self.assertTrue(self.leaf.leaf_initialised)
        self.assertEqual(len(self.leaf.culms), 1)
        self.assertEqual(self.leaf.culms[0].density, self.population)

    def test_light_senescence_on_first_day(self):
        self.plant.change_phase(self.day, "emergence")
        # transmitted radiation 3*exp(-1) is below the critical radiation
        self.leaf.do_potential_partitioning(self.day, weather(self.day, RADN=3.))
        lai_eqlb = -log(2./3.)/0.5
        self.assertAlmostEqual(self.leaf.rates.DLTSENLAILIGHT, (2. - lai_eqlb)/10.)

    def test_sowing_requires_population(self):
        self.assertRaises(exc.ParameterError, self.leaf._on_CROP_START, self.day)


class Test_Supply(LeafTestCase):

    def test_dm_supply(self):
        self.leaf.live.storage_wt = 100.
        self.leaf.do_daily_initialisation(self.day)
        self.leaf.set_dm_supply()
        supply = self.leaf.dm_supply
        self.assertAlmostEqual(supply.reallocation, 5.)
        self.assertAlmostEqual(supply.retranslocation, 19.)
        self.assertEqual(supply.fixation, 0.)
        self.assertEqual(self.leaf.phase, "SUPPLY_COMPUTED")

    def test_n_supply(self):
        self.leaf.live.storage_n = 0.1
        self.leaf.live.metabolic_n = 0.2
        self.leaf.do_daily_initialisation(self.day)
        self.leaf.set_n_supply()
        self.assertAlmostEqual(self.leaf.n_supply.reallocation, 0.012)
        self.assertAlmostEqual(self.leaf.n_supply.retranslocation, 0.081)

    def test_repeated_calls(self):
        leaf = self.leaf
        leaf.live.storage_wt = 100.
        leaf.live.storage_n = 0.1
        leaf.live.metabolic_n = 0.2
        leaf.do_daily_initialisation(self.day)

        records = []
        for _ in range(2):
            leaf.set_dm_supply()
            leaf.set_n_supply()
            leaf.set_dm_demand()
            leaf.set_n_demand()
            records.append((leaf.dm_supply.as_tuple(), leaf.n_supply.as_tuple(),
                            leaf.dm_demand.as_tuple(), leaf.n_demand.as_tuple()))
        self.assertEqual(records[0], records[1])
        self.assertAlmostEqual(records[0][0][1], 19.)

    def test_demand(self):
        self.leaf.set_dm_demand()
        self.leaf.set_n_demand()
        self.assertEqual(self.leaf.dm_demand.as_tuple(), (2., 0., 1.))
        self.assertAlmostEqual(self.leaf.n_demand.structural, 0.05)
        self.assertAlmostEqual(self.leaf.n_demand.metabolic, 0.01)
        self.assertEqual(self.leaf.phase, "DEMAND_COMPUTED")


class Test_NegativeSupply(LeafTestCase):
    overrides = {"INITIALLAI": 200000., "SENRATE": -0.1}

    def runTest(self):
        self.leaf.live.storage_wt = 100.
        self.leaf.do_daily_initialisation(self.day)
        self.assertRaises(exc.ConservationViolation, self.leaf.set_dm_supply)


class Test_DMAllocation(LeafTestCase):

    def setUp(self):
        LeafTestCase.setUp(self)
        self.leaf.live.storage_wt = 1.
        self.leaf.do_daily_initialisation(self.day)
        self.leaf.set_dm_supply()
        self.leaf.set_dm_demand()

    def test_allocation(self):
        allocation = BiomassAllocation(structural=1., storage=0.5, retranslocation=0.2,
                                       reallocation=0.1)
        self.leaf.set_dm_allocation(allocation)
        self.assertAlmostEqual(self.leaf.live.structural_wt, 3.)
        self.assertAlmostEqual(self.leaf.live.storage_wt, 1.2)
        self.assertAlmostEqual(self.leaf.allocated.structural_wt, 1.)
        self.assertAlmostEqual(self.leaf.allocated.storage_wt, 0.2)
        self.assertEqual(self.leaf.phase, "ALLOCATION_APPLIED")

    def test_structural_limited_by_demand(self):
        self.leaf.set_dm_allocation(BiomassAllocation(structural=5.))
        self.assertAlmostEqual(self.leaf.live.structural_wt, 4.)

    def test_retranslocation_beyond_storage(self):
        self.assertRaises(exc.ConservationViolation, self.leaf.set_dm_allocation,
                          BiomassAllocation(retranslocation=1.5))

    def test_withdrawal_beyond_storage(self):
        allocation = BiomassAllocation(retranslocation=0.8, reallocation=0.5)
        with self.assertRaisesRegex(exc.ConservationViolation, "organ Leaf"):
            self.leaf.set_dm_allocation(allocation)
        self.assertAlmostEqual(self.leaf.live.storage_wt, 1.)

    def test_storage_beyond_capacity(self):
        allocation = BiomassAllocation(structural=1., storage=1.5)
        self.assertRaises(exc.CapacityViolation, self.leaf.set_dm_allocation, allocation)
        # changes made before the violation stand
        self.assertAlmostEqual(self.leaf.live.structural_wt, 3.)
        self.assertAlmostEqual(self.leaf.live.storage_wt, 1.)

    def test_potential_allocation(self):
        allocation = BiomassAllocation(structural=1.5, storage=0.5)
        self.leaf.set_dm_potential_allocation(allocation)
        self.assertEqual(self.leaf.dm_potential_allocation.as_tuple(), (1.5, 0., 0.5))


class Test_NAllocation(LeafTestCase):

    def setUp(self):
        LeafTestCase.setUp(self)
        self.leaf.live.storage_n = 0.1
        self.leaf.live.metabolic_n = 0.2
        self.leaf.do_daily_initialisation(self.day)
        self.leaf.set_n_supply()

    def test_storage_first(self):
        allocation = BiomassAllocation(structural=0.01, retranslocation=0.05,
                                       reallocation=0.01)
        self.leaf.set_n_allocation(allocation)
        live = self.leaf.live
        self.assertAlmostEqual(live.structural_n, 3.01)
        self.assertAlmostEqual(live.storage_n, 0.069)
        self.assertAlmostEqual(live.metabolic_n, 0.171)
        self.assertAlmostEqual(self.leaf.allocated.storage_n, -0.06)

    def test_retranslocation_beyond_supply(self):
        self.assertRaises(exc.ConservationViolation, self.leaf.set_n_allocation,
                          BiomassAllocation(retranslocation=0.1))

    def test_reallocation_beyond_supply(self):
        self.assertRaises(exc.ConservationViolation, self.leaf.set_n_allocation,
                          BiomassAllocation(reallocation=0.02))


class Test_PotentialGrowth(LeafTestCase):

    def test_culm_expansion(self):
        leaf = self.leaf
        leaf.do_potential_growth(self.day, weather(self.day))
        # first leaf, 15 degree days with a phyllochron of 50
        expected = 0.3 * 50000. * exp(-0.03 * 10**2 + 0.0005 * (-10)**3) * 10. * 1e-6
        self.assertAlmostEqual(leaf.rates.DLTPOTLAI, expected)
        self.assertAlmostEqual(leaf.rates.DLTSTRESSEDLAI, expected)
        self.assertAlmostEqual(leaf.culms[0].leaf_no, 0.3)
        self.assertAlmostEqual(leaf.states.HEIGHT, 500.)
        self.assertEqual(leaf.radn, 20.)
        self.assertEqual(leaf.phase, "CANOPY_UPDATED")

    def test_rates_locked_afterwards(self):
        self.leaf.do_potential_growth(self.day, weather(self.day))
        with self.assertRaises(AttributeError):
            self.leaf.rates.DLTLAI = 1.


class Test_StressedExpansion(LeafTestCase):
    overrides = {"INITIALLAI": 200000., "EXPSTRESS": 1.5, "TILLERS": 1.5,
                 "TILLERSTARTLEAF": 1., "DLTTT": 50.}

    def runTest(self):
        leaf = self.leaf
        leaf.do_potential_growth(self.day, weather(self.day))
        self.assertAlmostEqual(leaf.rates.DLTSTRESSEDLAI, leaf.rates.DLTPOTLAI)
        self.assertEqual(len(leaf.culms), 2)
        leaf.do_potential_growth(self.day, weather(self.day))
        self.assertEqual(len(leaf.culms), 3)
        self.assertEqual(leaf.culms[2].proportion, 0.5)


class Test_Cover(LeafTestCase):

    def test_green_cover(self):
        self.leaf.do_actual_growth(self.day, weather(self.day))
        self.assertAlmostEqual(self.leaf.states.COVERGREEN, 1. - exp(-1.))
        self.assertAlmostEqual(self.leaf.states.SLN, 1.5)
        self.assertAlmostEqual(self.leaf.states.LAI, 2.)
        self.assertEqual(self.leaf.phase, "SENESCENCE_APPLIED")

    def test_derived_cover(self):
        leaf = self.leaf
        leaf.do_actual_growth(self.day, weather(self.day))
        self.assertEqual(leaf.cover_dead, 0.)
        self.assertAlmostEqual(leaf.cover_total, leaf.states.COVERGREEN)
        self.assertAlmostEqual(leaf.lai_total, 2.)


class Test_CoverBelowOne(LeafTestCase):
    overrides = {"INITIALLAI": 200000., "KEXT": 1000.}

    def runTest(self):
        self.leaf.do_actual_growth(self.day, weather(self.day))
        self.assertLess(self.leaf.states.COVERGREEN, 1.)


class Test_Senescence(LeafTestCase):

    def test_frost_kills_canopy(self):
        leaf = self.leaf
        drv = weather(self.day, RADN=1.5, TMIN=5.)
        leaf.do_potential_partitioning(self.day, drv)
        lai_eqlb = -log(2./1.5)/0.5
        self.assertAlmostEqual(leaf.rates.DLTSENLAILIGHT, (2. - lai_eqlb)/10.)
        self.assertEqual(leaf.rates.DLTSENLAIWATER, 0.)
        self.assertAlmostEqual(leaf.rates.DLTSENLAIFROST, 2.)
        # the largest loss counts, losses are not added
        self.assertAlmostEqual(leaf.rates.DLTSENLAI, 2.)

        leaf.do_actual_growth(self.day, drv)
        self.assertAlmostEqual(leaf.states.LAI, 0.)
        self.assertAlmostEqual(leaf.states.LAIDEAD, 2.)
        self.assertAlmostEqual(leaf.live.wt, 0.)
        self.assertAlmostEqual(leaf.dead.structural_wt, 2.)
        self.assertAlmostEqual(leaf.dead.structural_n, 3.)

    def test_partial_senescence(self):
        leaf = self.leaf
        leaf.live.storage_wt = 1.
        total = leaf.total
        drv = weather(self.day, RADN=1.5)
        leaf.do_potential_partitioning(self.day, drv)
        dltsenlai = (2. + log(2./1.5)/0.5)/10.
        self.assertAlmostEqual(leaf.rates.DLTSENLAI, dltsenlai)

        leaf.do_actual_growth(self.day, drv)
        self.assertAlmostEqual(leaf.senesced.wt, dltsenlai * 1.5)
        self.assertAlmostEqual(leaf.states.LAI, 2. - dltsenlai)
        self.assertAlmostEqual(leaf.states.SENESCEDLAI, dltsenlai)
        self.assertAlmostEqual(leaf.dead.wt, leaf.senesced.wt)
        self.assertAlmostEqual(leaf.total.wt, total.wt)
        self.assertAlmostEqual(leaf.total.n, total.n)
        # sub-pools senesce proportionally
        self.assertAlmostEqual(leaf.dead.storage_wt/leaf.dead.structural_wt, 0.5)

    def test_no_senescence_before_emergence(self):
        self.plant.is_emerged = False
        self.leaf.do_potential_partitioning(self.day, weather(self.day, TMIN=5.))
        self.assertEqual(self.leaf.rates.DLTSENLAI, 0.)


class Test_WaterStress(LeafTestCase):
    overrides = {"INITIALLAI": 300000., "SDRATIO": 0., "PHOTOSYNTHESIS": 10.}

    def runTest(self):
        leaf = self.leaf
        self.assertAlmostEqual(leaf.sd_ratio, 0.)
        leaf.do_potential_partitioning(self.day, weather(self.day))
        self.assertGreater(leaf.rates.DLTSENLAIWATER, 0.)
        self.assertEqual(leaf.rates.DLTSENLAILIGHT, 0.)
        self.assertEqual(leaf.rates.DLTSENLAI, leaf.rates.DLTSENLAIWATER)


class Test_RemoveBiomass(LeafTestCase):

    def runTest(self):
        leaf = self.leaf
        fractions = BiomassRemovalFractions(live_to_remove=0.25, live_to_residue=0.25)
        self.plant.remove_biomass(self.day, "harvest", {"Leaf": fractions})
        self.assertAlmostEqual(leaf.live.wt, 1.)
        self.assertAlmostEqual(leaf.removed.wt, 0.5)
        self.assertAlmostEqual(leaf.detached.wt, 0.5)
        self.assertAlmostEqual(self.som.MASS, 5.)
        self.assertAlmostEqual(leaf.states.LAI, 1.)
        self.assertAlmostEqual(leaf.states.SLN, 1.5)


class Test_PlantEnding(LeafTestCase):

    def runTest(self):
        leaf = self.leaf
        leaf.dead.add(Biomass(structural_wt=0.5, structural_n=0.01))
        wt, n = leaf.wt, leaf.n
        self.plant.end(self.day)
        self.assertAlmostEqual(self.som.MASS, wt * 10.)
        self.assertAlmostEqual(self.som.N, n * 10.)
        self.assertEqual(self.som.additions[0].organ_name, "Leaf")
        self.assertEqual(self.som.additions[0].crop_type, "sorghum")
        self.assertEqual(leaf.wt, 0.)
        self.assertAlmostEqual(leaf.detached.wt, wt)
        self.assertEqual(leaf.states.LAI, 0.)
        self.assertEqual(len(leaf.culms), 0)
        self.assertEqual(leaf.phase, "ENDED")

        # a dead organ ignores its daily phases
        leaf.do_daily_initialisation(self.day)
        leaf.set_dm_supply()
        leaf.set_dm_allocation(BiomassAllocation())
        self.assertEqual(leaf.dm_supply.total, 0.)
        self.assertEqual(leaf.phase, "ENDED")


class Test_OptionalProviders(LeafTestCase):

    def runTest(self):
        leaf = self.leaf
        self.assertIsNone(leaf.max_nconc)
        self.assertEqual(leaf.temperature_stress, 1.)
        self.assertEqual(leaf.water_demand, 0.)
        leaf.water_demand = 4.
        self.assertEqual(leaf.water_demand, 4.)
        self.assertGreater(leaf.nitrogen_stress, 0.)


def suite():
    """ This defines all the tests of a module"""
    suite = unittest.TestSuite()
    loader = unittest.TestLoader()
    for test_class in [Test_Construction, Test_Sowing, Test_Supply, Test_NegativeSupply,
                       Test_DMAllocation, Test_NAllocation, Test_PotentialGrowth,
                       Test_StressedExpansion, Test_Cover, Test_CoverBelowOne,
                       Test_Senescence, Test_WaterStress,
                       Test_RemoveBiomass, Test_PlantEnding, Test_OptionalProviders]:
        suite.addTests(loader.loadTestsFromTestCase(test_class))
    return suite

if __name__ == '__main__':
    unittest.TextTestRunner(verbosity=2).run(suite())
