# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
import datetime
import unittest

from ..base import VariableKiosk
from ..crop import SorghumLeaf, Plant
from ..crop.biomass import BiomassSupply, BiomassDemand
from ..soil import SurfaceOrganicMatter, RootWater
from ..engine import OrganEngine, SimpleArbitrator, run_organ_day, DAILY_PHASES, ARBITRATION
from .. import exceptions as exc
from .leaf_inputs import leaf_parameters, weather, weather_provider


class PhaseRecorder(object):
    """Organ stand-in that records the phases called on it."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, args))
        return record


class RecordingArbitrator(object):
    dm_potential_allocation = "potential DM"
    dm_allocation = "DM"
    n_allocation = "N"

    def arbitrate(self, organ):
        organ.calls.append((ARBITRATION, ()))


class Test_RunOrganDay(unittest.TestCase):

    def runTest(self):
        organ = PhaseRecorder()
        day = datetime.date(2020, 1, 1)
        drv = weather(day)
        run_organ_day(organ, RecordingArbitrator(), day, drv)

        self.assertEqual([name for name, args in organ.calls], DAILY_PHASES)
        calls = dict(organ.calls)
        self.assertEqual(calls["do_daily_initialisation"], (day,))
        self.assertEqual(calls["set_dm_supply"], ())
        self.assertEqual(calls["set_dm_potential_allocation"], ("potential DM",))
        self.assertEqual(calls["set_dm_allocation"], ("DM",))
        self.assertEqual(calls["set_n_allocation"], ("N",))
        self.assertEqual(calls["do_actual_growth"], (day, drv))


class OrganStub(object):
    water_allocation = 0.

    def __init__(self, dm_supply, dm_demand, n_supply, n_demand, water_demand=0.):
        self.dm_supply = dm_supply
        self.dm_demand = dm_demand
        self.n_supply = n_supply
        self.n_demand = n_demand
        self.water_demand = water_demand


class Test_SimpleArbitrator(unittest.TestCase):

    def setUp(self):
        self.arbitrator = SimpleArbitrator(VariableKiosk(), n_uptake=0.03)
        self.organ = OrganStub(BiomassSupply(reallocation=0.3, retranslocation=0.5, fixation=1.),
                               BiomassDemand(structural=2., storage=1.),
                               BiomassSupply(reallocation=0.012, retranslocation=0.081),
                               BiomassDemand(structural=0.05, metabolic=0.01),
                               water_demand=3.)

    def test_dry_matter(self):
        self.arbitrator.arbitrate(self.organ)
        potential = self.arbitrator.dm_potential_allocation
        self.assertEqual(potential.as_tuple(), (1., 0., 0.))
        dm = self.arbitrator.dm_allocation
        self.assertAlmostEqual(dm.structural, 1.8)
        self.assertAlmostEqual(dm.reallocation, 0.3)
        self.assertAlmostEqual(dm.retranslocation, 0.5)
        self.assertEqual(dm.storage, 0.)

    def test_nitrogen(self):
        self.arbitrator.arbitrate(self.organ)
        n = self.arbitrator.n_allocation
        self.assertAlmostEqual(n.reallocation, 0.012)
        self.assertAlmostEqual(n.retranslocation, 0.018)
        self.assertAlmostEqual(n.structural, 0.05)
        self.assertAlmostEqual(n.metabolic, 0.01)

    def test_water(self):
        self.arbitrator.water_supply = 2.
        self.arbitrator.arbitrate(self.organ)
        self.assertEqual(self.organ.water_allocation, 2.)
        self.arbitrator.water_supply = 5.
        self.arbitrator.arbitrate(self.organ)
        self.assertEqual(self.organ.water_allocation, 3.)


class EngineTestCase(unittest.TestCase):

    start = datetime.date(2020, 1, 1)

    def setUp(self):
        self.kiosk = VariableKiosk()
        self.plant = Plant(self.kiosk)
        self.som = SurfaceOrganicMatter(self.kiosk)
        self.root = RootWater(self.kiosk, capacity=100., initial=50.)
        self.arbitrator = SimpleArbitrator(self.kiosk, n_uptake=0.1)
        parvalues = leaf_parameters(DMFIXATION=3., TILLERS=1.5, DLTLAIF=0.01)
        self.leaf = SorghumLeaf(self.start, self.kiosk, parvalues, plant=self.plant,
                                arbitrator=self.arbitrator, root=self.root,
                                surface_organic_matter=self.som)
        self.wdp = weather_provider(self.start, 60)

    def tearDown(self):
        self.leaf._delete()

    def make_engine(self, events):
        return OrganEngine(self.kiosk, self.leaf, self.arbitrator, self.wdp, self.start,
                           plant=self.plant, root=self.root, events=events)

    def day(self, i):
        return self.start + datetime.timedelta(days=i - 1)


class Test_Season(EngineTestCase):

    def setUp(self):
        EngineTestCase.setUp(self)
        events = {self.day(1): [("sow", {"population": 10.})],
                  self.day(5): [("change_phase", {"stage_name": "emergence"})],
                  self.day(40): [("end", {})]}
        self.engine = self.make_engine(events)

    def runTest(self):
        engine = self.engine
        leaf = self.leaf
        engine.run(39)

        output = engine.get_output()
        self.assertEqual(len(output), 39)
        self.assertEqual(output[0]["phase"], "ALLOCATION_APPLIED")
        self.assertEqual(output[-1]["phase"], "SENESCENCE_APPLIED")
        self.assertEqual(output[-1]["day"], self.day(39))

        # main culm and one and a half tillers
        self.assertEqual(len(leaf.culms), 3)
        self.assertEqual(leaf.culms[2].proportion, 0.5)
        self.assertAlmostEqual(leaf.culms[0].leaf_no, 35 * 0.3)

        # fixation covers the demand, storage accumulates
        self.assertAlmostEqual(leaf.live.structural_wt, 2. + 39 * 2.)
        self.assertAlmostEqual(leaf.live.storage_wt, 39.)
        self.assertAlmostEqual(output[-1]["WT"], leaf.wt)
        self.assertAlmostEqual(output[-1]["LAI"], 0.002 + 35 * 0.01)
        self.assertEqual(self.arbitrator.water_supply, 50.)
        self.assertEqual(self.root.water, 50.)

        wt = leaf.wt
        engine.run(1)
        self.assertAlmostEqual(self.som.MASS, wt * 10.)
        self.assertEqual(leaf.wt, 0.)
        self.assertEqual(engine.get_output()[-1]["phase"], "ENDED")
        self.assertFalse(self.plant.is_alive)


class Test_Terminate(EngineTestCase):

    def runTest(self):
        events = {self.day(1): [("sow", {"population": 10.})],
                  self.day(3): [("terminate", {})]}
        engine = self.make_engine(events)
        engine.run(10)
        self.assertTrue(engine.flag_terminate)
        self.assertEqual(len(engine.get_output()), 2)


class Test_RunTillTerminate(EngineTestCase):

    def runTest(self):
        engine = self.make_engine({self.day(1): [("sow", {"population": 10.})]})
        engine.run_till_terminate()
        self.assertEqual(len(engine.get_output()), 60)

        engine = self.make_engine({})
        engine.run_till(self.day(5))
        self.assertEqual(len(engine.get_output()), 4)
        engine.run_till(self.day(2))
        self.assertEqual(len(engine.get_output()), 4)


class Test_InvalidEvents(EngineTestCase):

    def test_unknown_action(self):
        engine = self.make_engine({self.start: [("irrigate", {})]})
        self.assertRaises(exc.LeafSimError, engine.run, 1)

    def test_event_without_plant(self):
        engine = OrganEngine(self.kiosk, self.leaf, self.arbitrator, self.wdp, self.start,
                             events={self.start: [("sow", {"population": 10.})]})
        self.assertRaises(exc.LeafSimError, engine.run, 1)


class Test_Weather(unittest.TestCase):

    def runTest(self):
        start = datetime.date(2020, 1, 1)
        wdp = weather_provider(start, 3)
        self.assertEqual(len(wdp), 3)
        self.assertEqual(wdp.first_date, start)
        self.assertEqual(wdp.last_date, datetime.date(2020, 1, 3))
        self.assertEqual(wdp(datetime.datetime(2020, 1, 2, 12)).TEMP, 22.5)
        self.assertRaises(exc.WeatherDataProviderError, wdp, datetime.date(2020, 1, 4))
        self.assertRaises(exc.WeatherDataProviderError, weather, start, RADN=50.)


class Test_Collaborators(unittest.TestCase):

    def test_root_water(self):
        root = RootWater(VariableKiosk(), capacity=100., initial=50.)
        root.update(rain=80., transpiration=5.)
        self.assertEqual(root.total_extractable_water(), 100.)
        root.update(transpiration=150.)
        self.assertEqual(root.total_extractable_water(), 0.)

    def test_residues(self):
        som = SurfaceOrganicMatter(VariableKiosk())
        som.add(100., 2., 0.25, "sorghum", "Leaf")
        self.assertEqual(som.STANDING, 25.)
        self.assertEqual(som.LYING, 75.)
        self.assertRaises(exc.ConservationViolation, som.add, -1., 0., 0., "sorghum", "Leaf")
        self.assertRaises(exc.ParameterError, som.add, 1., 0., 1.5, "sorghum", "Leaf")


def suite():
    """ This defines all the tests of a module"""
    suite = unittest.TestSuite()
    loader = unittest.TestLoader()
    for test_class in [Test_RunOrganDay, Test_SimpleArbitrator, Test_Season,
                       Test_Terminate, Test_RunTillTerminate, Test_InvalidEvents,
                       Test_Weather, Test_Collaborators]:
        suite.addTests(loader.loadTestsFromTestCase(test_class))
    return suite

if __name__ == '__main__':
    unittest.TextTestRunner(verbosity=2).run(suite())
