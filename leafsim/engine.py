# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""The engine drives an organ through its daily phases.

Each simulated day the organ reports its supply and demand, an arbitrator
divides the available dry matter and nitrogen, the organ applies the
arbitrated allocations and finally develops its canopy. The order of the
phases is fixed and given by `DAILY_PHASES`; `run_organ_day()` fires them for
a single day, `OrganEngine` adds the daily loop over a weather provider,
plant lifecycle events and output.
"""
import datetime
import logging

from .traitlets import HasTraits, Instance, Bool, List, Dict, Float, Any
from .base import (VariableKiosk, WeatherDataProvider, AncillaryObject,
                   SimulationObject, DispatcherObject)
from .crop.biomass import BiomassDemand, BiomassAllocation
from . import signals
from . import exceptions as exc

# name of the external arbitration step between demand and allocation
ARBITRATION = "arbitrate"

DAILY_PHASES = ["do_daily_initialisation",
                "set_dm_supply",
                "set_n_supply",
                "set_dm_demand",
                "set_n_demand",
                ARBITRATION,
                "set_dm_potential_allocation",
                "set_dm_allocation",
                "set_n_allocation",
                "do_potential_growth",
                "do_potential_partitioning",
                "do_actual_growth"]

# allocation phases and the arbitrator attribute holding their input
_ALLOCATIONS = {"set_dm_potential_allocation": "dm_potential_allocation",
                "set_dm_allocation": "dm_allocation",
                "set_n_allocation": "n_allocation"}


def run_organ_day(organ, arbitrator, day, drv):
    """Fires the daily phases of `organ` in the order of DAILY_PHASES.

    :param organ: the organ, e.g. a SorghumLeaf
    :param arbitrator: object with an `arbitrate(organ)` method that sets
        `dm_potential_allocation`, `dm_allocation` and `n_allocation`
    :param day: the simulated day
    :param drv: WeatherDataContainer for the day

    Violations of the biomass balance propagate to the caller, pool changes
    made before the violation are not rolled back.
    """
    for phase in DAILY_PHASES:
        if phase == ARBITRATION:
            arbitrator.arbitrate(organ)
            continue

        method = getattr(organ, phase)
        if phase == "do_daily_initialisation":
            method(day)
        elif phase in _ALLOCATIONS:
            method(getattr(arbitrator, _ALLOCATIONS[phase]))
        elif phase.startswith("do_"):
            method(day, drv)
        else:
            method()


class SimpleArbitrator(AncillaryObject):
    """Supply-limited arbitration of dry matter, nitrogen and water for a
    single organ.

    Dry matter: fixation is first used for structural, then metabolic and
    storage demand. A structural shortfall is covered by reallocation and
    then by retranslocation from the organ's own supply.

    Nitrogen: soil uptake (`n_uptake`, g/m2/d) is divided over structural,
    metabolic and storage demand. A structural or metabolic shortfall is
    covered by reallocation and then by retranslocation.

    Water: the organ sets `water_supply`, the water allocation is the
    smallest of supply and the organ's water demand.
    """

    n_uptake = Float(0.)
    water_supply = Float(0.)
    water_allocation = Float(0.)
    dm_potential_allocation = Instance(BiomassDemand)
    dm_allocation = Instance(BiomassAllocation)
    n_allocation = Instance(BiomassAllocation)

    def initialize(self, kiosk, n_uptake=0.):
        self.n_uptake = n_uptake
        self.dm_potential_allocation = BiomassDemand()
        self.dm_allocation = BiomassAllocation()
        self.n_allocation = BiomassAllocation()

    def arbitrate(self, organ):
        self.dm_potential_allocation, self.dm_allocation = \
            self._arbitrate_dm(organ.dm_supply, organ.dm_demand)
        self.n_allocation = self._arbitrate_n(organ.n_supply, organ.n_demand)

        self.water_allocation = min(self.water_supply, organ.water_demand)
        organ.water_allocation = self.water_allocation

        msg = "Arbitrated DM %s and N %s" % (self.dm_allocation, self.n_allocation)
        self.logger.debug(msg)

    @staticmethod
    def _arbitrate_dm(supply, demand):
        available = supply.fixation
        structural = min(demand.structural, available)
        metabolic = min(demand.metabolic, available - structural)
        storage = min(demand.storage, available - structural - metabolic)
        potential = BiomassDemand(structural, metabolic, storage)

        shortfall = demand.structural - structural
        reallocation = min(shortfall, supply.reallocation)
        retranslocation = min(shortfall - reallocation, supply.retranslocation)
        allocation = BiomassAllocation(structural=structural + reallocation + retranslocation,
                                       metabolic=metabolic, storage=storage,
                                       retranslocation=retranslocation,
                                       reallocation=reallocation)
        return potential, allocation

    def _arbitrate_n(self, supply, demand):
        available = self.n_uptake
        structural = min(demand.structural, available)
        metabolic = min(demand.metabolic, available - structural)
        storage = min(demand.storage, available - structural - metabolic)

        shortfall = (demand.structural - structural) + (demand.metabolic - metabolic)
        reallocation = max(0., min(shortfall, supply.reallocation))
        retranslocation = max(0., min(shortfall - reallocation, supply.retranslocation))

        # remobilised N goes to structural demand first
        remobilised = reallocation + retranslocation
        to_structural = min(remobilised, demand.structural - structural)
        structural += to_structural
        metabolic += remobilised - to_structural

        return BiomassAllocation(structural=structural, metabolic=metabolic,
                                 storage=storage, retranslocation=retranslocation,
                                 reallocation=reallocation)


class OrganEngine(HasTraits, DispatcherObject):
    """Simulation engine running a single organ with its collaborators.

    :param kiosk: VariableKiosk shared by the organ and its collaborators
    :param organ: the organ SimulationObject, e.g. a SorghumLeaf
    :param arbitrator: a SimpleArbitrator or an object with the same interface
    :param weatherdataprovider: WeatherDataProvider for the simulation period
    :param start_date: first day to simulate
    :param plant: the Plant receiving the lifecycle `events`
    :param root: collaborator with an `update(rain, transpiration)` method
    :param events: dict mapping a date to a list of (action, keywords) pairs,
        actions are 'sow', 'change_phase', 'remove_biomass', 'end' and
        'terminate'
    :param output_vars: organ variables stored each day, see `get_output()`

    example::

        >>> engine = OrganEngine(kiosk, leaf, arbitrator, wdp, date(2020, 1, 1),
        ...                      plant=plant, events={
        ...     date(2020, 1, 1): [("sow", {"population": 10.})],
        ...     date(2020, 1, 5): [("change_phase", {"stage_name": "emergence"})]})
        >>> engine.run(30)
        >>> output = engine.get_output()
    """

    kiosk = Instance(VariableKiosk)
    organ = Instance(SimulationObject)
    arbitrator = Instance(AncillaryObject)
    weatherdataprovider = Instance(WeatherDataProvider)
    plant = Any()
    root = Any()
    day = Instance(datetime.date)
    drv = None

    flag_terminate = Bool(False)
    events = Dict()
    output_vars = List()
    _saved_output = List()

    default_output_vars = ["LAI", "LAIDEAD", "SLN", "HEIGHT", "COVERGREEN",
                           "DLTLAI", "DLTSENLAI"]

    def __init__(self, kiosk, organ, arbitrator, weatherdataprovider, start_date,
                 plant=None, root=None, events=None, output_vars=None):
        HasTraits.__init__(self)

        self.kiosk = kiosk
        self.organ = organ
        self.arbitrator = arbitrator
        self.weatherdataprovider = weatherdataprovider
        self.plant = plant
        self.root = root
        self.day = start_date
        self.events = dict(events) if events is not None else {}
        self.output_vars = list(output_vars) if output_vars is not None \
            else list(self.default_output_vars)
        self._saved_output = list()

        self._connect_signal(self._on_TERMINATE, signal=signals.terminate)

    @property
    def logger(self):
        loggername = "%s.%s" % (self.__class__.__module__,
                                self.__class__.__name__)
        return logging.getLogger(loggername)

    def _on_TERMINATE(self):
        """Sets the variable 'flag_terminate' to True when the signal TERMINATE
        was received.
        """
        self.flag_terminate = True

    def _handle_events(self, day):
        for action, keywords in self.events.get(day, []):
            if action == "terminate":
                self._send_signal(signal=signals.terminate)
                continue
            if self.plant is None:
                msg = "Event '%s' on %s requires a plant." % (action, day)
                raise exc.LeafSimError(msg)
            if action not in ("sow", "change_phase", "remove_biomass", "end"):
                msg = "Unknown plant event '%s' on %s." % (action, day)
                raise exc.LeafSimError(msg)
            getattr(self.plant, action)(day, **keywords)

    def _run(self):
        """Simulates one day."""
        day = self.day
        self._handle_events(day)
        if self.flag_terminate:
            return

        self.drv = self.weatherdataprovider(day)
        run_organ_day(self.organ, self.arbitrator, day, self.drv)
        if self.root is not None:
            rain = getattr(self.drv, "RAIN", 0.)
            self.root.update(rain, self.organ.transpiration)
        self._save_output(day)

        self.day = day + datetime.timedelta(days=1)

    def run(self, days=1):
        """Advances the system state with given number of days"""

        days_done = 0
        while (days_done < days) and (self.flag_terminate is False):
            days_done += 1
            self._run()

    def run_till_terminate(self):
        """Runs the system until a terminate signal is sent or the weather
        runs out."""

        while self.flag_terminate is False and \
                self.day <= self.weatherdataprovider.last_date:
            self._run()

    def run_till(self, rday):
        """Runs the system until rday is reached."""

        if rday <= self.day:
            msg = "Date to run till is before or on the current date."
            self.logger.warning(msg)
            return
        self.run(days=(rday - self.day).days)

    def _save_output(self, day):
        """Appends selected organ variables to self._saved_output for this day.
        """
        states = {"day": day, "phase": self.organ.phase, "WT": self.organ.wt}
        for var in self.output_vars:
            states[var] = self.organ.get_variable(var)
        self._saved_output.append(states)

    def get_output(self):
        """Returns the variables that have been stored during the simulation as a
        list of dicts in chronological order."""

        return self._saved_output
