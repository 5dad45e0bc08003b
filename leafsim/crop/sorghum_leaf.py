# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from math import exp

from ..traitlets import Float, Unicode, Bool, Instance, List, Any, FunctionTrait
from ..decorators import prepare_rates, prepare_states
from ..base import ParamTemplate, StatesTemplate, RatesTemplate, SimulationObject
from ..util import limit, divide, is_greater_than, smm2sm, gm2kgha
from ..settings import settings
from .. import signals
from .. import exceptions as exc
from .biomass import Biomass, BiomassSupply, BiomassDemand
from .culm import Culm, CulmParameters, tillers_due
from .senescence import LeafSenescence, frost_senescence


class SorghumLeaf(SimulationObject):
    """Dry matter, nitrogen and leaf area dynamics of a sorghum leaf.

    The leaf takes part in the daily arbitration of the plant: it reports its
    supply and demand of dry matter (DM) and nitrogen (N), receives the
    arbitrated allocations and then develops its canopy. Potential leaf area
    growth is the sum of the expansion of the individual culms, reduced by an
    expansion stress. Actual leaf area growth is given by a partitioning
    function that reconciles carbon availability with potential growth.

    Leaf area senesces through light competition, water deficit or frost,
    whichever of the three demands the largest loss. The senescing leaf area
    is converted into biomass with today's specific leaf area and moved from
    the live to the dead pool, proportionally for all sub-pools.

    The daily phases must be called in the order listed in
    `leafsim.engine.DAILY_PHASES`.

    **Simulation parameters**

    ==============  ============================================== =======
     Name            Description                                    Unit
    ==============  ============================================== =======
    INITIALWT       Initial leaf dry weight per plant               g
    INITIALLAI      Initial leaf area per plant                     mm2
    INITIALSLN      Initial specific leaf nitrogen                  |g m-2|
    SENRATE         Senescence rate (provider)                      |d-1|
    DMREALLOCF      DM reallocation factor (provider)               |d-1|
    DMRETRANSF      DM retranslocation factor (provider)            |d-1|
    NREALLOCF       N reallocation factor (provider)                |d-1|
    NRETRANSF       N retranslocation factor (provider)             |d-1|
    DMFIXATION      DM fixation supply (optional provider)          |g m-2 d-1|
    DMDEMSTRUCT     Structural DM demand (provider)                 |g m-2 d-1|
    DMDEMSTORE      Storage DM demand (provider)                    |g m-2 d-1|
    NDEMSTRUCT      Structural N demand (provider)                  |g m-2 d-1|
    NDEMMETAB       Metabolic N demand (provider)                   |g m-2 d-1|
    NDEMSTORE       Storage N demand (provider)                     |g m-2 d-1|
    KEXT            Extinction coefficient green leaf (provider)    -
    KDEAD           Extinction coefficient dead leaf               -
    HEIGHTF         Canopy height (provider)                        mm
    DLTLAIF         Actual leaf area growth (provider)              |m2 m-2 d-1|
    EXPSTRESS       Leaf expansion stress factor (provider)         -
    PHOTOSYNTHESIS  DM production from radiation (provider)         |g m-2 d-1|
    POTBIOMASSTE    DM production limited by transpiration          |g m-2 d-1|
                    (provider)
    DLTTT           Daily thermal time (provider)                   |C| d
    TEMPSTRESS      Temperature stress (optional provider)          -
    SDRATIO         Water supply/demand ratio (optional provider)   -
    LAIDEADF        Dead leaf area index (optional provider)        |m2 m-2|
    WATERDEMAND     Water demand (optional provider)                mm
    MAXNCONC        Maximum N concentration (optional provider)     |g g-1|
    MINNCONC        Minimum N concentration (optional provider)     |g g-1|
    CRITNCONC       Critical N concentration (optional provider)    |g g-1|
    SENRADNCRIT     Critical radiation for light senescence         |MJ m-2 d-1|
    SENLIGHTTC      Time constant of light senescence               d
    SENWATERTC      Time constant of water senescence               d
    SENTHRESHOLD    Supply/demand ratio for onset of water          -
                    senescence
    FROSTKILL       Minimum temperature killing all leaf area       |C|
    LEAFINITSTAGE   Stage at which the main culm is created         -
    PHYLLOCHRON     Thermal time between two leaves                 |C| d
    FINALLEAFNO     Final leaf number of the main culm              -
    AMAX            Area of the largest leaf                        mm2
    X0              Position of the largest leaf                    -
    BELLA, BELLB    Coefficients of the leaf size curve             -
    TILLERS         Number of fertile tillers                       -
    TILLERSTARTLEAF Main culm leaf at which the first tiller        -
                    appears
    TILLERVADJ      Vertical leaf position adjustment of tillers    -
    ==============  ============================================== =======

    **State variables**

    =============  ================================================= ==== ==========
     Name           Description                                       Pbl  Unit
    =============  ================================================= ==== ==========
    LAI            Leaf area index of green leaves                    Y   |m2 m-2|
    LAIDEAD        Leaf area index of dead leaves                     N   |m2 m-2|
    SLN            Specific leaf nitrogen                             Y   |g m-2|
    HEIGHT         Canopy height                                      Y   mm
    COVERGREEN     Fractional cover of green leaves                   Y   -
    SENESCEDLAI    Accumulated senesced leaf area index               N   |m2 m-2|
    LOSSEXPSTRESS  Accumulated leaf area lost by expansion stress     N   |m2 m-2|
    =============  ================================================= ==== ==========

    **Rate variables**

    ==============  ================================================ ==== =============
     Name            Description                                      Pbl  Unit
    ==============  ================================================ ==== =============
    DLTPOTLAI       Potential leaf area growth                        N   |m2 m-2 d-1|
    DLTSTRESSEDLAI  Stressed leaf area growth                         N   |m2 m-2 d-1|
    DLTLAI          Actual leaf area growth                           N   |m2 m-2 d-1|
    DLTSENLAI       Senesced leaf area                                N   |m2 m-2 d-1|
    DLTSENLAILIGHT  Leaf area senesced by light competition           N   |m2 m-2 d-1|
    DLTSENLAIWATER  Leaf area senesced by water deficit               N   |m2 m-2 d-1|
    DLTSENLAIFROST  Leaf area senesced by frost                       N   |m2 m-2 d-1|
    BIOMASSRUE      DM production from radiation                      N   |g m-2 d-1|
    BIOMASSTE       DM production limited by transpiration            N   |g m-2 d-1|
    ==============  ================================================ ==== =============

    **Signals send or handled**

    `SorghumLeaf` receives the following signals:
        * CROP_START: sows the leaf with the given population.
        * PHASE_CHANGED: creates the main culm at stage `LEAFINITSTAGE`.
        * CROP_FINISH: hands live and dead biomass to the surface organic
          matter and clears the organ.
        * REMOVE_BIOMASS: removes biomass following the removal fractions
          for this organ.

    **External dependencies:**

    ==========================  ===========================================
     Collaborator                Used for
    ==========================  ===========================================
    plant                       `is_alive`, `is_emerged`, `crop_type`
    arbitrator                  receives `water_supply`
    root                        `total_extractable_water()`
    surface_organic_matter      `add()` of residues at plant ending
    ==========================  ===========================================
    """

    default_parameters = {"SENRADNCRIT": 2., "SENLIGHTTC": 10., "SENWATERTC": 10.,
                          "SENTHRESHOLD": 0.25, "FROSTKILL": 10., "KDEAD": 0.4,
                          "LEAFINITSTAGE": "emergence", "BELLA": -0.03,
                          "BELLB": 0.0005, "TILLERS": 0., "TILLERSTARTLEAF": 3.,
                          "TILLERVADJ": 0.}

    name = Unicode("Leaf")
    phase = Unicode("UNINITIALIZED")

    live = Instance(Biomass)
    dead = Instance(Biomass)
    start_live = Instance(Biomass)
    allocated = Instance(Biomass)
    senesced = Instance(Biomass)
    detached = Instance(Biomass)
    removed = Instance(Biomass)

    dm_supply = Instance(BiomassSupply)
    n_supply = Instance(BiomassSupply)
    dm_demand = Instance(BiomassDemand)
    n_demand = Instance(BiomassDemand)
    dm_potential_allocation = Instance(BiomassDemand)

    culms = List()
    culm_shape = Instance(CulmParameters)
    senescence = Instance(LeafSenescence)
    sowing_density = Float(0.)
    leaf_initialised = Bool(False)
    water_allocation = Float(0.)
    radn = Float(0.)

    plant = Any()
    arbitrator = Any()
    root = Any()
    surface_organic_matter = Any()

    class Parameters(ParamTemplate):
        INITIALWT = Float()
        INITIALLAI = Float()
        INITIALSLN = Float()
        SENRATE = FunctionTrait()
        DMREALLOCF = FunctionTrait()
        DMRETRANSF = FunctionTrait()
        NREALLOCF = FunctionTrait()
        NRETRANSF = FunctionTrait()
        DMFIXATION = FunctionTrait().tag(optional=True)
        DMDEMSTRUCT = FunctionTrait()
        DMDEMSTORE = FunctionTrait()
        NDEMSTRUCT = FunctionTrait()
        NDEMMETAB = FunctionTrait()
        NDEMSTORE = FunctionTrait()
        KEXT = FunctionTrait()
        KDEAD = Float()
        HEIGHTF = FunctionTrait()
        DLTLAIF = FunctionTrait()
        EXPSTRESS = FunctionTrait()
        PHOTOSYNTHESIS = FunctionTrait()
        POTBIOMASSTE = FunctionTrait()
        DLTTT = FunctionTrait()
        TEMPSTRESS = FunctionTrait().tag(optional=True)
        SDRATIO = FunctionTrait().tag(optional=True)
        LAIDEADF = FunctionTrait().tag(optional=True)
        WATERDEMAND = FunctionTrait().tag(optional=True)
        MAXNCONC = FunctionTrait().tag(optional=True)
        MINNCONC = FunctionTrait().tag(optional=True)
        CRITNCONC = FunctionTrait().tag(optional=True)
        SENRADNCRIT = Float()
        SENLIGHTTC = Float()
        SENWATERTC = Float()
        SENTHRESHOLD = Float()
        FROSTKILL = Float()
        LEAFINITSTAGE = Unicode()
        PHYLLOCHRON = Float()
        FINALLEAFNO = Float()
        AMAX = Float()
        X0 = Float()
        BELLA = Float()
        BELLB = Float()
        TILLERS = Float()
        TILLERSTARTLEAF = Float()
        TILLERVADJ = Float()

    class StateVariables(StatesTemplate):
        LAI = Float()
        LAIDEAD = Float()
        SLN = Float()
        HEIGHT = Float()
        COVERGREEN = Float()
        SENESCEDLAI = Float()
        LOSSEXPSTRESS = Float()

    class RateVariables(RatesTemplate):
        DLTPOTLAI = Float()
        DLTSTRESSEDLAI = Float()
        DLTLAI = Float()
        DLTSENLAI = Float()
        DLTSENLAILIGHT = Float()
        DLTSENLAIWATER = Float()
        DLTSENLAIFROST = Float()
        BIOMASSRUE = Float()
        BIOMASSTE = Float()

    def initialize(self, day, kiosk, parvalues, plant=None, arbitrator=None,
                   root=None, surface_organic_matter=None, name="Leaf"):
        """
        :param day: start date of the simulation
        :param kiosk: variable kiosk of this LeafSim instance
        :param parvalues: dictionary providing parameters as key/value pairs,
            missing parameters listed in `default_parameters` take their
            default value
        :param plant: plant lifecycle collaborator
        :param arbitrator: arbitrator receiving the water supply
        :param root: root collaborator providing the extractable water
        :param surface_organic_matter: residue collaborator
        :param name: name of the organ used in messages and residues
        """

        pv = dict(self.default_parameters)
        pv.update(parvalues)
        self.params = self.Parameters(pv)
        self.name = name

        self.plant = plant
        self.arbitrator = arbitrator
        self.root = root
        self.surface_organic_matter = surface_organic_matter

        self.states = self.StateVariables(kiosk, publish=["LAI", "COVERGREEN", "HEIGHT", "SLN"],
                                          LAI=0., LAIDEAD=0., SLN=0., HEIGHT=0., COVERGREEN=0.,
                                          SENESCEDLAI=0., LOSSEXPSTRESS=0.)
        self.rates = self.RateVariables(kiosk)

        p = self.params
        self.culm_shape = CulmParameters(p.PHYLLOCHRON, p.FINALLEAFNO, p.AMAX, p.X0,
                                         p.BELLA, p.BELLB)
        self.senescence = LeafSenescence(light_days=10, water_days=10, sd_ratio_days=5)
        self._water_demand = 0.

        self.dm_supply = BiomassSupply()
        self.n_supply = BiomassSupply()
        self.dm_demand = BiomassDemand()
        self.n_demand = BiomassDemand()
        self.dm_potential_allocation = BiomassDemand()
        self._clear_pools()

        self._connect_signal(self._on_CROP_START, signals.crop_start)
        self._connect_signal(self._on_PHASE_CHANGED, signals.phase_changed)
        self._connect_signal(self._on_CROP_FINISH, signals.crop_finish)
        self._connect_signal(self._on_REMOVE_BIOMASS, signals.remove_biomass)

    #---------------------------------------------------------------------------
    # Lifecycle
    #---------------------------------------------------------------------------
    def _enter_phase(self, phase):
        if phase != self.phase:
            self.logger.debug("%s: phase %s -> %s" % (self.name, self.phase, phase))
        self.phase = phase

    def _on_CROP_START(self, day, crop_type=None, population=None):
        if population is None:
            msg = "Sowing of organ %s requires a population." % self.name
            raise exc.ParameterError(msg)
        self._sow(day, population)

    def _on_PHASE_CHANGED(self, day, stage_name=None):
        if stage_name != self.params.LEAFINITSTAGE:
            return
        self.leaf_initialised = True
        if not self.culms:
            # first culm is the main culm
            self.add_culm(Culm(0, 1., 0., 0., self.sowing_density, self.culm_shape))

    def _on_CROP_FINISH(self, day):
        self.do_plant_ending(day)

    def _on_REMOVE_BIOMASS(self, day, removal_type=None, fractions=None):
        if fractions is None or self.name not in fractions:
            return
        self.logger.info("%s: %s on %s" % (self.name, removal_type, day))
        self.remove_biomass(fractions[self.name])

    def add_culm(self, culm):
        """Adds a culm, its density is set to the sowing density."""
        culm.density = self.sowing_density
        self.culms.append(culm)
        self.logger.info("%s: added culm %i with proportion %.2f" %
                         (self.name, culm.culm_number, culm.proportion))

    def _clear_pools(self):
        self.live = Biomass()
        self.dead = Biomass()
        self.start_live = Biomass()
        self.allocated = Biomass()
        self.senesced = Biomass()
        self.detached = Biomass()
        self.removed = Biomass()
        for record in [self.dm_supply, self.n_supply, self.dm_demand, self.n_demand,
                       self.dm_potential_allocation]:
            record.clear()
        self.culms = []
        self.leaf_initialised = False
        self.senescence.reset()

    def _zero_states(self):
        s = self.states
        s.LAI = s.LAIDEAD = s.SLN = s.HEIGHT = s.COVERGREEN = 0.
        s.SENESCEDLAI = s.LOSSEXPSTRESS = 0.

    @prepare_states
    def _sow(self, day, population):
        p = self.params
        s = self.states

        self._clear_pools()
        self._zero_states()
        self.sowing_density = population

        s.LAI = p.INITIALLAI * smm2sm * population
        s.SLN = p.INITIALSLN
        s.COVERGREEN = self._green_cover(s.LAI)
        self.live.structural_wt = p.INITIALWT * population
        self.live.structural_n = s.LAI * s.SLN
        self.start_live = self.live.copy()

        self._enter_phase("SOWN")
        self.logger.info("%s: sown on %s with %.2f plants/m2" % (self.name, day, population))

    @prepare_states
    def _clear(self):
        self._clear_pools()
        self._zero_states()

    def do_plant_ending(self, day):
        """Hands live and dead biomass to the surface organic matter (kg/ha)
        and clears the organ.
        """
        detached = self.detached + self.live + self.dead
        if self.wt > 0. and self.surface_organic_matter is not None:
            self.surface_organic_matter.add(self.wt * gm2kgha, self.n * gm2kgha, 0.,
                                            self.crop_type, self.name)
        self._clear()
        self.detached = detached
        self._enter_phase("ENDED")

    @prepare_states
    def remove_biomass(self, fractions):
        """Removes live and dead biomass following `fractions`, a
        BiomassRemovalFractions object. Removed biomass leaves the system,
        detached biomass goes to the surface organic matter.
        """
        s = self.states

        live_removed = self.live * fractions.live_to_remove
        live_detached = self.live * fractions.live_to_residue
        dead_removed = self.dead * fractions.dead_to_remove
        dead_detached = self.dead * fractions.dead_to_residue

        self.live.subtract(live_removed + live_detached)
        self.dead.subtract(dead_removed + dead_detached)
        to_residue = live_detached + dead_detached
        self.removed.add(live_removed + dead_removed)
        self.detached.add(to_residue)

        if to_residue.wt > 0. and self.surface_organic_matter is not None:
            self.surface_organic_matter.add(to_residue.wt * gm2kgha, to_residue.n * gm2kgha,
                                            0., self.crop_type, self.name)

        s.LAI *= 1. - (fractions.live_to_remove + fractions.live_to_residue)
        s.LAIDEAD *= 1. - (fractions.dead_to_remove + fractions.dead_to_residue)
        s.SLN = divide(self.live.structural_n, s.LAI, 0.)
        s.COVERGREEN = self._green_cover(s.LAI)

    #---------------------------------------------------------------------------
    # Daily phases
    #---------------------------------------------------------------------------
    def do_daily_initialisation(self, day):
        """Clears the daily delta pools and takes a snapshot of the live
        pool at the start of the day.
        """
        if not self.is_alive:
            return
        self.allocated.clear()
        self.senesced.clear()
        self.detached.clear()
        self.removed.clear()
        self.start_live = self.live.copy()
        if settings.ZEROFY:
            self.zerofy()

    def _check_supply(self, quantity, value):
        if value < -settings.BIOMASS_TOLERANCE:
            msg = "Negative %s value computed for organ %s: %g" % (quantity, self.name, value)
            raise exc.ConservationViolation(msg)

    def set_dm_supply(self):
        """Computes the DM supply from the live pool at the start of the day."""
        p = self.params
        supply = self.dm_supply
        supply.clear()
        if not self.is_alive:
            return

        storage_wt = self.start_live.storage_wt
        reallocation = storage_wt * p.SENRATE.value() * p.DMREALLOCF.value()
        self._check_supply("DM reallocation", reallocation)
        supply.reallocation = reallocation

        retranslocation = max(0., storage_wt - supply.reallocation) * p.DMRETRANSF.value()
        self._check_supply("DM retranslocation", retranslocation)
        supply.retranslocation = retranslocation

        supply.fixation = p.DMFIXATION.value() if p.DMFIXATION is not None else 0.
        supply.uptake = 0.
        self._enter_phase("SUPPLY_COMPUTED")

    def set_n_supply(self):
        """Computes the N supply from storage and metabolic N at the start of
        the day.
        """
        p = self.params
        supply = self.n_supply
        supply.clear()
        if not self.is_alive:
            return

        available_n = self.start_live.storage_n + self.start_live.metabolic_n
        senrate = p.SENRATE.value()

        reallocation = available_n * senrate * p.NREALLOCF.value()
        self._check_supply("N reallocation", reallocation)
        supply.reallocation = max(0., reallocation)

        retranslocation = available_n * (1. - senrate) * p.NRETRANSF.value()
        self._check_supply("N retranslocation", retranslocation)
        supply.retranslocation = max(0., retranslocation)

        supply.fixation = 0.
        supply.uptake = 0.

    def set_dm_demand(self):
        p = self.params
        demand = self.dm_demand
        demand.clear()
        if not self.is_alive:
            return
        demand.structural = p.DMDEMSTRUCT.value()
        demand.storage = max(0., p.DMDEMSTORE.value())
        demand.metabolic = 0.
        self._enter_phase("DEMAND_COMPUTED")

    def set_n_demand(self):
        p = self.params
        demand = self.n_demand
        demand.clear()
        if not self.is_alive:
            return
        demand.structural = p.NDEMSTRUCT.value()
        demand.metabolic = p.NDEMMETAB.value()
        demand.storage = p.NDEMSTORE.value()

    def set_dm_potential_allocation(self, dry_matter):
        """Stores the DM allocated from fixation, before retranslocation and
        reallocation are added.
        """
        pa = self.dm_potential_allocation
        pa.structural = dry_matter.structural
        pa.metabolic = dry_matter.metabolic
        pa.storage = dry_matter.storage

    def set_dm_allocation(self, dry_matter):
        """Applies the arbitrated DM allocation to the live pool.

        Retranslocation may not exceed the storage DM at the start of the day
        and the storage allocation may not exceed the storage demand.
        Violations raise a ConservationViolation or a CapacityViolation.
        """
        if not self.is_alive:
            return
        if is_greater_than(dry_matter.retranslocation, self.start_live.storage_wt):
            msg = ("Retranslocation exceeds non structural biomass in organ %s: "
                   "%g > %g" % (self.name, dry_matter.retranslocation,
                                self.start_live.storage_wt))
            raise exc.ConservationViolation(msg)

        # structural DM
        self.allocated.structural_wt = min(dry_matter.structural, self.dm_demand.structural)
        self.live.structural_wt += self.allocated.structural_wt

        # non structural DM
        if is_greater_than(dry_matter.storage, self.dm_demand.storage):
            msg = ("Non structural DM allocation to %s is in excess of its capacity: "
                   "%g > %g" % (self.name, dry_matter.storage, self.dm_demand.storage))
            raise exc.CapacityViolation(msg)
        self.allocated.storage_wt = dry_matter.storage
        self.live.storage_wt += dry_matter.storage

        # DM supplied to other organs
        withdrawn = dry_matter.retranslocation + dry_matter.reallocation
        if is_greater_than(withdrawn, self.live.storage_wt):
            msg = ("Retranslocation and reallocation exceed non structural biomass "
                   "in organ %s: %g > %g" % (self.name, withdrawn, self.live.storage_wt))
            raise exc.ConservationViolation(msg)
        if withdrawn > 0.:
            self.live.subtract(Biomass(storage_wt=withdrawn))
            self.allocated.storage_wt -= withdrawn
        self._enter_phase("ALLOCATION_APPLIED")

    def set_n_allocation(self, nitrogen):
        """Applies the arbitrated N allocation to the live pool.

        Retranslocated and reallocated N is taken from storage N first, the
        remainder from metabolic N. Each transaction is bounded by the N supply
        computed earlier today.
        """
        if not self.is_alive:
            return
        p = self.params
        sl = self.start_live
        senrate = p.SENRATE.value()

        self.live.structural_n += nitrogen.structural
        self.live.storage_n += nitrogen.storage
        self.live.metabolic_n += nitrogen.metabolic

        self.allocated.structural_n += nitrogen.structural
        self.allocated.storage_n += nitrogen.storage
        self.allocated.metabolic_n += nitrogen.metabolic

        # Retranslocation
        if is_greater_than(nitrogen.retranslocation, self.n_supply.retranslocation):
            msg = ("N retranslocation exceeds storage + metabolic nitrogen in organ %s: "
                   "%g > %g" % (self.name, nitrogen.retranslocation,
                                self.n_supply.retranslocation))
            raise exc.ConservationViolation(msg)
        storage_n_retrans = min(nitrogen.retranslocation,
                                sl.storage_n * (1. - senrate) * p.NRETRANSF.value())
        self.live.subtract(Biomass(storage_n=storage_n_retrans,
                                   metabolic_n=nitrogen.retranslocation - storage_n_retrans))
        self.allocated.storage_n -= nitrogen.retranslocation

        # Reallocation
        if is_greater_than(nitrogen.reallocation, self.n_supply.reallocation):
            msg = ("N reallocation exceeds storage + metabolic nitrogen in organ %s: "
                   "%g > %g" % (self.name, nitrogen.reallocation,
                                self.n_supply.reallocation))
            raise exc.ConservationViolation(msg)
        storage_n_realloc = min(nitrogen.reallocation,
                                sl.storage_n * senrate * p.NREALLOCF.value())
        self.live.subtract(Biomass(storage_n=storage_n_realloc,
                                   metabolic_n=nitrogen.reallocation - storage_n_realloc))
        self.allocated.storage_n -= nitrogen.reallocation

    @prepare_rates
    @prepare_states
    def do_potential_growth(self, day, drv):
        """Potential leaf area growth of the culms, height and dead leaf
        area.
        """
        p = self.params
        r = self.rates
        s = self.states

        self.radn = drv.RADN
        if not self.leaf_initialised:
            return

        dlt_tt = p.DLTTT.value()
        r.DLTPOTLAI = sum(culm.calc_potential_area(dlt_tt) for culm in self.culms)
        r.DLTSTRESSEDLAI = r.DLTPOTLAI * limit(0., 1., p.EXPSTRESS.value())

        for culm in tillers_due(self.culms[0], self.culms, p.TILLERS,
                                p.TILLERSTARTLEAF, p.TILLERVADJ):
            self.add_culm(culm)

        r.BIOMASSRUE = p.PHOTOSYNTHESIS.value()
        r.BIOMASSTE = p.POTBIOMASSTE.value()
        if r.BIOMASSTE - r.BIOMASSRUE > 0.5:
            self.logger.debug("%s: water supply is higher than demand on %s" %
                              (self.name, day))

        s.HEIGHT = p.HEIGHTF.value()
        if p.LAIDEADF is not None:
            s.LAIDEAD = p.LAIDEADF.value()
        self._enter_phase("CANOPY_UPDATED")

    @prepare_rates
    @prepare_states
    def do_potential_partitioning(self, day, drv):
        """Actual leaf area growth and senescence of leaf area."""
        p = self.params
        r = self.rates
        s = self.states

        if not self.is_emerged:
            return

        r.DLTLAI = p.DLTLAIF.value()
        s.LOSSEXPSTRESS += r.DLTPOTLAI - r.DLTSTRESSEDLAI

        k = p.KEXT.value()
        radn_transmitted = drv.RADN * (1. - s.COVERGREEN)
        r.DLTSENLAILIGHT = self.senescence.light(s.LAI, drv.RADN, radn_transmitted, k,
                                                 p.SENRADNCRIT, p.SENLIGHTTC)

        if self.root is not None and self.arbitrator is not None:
            self.arbitrator.water_supply = self.root.total_extractable_water()
        r.DLTSENLAIWATER = self.senescence.water(s.LAI, drv.RADN, s.COVERGREEN, k,
                                                 p.PHOTOSYNTHESIS.value(),
                                                 p.POTBIOMASSTE.value(), self.sd_ratio,
                                                 p.SENTHRESHOLD, p.SENWATERTC)

        r.DLTSENLAIFROST = frost_senescence(s.LAI, drv.TMIN, p.FROSTKILL)

        r.DLTSENLAI = max(r.DLTSENLAILIGHT, r.DLTSENLAIWATER, r.DLTSENLAIFROST)
        if r.DLTSENLAI > 0.:
            self.logger.debug("%s: senesced LAI %f on %s (light %f, water %f, frost %f)" %
                              (self.name, r.DLTSENLAI, day, r.DLTSENLAILIGHT,
                               r.DLTSENLAIWATER, r.DLTSENLAIFROST))

    @prepare_states
    def do_actual_growth(self, day, drv):
        """Moves senescing biomass from live to dead and updates LAI, SLN and
        green cover.
        """
        p = self.params
        r = self.rates
        s = self.states

        if not self.is_alive or not self.leaf_initialised:
            return

        lai_today = s.LAI + r.DLTLAI
        live_wt = self.live.wt
        sla_today = divide(lai_today, live_wt, 0.)

        if live_wt > 0.:
            dlt_senesced_biomass = divide(r.DLTSENLAI, sla_today, 0.)
            proportion = limit(0., 1., dlt_senesced_biomass / live_wt)
            if proportion > 0.:
                senescing = self.live * proportion
                self.live.subtract(senescing)
                self.dead.add(senescing)
                self.senesced.add(senescing)

        s.LAI = max(0., s.LAI + r.DLTLAI - r.DLTSENLAI)
        s.SENESCEDLAI += r.DLTSENLAI
        if p.LAIDEADF is None:
            s.LAIDEAD += r.DLTSENLAI
        s.SLN = divide(self.live.structural_n, s.LAI, 0.)
        s.COVERGREEN = self._green_cover(s.LAI)
        self._enter_phase("SENESCENCE_APPLIED")

    #---------------------------------------------------------------------------
    # Derived variables
    #---------------------------------------------------------------------------
    def _green_cover(self, lai):
        cover = 1. - exp(-self.params.KEXT.value() * lai)
        return limit(0., settings.MAX_COVER, cover)

    @property
    def is_alive(self):
        return self.plant is None or bool(self.plant.is_alive)

    @property
    def is_emerged(self):
        return self.plant is None or bool(self.plant.is_emerged)

    @property
    def crop_type(self):
        return getattr(self.plant, "crop_type", "")

    @property
    def total(self):
        return self.live + self.dead

    @property
    def wt(self):
        return self.live.wt + self.dead.wt

    @property
    def n(self):
        return self.live.n + self.dead.n

    @property
    def nconc(self):
        return divide(self.n, self.wt, 0.)

    @property
    def lai_total(self):
        return self.states.LAI + self.states.LAIDEAD

    @property
    def cover_dead(self):
        return 1. - exp(-self.params.KDEAD * self.states.LAIDEAD)

    @property
    def cover_total(self):
        return 1. - (1. - self.states.COVERGREEN) * (1. - self.cover_dead)

    @property
    def rad_int_tot(self):
        "Radiation intercepted by the green canopy (MJ/m2/d)."
        return self.states.COVERGREEN * self.radn

    @property
    def nitrogen_stress(self):
        photo_stress = 2. / (1. + exp(-6.05 * (self.states.SLN - 0.41))) - 1.
        return max(photo_stress, 0.)

    @property
    def temperature_stress(self):
        if self.params.TEMPSTRESS is not None:
            return self.params.TEMPSTRESS.value()
        return 1.

    @property
    def max_nconc(self):
        return self._optional_value(self.params.MAXNCONC)

    @property
    def min_nconc(self):
        return self._optional_value(self.params.MINNCONC)

    @property
    def crit_nconc(self):
        return self._optional_value(self.params.CRITNCONC)

    @staticmethod
    def _optional_value(provider):
        return provider.value() if provider is not None else None

    @property
    def water_demand(self):
        """Water demand of the leaf (mm), given by the WATERDEMAND provider
        or set from outside.
        """
        if self.params.WATERDEMAND is not None:
            return self.params.WATERDEMAND.value()
        return self._water_demand

    @water_demand.setter
    def water_demand(self, value):
        self._water_demand = float(value)

    @property
    def transpiration(self):
        return self.water_allocation

    @property
    def sd_ratio(self):
        """Water supply/demand ratio, 1 (no stress) without demand."""
        if self.params.SDRATIO is not None:
            return self.params.SDRATIO.value()
        water_supply = getattr(self.arbitrator, "water_supply", 0.)
        return divide(water_supply, self.water_demand, 1.)
