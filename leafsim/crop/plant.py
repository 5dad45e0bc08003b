# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from ..traitlets import Bool, Float, Unicode
from ..base import AncillaryObject
from .. import signals


class Plant(AncillaryObject):
    """Lifecycle of the plant that owns the organs.

    The plant keeps the `is_alive` and `is_emerged` flags queried by the
    organs and broadcasts the lifecycle events as signals: sowing
    (CROP_START), phase changes (PHASE_CHANGED), harvest, graze or cut
    events (REMOVE_BIOMASS) and plant ending (CROP_FINISH).

    :param kiosk: variable kiosk of this LeafSim instance
    :param crop_type: crop type passed on to the residues, e.g. 'sorghum'
    :param emergence_stage: name of the stage at which the plant emerges
    """

    crop_type = Unicode("")
    emergence_stage = Unicode("emergence")
    stage_name = Unicode("")
    is_alive = Bool(False)
    is_emerged = Bool(False)
    population = Float(0.)

    def initialize(self, kiosk, crop_type="sorghum", emergence_stage="emergence"):
        self.crop_type = crop_type
        self.emergence_stage = emergence_stage

    def sow(self, day, population):
        self.is_alive = True
        self.is_emerged = False
        self.population = population
        self.stage_name = "sowing"
        self.logger.info("Sowing %s on %s" % (self.crop_type, day))
        self._send_signal(signal=signals.crop_start, day=day,
                          crop_type=self.crop_type, population=population)

    def change_phase(self, day, stage_name):
        if not self.is_alive:
            msg = "Phase change to '%s' on %s ignored, plant is not alive." % (stage_name, day)
            self.logger.warning(msg)
            return
        self.stage_name = stage_name
        if stage_name == self.emergence_stage:
            self.is_emerged = True
        self.logger.info("Plant entered stage '%s' on %s" % (stage_name, day))
        self._send_signal(signal=signals.phase_changed, day=day, stage_name=stage_name)

    def remove_biomass(self, day, removal_type, fractions):
        """Sends a REMOVE_BIOMASS signal. `fractions` maps organ names to
        BiomassRemovalFractions."""
        self._send_signal(signal=signals.remove_biomass, day=day,
                          removal_type=removal_type, fractions=fractions)

    def end(self, day):
        self.logger.info("Plant ending on %s" % day)
        self._send_signal(signal=signals.crop_finish, day=day)
        self.is_alive = False
        self.is_emerged = False
        self.stage_name = "ended"
