# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""This module defines and describes the signals used by LeafSim

Signals notify simulation objects of plant lifecycle events such as sowing,
phase changes and plant ending. Signals are sent by any SimulationObject
through its `_send_signal()` method and received by handlers registered with
`_connect_signal()`. The VariableKiosk of the sender is used as the signal
sender, so different model instances in one runtime do not see each others
signals. Always pass arguments as keywords, see the PyDispatcher_
documentation for details.

Currently the following signals are used within LeafSim.

**CROP_START**

 Indicates that the plant is sown::

     self._send_signal(signal=signals.crop_start, day=<date>,
                       crop_type=<string>, population=<float>)

 keyword arguments with `signals.crop_start`:

    * day: Current date
    * crop_type: a string identifying the crop, e.g. 'sorghum'
    * population: sowing density in plants/m2

**PHASE_CHANGED**

 Indicates that the plant entered a new phenological stage::

     self._send_signal(signal=signals.phase_changed, day=<date>,
                       stage_name=<string>)

 Organs compare `stage_name` with their initialisation stage, e.g. the
 sorghum leaf creates its main culm at 'emergence'.

**CROP_FINISH**

 Indicates that the plant is ending. Organs hand their live and dead biomass
 to the residue pool and clear their state::

     self._send_signal(signal=signals.crop_finish, day=<date>)

**REMOVE_BIOMASS**

 Harvest, graze or cut event removing biomass from the organs::

     self._send_signal(signal=signals.remove_biomass, day=<date>,
                       removal_type=<string>, fractions=<dict>)

 `fractions` maps an organ name to a `BiomassRemovalFractions` object.

**TERMINATE**

 Indicates that the simulation should stop::

    self._send_signal(signal=signals.terminate)

 No keyword arguments are defined for this signal

.. _PyDispatcher: http://pydispatcher.sourceforge.net/
"""

crop_start = "CROP_START"
phase_changed = "PHASE_CHANGED"
crop_finish = "CROP_FINISH"
remove_biomass = "REMOVE_BIOMASS"
terminate = "TERMINATE"
