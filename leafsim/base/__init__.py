# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Base classes for creating LeafSim simulation units.

In general these classes are not to be used directly, but are to be subclassed
when creating LeafSim simulation units.
"""
from .variablekiosk import VariableKiosk
from .simulationobject import SimulationObject, AncillaryObject
from .states_rates import StatesTemplate, RatesTemplate, ParamTemplate
from .weather import WeatherDataContainer, WeatherDataProvider
from .dispatcher import DispatcherObject
