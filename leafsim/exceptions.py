# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Exception hierarchy for LeafSim
"""

class LeafSimError(Exception):
    """Top LeafSim Exception"""

class ParameterError(LeafSimError):
    "Raised when problems with parameters or value providers are found."

class VariableKioskError(LeafSimError):
    "Raised when problems with kiosk registrations are found."

class WeatherDataProviderError(LeafSimError):
    "Raised when problems occur with the WeatherDataProviders"

class BiomassBalanceError(LeafSimError):
    "Raised when dry matter or nitrogen flows in an organ are not balanced."

class ConservationViolation(BiomassBalanceError):
    """Raised when a supply, retranslocation or reallocation is negative or
    exceeds its bound beyond the biomass tolerance."""

class CapacityViolation(BiomassBalanceError):
    "Raised when an allocation exceeds the demand (capacity) of an organ."
