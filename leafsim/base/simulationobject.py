# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
import types
import logging
from datetime import date

from .dispatcher import DispatcherObject
from ..traitlets import HasTraits, Instance
from .. import exceptions as exc
from .variablekiosk import VariableKiosk
from .states_rates import StatesTemplate, RatesTemplate, ParamTemplate


class SimulationObject(HasTraits, DispatcherObject):
    """Base class for LeafSim simulation objects.

    :param day: start date of the simulation
    :param kiosk: variable kiosk of this LeafSim instance

    The day and kiosk are mandatory variables and must be passed when
    instantiating a SimulationObject. Additional arguments are passed on to
    `initialize()` which must be implemented by subclasses.

    Attributes must be declared as traits on the class before they can be
    assigned, which catches typing errors in variable names early.
    """

    states = Instance(StatesTemplate)
    rates = Instance(RatesTemplate)
    params = Instance(ParamTemplate)
    kiosk = Instance(VariableKiosk)

    def __init__(self, day, kiosk, *args, **kwargs):
        HasTraits.__init__(self)

        if not isinstance(day, date):
            this = "%s.%s" % (self.__class__.__module__, self.__class__.__name__)
            msg = ("%s should be instantiated with the simulation start " +
                   "day as first argument!")
            raise exc.LeafSimError(msg % this)

        if not isinstance(kiosk, VariableKiosk):
            this = "%s.%s" % (self.__class__.__module__, self.__class__.__name__)
            msg = ("%s should be instantiated with the VariableKiosk " +
                   "as second argument!")
            raise exc.LeafSimError(msg % this)
        self.kiosk = kiosk

        self.initialize(day, kiosk, *args, **kwargs)
        self.logger.debug("Component successfully initialized on %s!" % day)

    def initialize(self, *args, **kwargs):
        msg = "`initialize` method not yet implemented on %s" % self.__class__.__name__
        raise NotImplementedError(msg)

    @property
    def logger(self):
        loggername = "%s.%s" % (self.__class__.__module__,
                                self.__class__.__name__)
        return logging.getLogger(loggername)

    def __setattr__(self, attr, value):
        # Class attributes must be defined before they can be assigned, with
        # two exceptions:
        # 1 attribute names starting with '_' are assigned directly.
        # 2 functions (types.FunctionType) are assigned directly, because the
        #   'prepare_states' and 'prepare_rates' decorators cache the wrapped
        #   methods on the instance.
        if attr.startswith("_") or type(value) is types.FunctionType:
            HasTraits.__setattr__(self, attr, value)
        elif hasattr(self, attr):
            HasTraits.__setattr__(self, attr, value)
        else:
            msg = "Assignment to non-existing attribute '%s' prevented." % attr
            raise AttributeError(msg)

    def get_variable(self, varname):
        """ Return the value of the specified state or rate variable.

        :param varname: Name of the variable (case sensitive).
        """

        value = None
        if self.states is not None and varname in self.states.trait_names():
            value = getattr(self.states, varname)
        elif self.rates is not None and varname in self.rates.trait_names():
            value = getattr(self.rates, varname)
        else:
            for simobj in self.subSimObjects:
                value = simobj.get_variable(varname)
                if value is not None:
                    break
        return value

    @property
    def subSimObjects(self):
        """ Return SimulationObjects embedded within self.
        """

        defined_traits = self.__dict__["_trait_values"]
        return [attr for attr in defined_traits.values()
                if isinstance(attr, SimulationObject)]

    def _delete(self):
        """ Runs the _delete() methods on the states/rates objects and recurses
        trough the list of subSimObjects.
        """
        if self.states is not None:
            self.states._delete()
            self.states = None
        if self.rates is not None:
            self.rates._delete()
            self.rates = None
        for obj in self.subSimObjects:
            obj._delete()

    def touch(self):
        """Re-assign all state variables of this and any sub-SimulationObjects
        so that published values remain available in the VariableKiosk.
        """

        if self.states is not None:
            self.states.touch()
        for simobj in self.subSimObjects:
            simobj.touch()

    def zerofy(self):
        """Zerofy the value of all rate variables of this and any sub-SimulationObjects.
        """

        if self.rates is not None:
            self.rates.zerofy()
        for simobj in self.subSimObjects:
            simobj.zerofy()


class AncillaryObject(HasTraits, DispatcherObject):
    """Base class for LeafSim ancillary objects.

    Ancillary objects do not carry out simulation, but represent collaborators
    of the simulated organ such as the plant lifecycle, the residue pool or the
    arbitrator. They share the logger, the kiosk, the locked attribute
    behaviour and the possibility to send/receive signals with
    SimulationObjects.
    """

    kiosk = Instance(VariableKiosk)

    def __init__(self, kiosk, *args, **kwargs):
        HasTraits.__init__(self)

        if not isinstance(kiosk, VariableKiosk):
            this = "%s.%s" % (self.__class__.__module__, self.__class__.__name__)
            msg = "%s should be instantiated with the VariableKiosk " \
                  "as first argument!"
            raise exc.LeafSimError(msg % this)

        self.kiosk = kiosk
        self.initialize(kiosk, *args, **kwargs)
        self.logger.debug("Component successfully initialized!")

    def initialize(self, *args, **kwargs):
        msg = "`initialize` method not yet implemented on %s" % self.__class__.__name__
        raise NotImplementedError(msg)

    @property
    def logger(self):
        loggername = "%s.%s" % (self.__class__.__module__,
                                self.__class__.__name__)
        return logging.getLogger(loggername)

    def __setattr__(self, attr, value):
        if attr.startswith("_") or type(value) is types.FunctionType:
            HasTraits.__setattr__(self, attr, value)
        elif hasattr(self, attr):
            HasTraits.__setattr__(self, attr, value)
        else:
            msg = "Assignment to non-existing attribute '%s' prevented." % attr
            raise AttributeError(msg)
