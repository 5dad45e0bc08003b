# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from .. import exceptions as exc


class VariableKiosk(dict):
    """VariableKiosk for registering and publishing state and rate variables.

    Every state and rate variable defined in a LeafSim model is registered in
    the kiosk, which guarantees that variable names are unique across the
    model. Variables that are published can be read by other components (and
    by `KioskVariable` value providers) with bracket or attribute notation.
    Only the object that registered a variable may set its value.

    The `StatesTemplate` and `RatesTemplate` classes take care of registering
    and updating variables, users rarely call these methods directly.

    example::

        >>> from leafsim.base import VariableKiosk
        >>>
        >>> k = VariableKiosk()
        >>> k.register_variable(0, "LAI", type="S", publish=True)
        >>> k.register_variable(0, "DLTLAI", type="R", publish=True)
        >>> k.set_variable(0, "LAI", 1.25)
        >>> k.LAI
        1.25
        >>> k.set_variable(1, "LAI", 2.0)
        Traceback (most recent call last):
          ...
        leafsim.exceptions.VariableKioskError: Unregistered object tried to set the value of variable 'LAI': access denied.
    """

    def __init__(self):
        dict.__init__(self)
        self.registered_states = {}
        self.registered_rates = {}
        self.published_states = {}
        self.published_rates = {}

    def __setitem__(self, item, value):
        msg = "See set_variable() for setting a variable."
        raise RuntimeError(msg)

    def __getattr__(self, item):
        """Allow use of attribute notation (eg "kiosk.LAI") on published rates or states.
        """
        try:
            return dict.__getitem__(self, item)
        except KeyError:
            raise AttributeError(item)

    def __str__(self):
        msg = "Contents of VariableKiosk:\n"
        for label, registered, published in \
                [("state", self.registered_states, self.published_states),
                 ("rate", self.registered_rates, self.published_rates)]:
            msg += " * Registered %s variables: %i\n" % (label, len(registered))
            msg += " * Published %s variables: %i with values:\n" % (label, len(published))
            for varname in published:
                value = self[varname] if varname in self else "undefined"
                msg += "  - variable %s, value: %s\n" % (varname, value)
        return msg

    def register_variable(self, oid, varname, type, publish=False):
        """Register a varname from object with id, with given type

        :param oid: Object id (from python builtin id() function) of the
            state/rate object registering this variable.
        :param varname: Name of the variable to be registered, e.g. "LAI"
        :param type: Either "R" (rate) or "S" (state) variable, is handled
            automatically by the states/rates template class.
        :param publish: True if variable should be published in the kiosk,
            defaults to False
        """

        self._check_duplicate_variable(varname)
        if type.upper() == "R":
            registered, published = self.registered_rates, self.published_rates
        elif type.upper() == "S":
            registered, published = self.registered_states, self.published_states
        else:
            msg = "Variable type should be 'S'|'R'"
            raise exc.VariableKioskError(msg)

        registered[varname] = oid
        if publish is True:
            published[varname] = oid

    def deregister_variable(self, oid, varname):
        """Object with id(object) asks to deregister varname from kiosk

        :param oid: Object id (from python builtin id() function) of the
            state/rate object registering this variable.
        :param varname: Name of the variable to be deregistered, e.g. "LAI"
        """
        for registered, published in [(self.registered_states, self.published_states),
                                      (self.registered_rates, self.published_rates)]:
            if varname not in registered:
                continue
            if oid != registered[varname]:
                msg = "Wrong object tried to deregister variable '%s'." % varname
                raise exc.VariableKioskError(msg)
            registered.pop(varname)
            published.pop(varname, None)
            self.pop(varname, None)
            return

        msg = "Failed to deregister variable '%s'!" % varname
        raise exc.VariableKioskError(msg)

    def _check_duplicate_variable(self, varname):
        """Checks if variables are not registered twice.
        """
        if self.variable_exists(varname):
            msg = "Duplicate state/rate variable '%s' encountered!"
            raise exc.VariableKioskError(msg % varname)

    def set_variable(self, oid, varname, value):
        """Let object with id, set the value of variable varname

        :param oid: Object id (from python builtin id() function) of the
            state/rate object registering this variable.
        :param varname: Name of the variable to be updated
        :param value: Value to be assigned to the variable.
        """

        if varname in self.published_rates:
            owner = self.published_rates[varname]
        elif varname in self.published_states:
            owner = self.published_states[varname]
        else:
            msg = "Variable '%s' not published in VariableKiosk."
            raise exc.VariableKioskError(msg % varname)

        if owner != oid:
            msg = "Unregistered object tried to set the value of variable '%s': access denied."
            raise exc.VariableKioskError(msg % varname)
        dict.__setitem__(self, varname, value)

    def variable_exists(self, varname):
        """ Returns True if the state/rate variable is registered in the kiosk.

        :param varname: Name of the variable to be checked for registration.
        """

        return varname in self.registered_rates or varname in self.registered_states
