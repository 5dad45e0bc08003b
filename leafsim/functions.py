# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Value providers: scalar rate and value functions injected into organs.

An organ does not know how its senescence rate, extinction coefficient or
demands are computed. It receives for each of them an object with a single
capability, `value()`, which returns a float for the current day. The
variants below cover constants, linear responses and AFGEN-style table
lookups on a variable published in the VariableKiosk, and their
combination.

example::

    >>> from leafsim.base import VariableKiosk
    >>> k = VariableKiosk()
    >>> k.register_variable(0, "TT", type="R", publish=True)
    >>> k.set_variable(0, "TT", 15.)
    >>> rate = MultiplyFunction([Constant(0.5),
    ...                          TableFunction(k, "TT", [0, 0, 30, 1])])
    >>> rate.value()
    0.25
"""
import logging

from .util import Afgen, limit
from . import exceptions as exc


class ValueProvider(object):
    """Base class of all value providers."""

    def value(self):
        msg = "`value` method not yet implemented on %s" % self.__class__.__name__
        raise NotImplementedError(msg)

    @property
    def logger(self):
        loggername = "%s.%s" % (self.__class__.__module__,
                                self.__class__.__name__)
        return logging.getLogger(loggername)

    def __repr__(self):
        return "%s()" % self.__class__.__name__


class Constant(ValueProvider):
    """Returns a fixed value."""

    def __init__(self, value):
        self._value = float(value)

    def value(self):
        return self._value

    def __repr__(self):
        return "Constant(%s)" % self._value


class KioskVariable(ValueProvider):
    """Returns the current value of a variable published in the kiosk.

    :param kiosk: the VariableKiosk of the model
    :param varname: name of the published variable
    :param default: value returned when the variable has no value (yet),
        if None a missing value raises a ParameterError.
    """

    def __init__(self, kiosk, varname, default=None):
        self.kiosk = kiosk
        self.varname = varname
        self.default = default

    def value(self):
        if self.varname in self.kiosk:
            return float(self.kiosk[self.varname])
        if self.default is not None:
            return float(self.default)
        msg = "Variable '%s' has no value in the VariableKiosk." % self.varname
        raise exc.ParameterError(msg)

    def __repr__(self):
        return "KioskVariable(%r)" % self.varname


class LinearFunction(ValueProvider):
    """Returns `intercept + slope * x` where x is given by another provider."""

    def __init__(self, x, slope, intercept=0.):
        self.x = x
        self.slope = float(slope)
        self.intercept = float(intercept)

    def value(self):
        return self.intercept + self.slope * self.x.value()


class TableFunction(ValueProvider):
    """Linear interpolation in an XY table on a published kiosk variable.

    :param kiosk: the VariableKiosk of the model
    :param varname: name of the x variable in the kiosk, or a ValueProvider
    :param tbl_xy: flat list of XY pairs, x strictly ascending
    """

    def __init__(self, kiosk, varname, tbl_xy):
        if isinstance(varname, ValueProvider):
            self.x = varname
        else:
            self.x = KioskVariable(kiosk, varname)
        self.afgen = Afgen(tbl_xy)

    def value(self):
        return self.afgen(self.x.value())


class _CompositeFunction(ValueProvider):

    def __init__(self, children):
        children = list(children)
        if not children:
            msg = "%s needs at least one child provider." % self.__class__.__name__
            raise exc.ParameterError(msg)
        for child in children:
            if not isinstance(child, ValueProvider):
                msg = "Child of %s is not a ValueProvider: %r" % (self.__class__.__name__, child)
                raise exc.ParameterError(msg)
        self.children = children

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.children)


class MultiplyFunction(_CompositeFunction):
    """Product of all child providers."""

    def value(self):
        v = 1.
        for child in self.children:
            v *= child.value()
        return v


class AddFunction(_CompositeFunction):
    """Sum of all child providers."""

    def value(self):
        return sum(child.value() for child in self.children)


class MinimumFunction(_CompositeFunction):
    """Smallest value of the child providers."""

    def value(self):
        return min(child.value() for child in self.children)


class MaximumFunction(_CompositeFunction):
    """Largest value of the child providers."""

    def value(self):
        return max(child.value() for child in self.children)


class BoundFunction(ValueProvider):
    """Value of a child provider limited to [lower, upper]."""

    def __init__(self, child, lower, upper):
        self.child = child
        self.lower = float(lower)
        self.upper = float(upper)

    def value(self):
        return limit(self.lower, self.upper, self.child.value())


class VariableValue(ValueProvider):
    """Returns a value that is set from outside, e.g. by an arbitrator
    that computes photosynthesis or leaf area growth for the organ.
    """

    def __init__(self, value=0.):
        self.set(value)

    def set(self, value):
        self._value = float(value)

    def value(self):
        return self._value

    def __repr__(self):
        return "VariableValue(%s)" % self._value
