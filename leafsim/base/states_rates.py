# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
import logging

from ..traitlets import HasTraits, Float, Int, Instance, Bool, All
from .. import exceptions as exc
from .variablekiosk import VariableKiosk


class ParamTemplate(HasTraits):
    """Template for storing parameter values and value providers.

    This is meant to be subclassed by the actual class where the parameters
    are defined. Scalar parameters are `Float` (or `Unicode`) traits, rate and
    value providers are `FunctionTrait` traits. Providers tagged with
    `optional=True` may be missing from the parameter values and are then
    set to None.

    example::

        >>> from leafsim.base import ParamTemplate
        >>> from leafsim.traitlets import Float, FunctionTrait
        >>>
        >>> class Parameters(ParamTemplate):
        ...     FROSTKILL = Float()
        ...     SENRATE = FunctionTrait()
        ...     SDRATIO = FunctionTrait().tag(optional=True)
        ...
        >>> params = Parameters({"FROSTKILL": 10, "SENRATE": 0.05})
        >>> params.SENRATE.value()
        0.05
        >>> params.SDRATIO is None
        True
        >>> params = Parameters({"SENRATE": 0.05})
        Traceback (most recent call last):
          ...
        leafsim.exceptions.ParameterError: Value for parameter FROSTKILL missing.
    """

    def __init__(self, parvalues):

        HasTraits.__init__(self)

        for parname in self.trait_names():
            # Names starting with "trait" or "_" are traitlets internals
            if parname.startswith(("trait", "_")):
                continue
            if parname in parvalues:
                try:
                    setattr(self, parname, parvalues[parname])
                except exc.LeafSimError:
                    raise
                except Exception as e:
                    msg = "Invalid value for parameter %s: %s" % (parname, e)
                    raise exc.ParameterError(msg)
            elif self.trait_metadata(parname, "optional"):
                setattr(self, parname, None)
            else:
                msg = "Value for parameter %s missing." % parname
                raise exc.ParameterError(msg)

    def __setattr__(self, attr, value):
        if attr.startswith("_"):
            HasTraits.__setattr__(self, attr, value)
        elif hasattr(self, attr):
            HasTraits.__setattr__(self, attr, value)
        else:
            msg = "Assignment to non-existing attribute '%s' prevented." % attr
            raise AttributeError(msg)


def check_publish(publish):
    """ Convert the list of published variables to a set with unique elements.
    """

    if publish is None:
        publish = []
    elif isinstance(publish, str):
        publish = [publish]
    elif isinstance(publish, (list, tuple)):
        pass
    else:
        msg = "The publish keyword should specify a string or a list of strings"
        raise RuntimeError(msg)
    return set(publish)


class StatesRatesCommon(HasTraits):
    _kiosk = Instance(VariableKiosk)
    _valid_vars = Instance(set)
    _locked = Bool(False)

    def __init__(self, kiosk=None, publish=None):
        """Set up the common stuff for the states and rates template
        including variables that have to be published in the kiosk
        """

        HasTraits.__init__(self)

        if not isinstance(kiosk, VariableKiosk):
            msg = ("Variable Kiosk must be provided when instantiating rate " +
                   "or state variables.")
            raise RuntimeError(msg)
        self._kiosk = kiosk

        publish = check_publish(publish)
        self._valid_vars = self._find_valid_variables()
        self._register_with_kiosk(publish)

    def _find_valid_variables(self):
        """Returns a set with the valid state/rate variables names. Valid rate
        variables have names not starting with 'trait' or '_'.
        """

        valid = lambda s: not (s.startswith("_") or s.startswith("trait"))
        return set(name for name in self.trait_names() if valid(name))

    def _register_with_kiosk(self, publish):
        """Register all variables with the variable kiosk and put an observer
        on the published ones so that every assignment updates the kiosk.

        Registering a variable twice raises a VariableKioskError, which
        ensures that variable names are unique across the entire model.
        """

        for attr in self._valid_vars:
            if attr in publish:
                publish.remove(attr)
                self._kiosk.register_variable(id(self), attr, type=self._vartype,
                                              publish=True)
                self.observe(handler=self._update_kiosk, names=attr, type=All)
            else:
                self._kiosk.register_variable(id(self), attr, type=self._vartype,
                                              publish=False)

        if len(publish) > 0:
            msg = ("Unknown variable(s) specified with the publish " +
                   "keyword: %s") % publish
            raise exc.LeafSimError(msg)

    def __setattr__(self, attr, value):
        # Attributes starting with "_" can be assigned or updated regardless
        # of whether the object is locked. HasTraits assigns its own internals
        # (e.g. notify_change) before the valid variables are known and
        # whenever notifications are held.
        if attr.startswith("_") or self._valid_vars is None:
            HasTraits.__setattr__(self, attr, value)
        elif attr in self._valid_vars:
            if not self._locked:
                HasTraits.__setattr__(self, attr, value)
            else:
                msg = "Assignment to locked attribute '%s' prevented." % attr
                raise AttributeError(msg)
        elif hasattr(self.__class__, attr):
            HasTraits.__setattr__(self, attr, value)
        else:
            msg = "Assignment to non-existing attribute '%s' prevented." % attr
            raise AttributeError(msg)

    def _update_kiosk(self, change):
        """Update the variable_kiosk through trait notification.
        """
        self._kiosk.set_variable(id(self), change["name"], change["new"])

    def unlock(self):
        "Unlocks the attributes of this class."
        self._locked = False

    def lock(self):
        "Locks the attributes of this class."
        self._locked = True

    def _delete(self):
        """Deregister the variables from the kiosk.

        Must be called explicitly, the organ does this when it is deleted
        from the model.
        """
        for attr in self._valid_vars:
            self._kiosk.deregister_variable(id(self), attr)

    @property
    def logger(self):
        loggername = "%s.%s" % (self.__class__.__module__,
                                self.__class__.__name__)
        return logging.getLogger(loggername)


class StatesTemplate(StatesRatesCommon):
    """Takes care of assigning initial values to state variables, registering
    variables in the kiosk and monitoring assignments to variables that are
    published.

    :param kiosk: Instance of the VariableKiosk class.
    :param publish: Lists the variables whose values need to be published
        in the VariableKiosk. Can be omitted if no variables need to be
        published.

    Initial values for all state variables must be given as keywords,
    a missing initial value raises a LeafSimError.

    example::

        >>> from leafsim.base import VariableKiosk, StatesTemplate
        >>> from leafsim.traitlets import Float
        >>>
        >>> k = VariableKiosk()
        >>> class StateVariables(StatesTemplate):
        ...     LAI = Float()
        ...     HEIGHT = Float()
        ...
        >>> s = StateVariables(k, LAI=0.1, HEIGHT=10., publish="LAI")
        >>> k.LAI
        0.1
    """

    _vartype = "S"

    def __init__(self, kiosk=None, publish=None, **kwargs):

        StatesRatesCommon.__init__(self, kiosk, publish)

        for attr in self._valid_vars:
            if attr in kwargs:
                setattr(self, attr, kwargs.pop(attr))
            else:
                msg = "Initial value for state %s missing." % attr
                raise exc.LeafSimError(msg)

        if len(kwargs) > 0:
            msg = ("Initial value given for unknown state variable(s): " +
                   "%s") % list(kwargs.keys())
            self.logger.warning(msg)

        # Lock the object to prevent further changes at this stage.
        self._locked = True

    def touch(self):
        """Re-assigns the value of each state variable, thereby updating its
        value in the variablekiosk if the variable is published."""

        self.unlock()
        for name in self._valid_vars:
            setattr(self, name, getattr(self, name))
        self.lock()


class RatesTemplate(StatesRatesCommon):
    """Takes care of registering variables in the kiosk and monitoring
    assignments to variables that are published.

    For an example see the `StatesTemplate`. The only difference is that the
    initial value of rate variables does not need to be specified because
    the value will be set to zero (Int, Float variables) or False (Boolean
    variables).
    """

    _rate_vars_zero = Instance(dict)
    _vartype = "R"

    def __init__(self, kiosk=None, publish=None):

        StatesRatesCommon.__init__(self, kiosk, publish)

        self._rate_vars_zero = self._find_rate_zero_values()
        self.zerofy()

        # Lock the object to prevent further changes at this stage.
        self._locked = True

    def _find_rate_zero_values(self):
        """Returns a dict with the valid rate variables names as keys and
        the zero values used by the zerofy() method as values: 0 for Int,
        0.0 for Float en False for Bool.
        """

        zero_value = {Bool: False, Int: 0, Float: 0.}

        d = {}
        for name, value in self.traits().items():
            if name not in self._valid_vars:
                continue
            try:
                d[name] = zero_value[value.__class__]
            except KeyError:
                msg = ("Rate variable '%s' not of type Float, Bool or Int. " +
                       "Its zero value cannot be determined and it will " +
                       "not be treated by zerofy().") % name
                self.logger.warning(msg)
        return d

    def zerofy(self):
        """Sets the values of all rate values to zero (Int, Float)
        or False (Boolean).

        Assignment goes through the traits so that published rates are also
        reset in the kiosk.
        """
        locked = self._locked
        self._locked = False
        for name, value in self._rate_vars_zero.items():
            setattr(self, name, value)
        self._locked = locked
