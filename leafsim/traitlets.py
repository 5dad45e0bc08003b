# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""
All LeafSim modules import their traits from here. The actual trait machinery
comes from the adapted traitlets package 'traitlets_pcse', which notifies
observers on every assignment (also when the value does not change) so that
published variables remain available in the VariableKiosk.

Some traits are adapted to allow `None` as default value and `Float` coerces
its value to float(). `FunctionTrait` holds a value provider (see
`leafsim.functions`) and wraps plain numbers into a `Constant`.
"""
from numbers import Number

from traitlets_pcse import *
import traitlets_pcse as tr


class Instance(tr.Instance):

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_none", True)
        tr.Instance.__init__(self, *args, **kwargs)


class Unicode(tr.Unicode):

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_none", True)
        tr.Unicode.__init__(self, *args, **kwargs)


class Bool(tr.Bool):

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_none", True)
        tr.Bool.__init__(self, *args, **kwargs)


class Float(tr.Float):

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_none", True)
        tr.Float.__init__(self, *args, **kwargs)

    def validate(self, obj, value):
        if value is None and self.allow_none:
            return value
        try:
            value = float(value)
        except (TypeError, ValueError):
            self.error(obj, value)
        return value


class FunctionTrait(tr.TraitType):
    """Trait holding a ValueProvider.

    Numbers are wrapped into a `Constant` provider, providers are accepted as
    they are. Use `.tag(optional=True)` for providers that may be left out of
    the parameter set.
    """
    default_value = None
    info_text = "a number or a ValueProvider"

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("allow_none", True)
        tr.TraitType.__init__(self, *args, **kwargs)

    def validate(self, obj, value):
        from .functions import ValueProvider, Constant

        if isinstance(value, ValueProvider):
            return value
        elif isinstance(value, Number) and not isinstance(value, bool):
            return Constant(value)
        self.error(obj, value)
