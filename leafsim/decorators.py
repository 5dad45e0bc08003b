# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Decorators that unlock the states or rates container of a simulation
object for the duration of a method call.

The daily phases of an organ either compute rates (supply, demand, potential
growth) or update states (allocation, actual growth). Decorating a phase
with `prepare_rates` or `prepare_states` makes the intention explicit and
keeps the other container locked while the phase runs. Both decorators can
be stacked on phases that update rates and states.
"""
from functools import wraps


class _Unlocker(object):
    """Non-data descriptor wrapping method `f` with an unlock/lock of the
    containers found under `lockattrs` on the instance.
    """

    def __init__(self, f, lockattr):
        if isinstance(f, _Unlocker):
            self.f = f.f
            self.lockattrs = f.lockattrs + (lockattr,)
        else:
            self.f = f
            self.lockattrs = (lockattr,)

    def _containers(self, instance):
        containers = [getattr(instance, attr) for attr in self.lockattrs]
        return [c for c in containers if c is not None]

    def __get__(self, instance, klass):
        if instance is None:
            return self.f

        @wraps(self.f)
        def wrapper(*args, **kwargs):
            for container in self._containers(instance):
                container.unlock()
            try:
                return self.f(instance, *args, **kwargs)
            finally:
                # the method may have replaced a container
                for container in self._containers(instance):
                    container.lock()

        # Cache the bound wrapper so the descriptor is bypassed next time
        setattr(instance, self.f.__name__, wrapper)
        return wrapper


def prepare_states(f):
    """Method decorator unlocking and locking the `states` object."""
    return _Unlocker(f, "states")


def prepare_rates(f):
    """Method decorator unlocking and locking the `rates` object."""
    return _Unlocker(f, "rates")
