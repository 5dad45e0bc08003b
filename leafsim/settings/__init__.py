# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
import os
import importlib

from . import default_settings


class Settings(object):
    """
    Settings for LeafSim.

    Default values will be read from the module leafsim.settings.default_settings.py
    User settings are read from $HOME/.leafsim/user_settings.py when present and
    override the default ones; see the default settings file for a list of all
    possible variables.
    """

    def __setattr__(self, name, value):
        if name == "LOG_DIR":
            os.makedirs(value, exist_ok=True)
        object.__setattr__(self, name, value)

    def __init__(self):
        self._update_from(default_settings, "default_settings")

        try:
            mod = importlib.import_module("user_settings")
        except ModuleNotFoundError as e:
            if e.name != "user_settings":
                raise
        else:
            self._update_from(mod, "user_settings")

    def _update_from(self, mod, label):
        # only ALL_CAPS names are settings
        for setting in dir(mod):
            if setting.isupper():
                setattr(self, setting, getattr(mod, setting))
            elif setting.startswith("_"):
                pass
            else:
                msg = ("Warning: settings should be ALL_CAPS. Setting '%s' in %s " +
                       "will be ignored.") % (setting, label)
                print(msg)

# Initialize the settings from default_settings and users_settings
settings = Settings()
