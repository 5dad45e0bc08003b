# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Settings for LeafSim

Default values will be read from the file 'leafsim/settings/default_settings.py'
User specific settings are read from '$HOME/.leafsim/user_settings.py'. Any
settings defined in user settings will override the default settings

Setting must be defined as ALL-CAPS and can be accessed as attributes
from leafsim.settings.settings

For example, to use the settings in a module under 'crop':

    from ..settings import settings
    print(settings.BIOMASS_TOLERANCE)

Settings that are not ALL-CAPS will generate a warning. To avoid warnings
for everything that is not a setting (such as imported modules), prepend
and underscore to the name.
"""

import os as _os

LEAFSIM_USER_HOME = _os.path.join(_os.path.expanduser("~"), ".leafsim")

# Tolerance used when comparing biomass and nitrogen amounts (g/m2). Supplies,
# retranslocations and allocations exceeding their bound by more than this
# amount are treated as conservation or capacity violations.
BIOMASS_TOLERANCE = 1e-10

# Upper limit for green cover, keeps 1 - cover strictly positive for
# downstream radiation and energy balance calculations.
MAX_COVER = 0.999999999

# Check weather variables against physically plausible ranges when building
# WeatherDataContainers.
METEO_RANGE_CHECKS = True

# LeafSim sets all rate variables to zero at the start of each day for
# consistency. You can disable this behaviour for increased performance.
ZEROFY = True

# Configuration of logging
# The logging system of LeafSim consists of two log handlers. One that sends log
# messages to the screen ('console') and one that sends message to a file. The
# location and name of the log is defined by LOG_DIR and LOG_FILE_NAME. The
# console and file handlers are given a log level by LOG_LEVEL_CONSOLE and
# LOG_LEVEL_FILE. For detailed log messages of the daily organ phases set the
# level to DEBUG, but this will generate a large number of logging messages.
#
# Log files can become 1Mb large. When this file size is reached a new file is
# opened and the old one is renamed. Only the most recent 7 log files are retained.
LOG_DIR = _os.path.join(LEAFSIM_USER_HOME, "logs")
LOG_FILE_NAME = _os.path.join(LOG_DIR, "leafsim.log")
LOG_LEVEL_FILE = "INFO"
LOG_LEVEL_CONSOLE = "ERROR"
LOG_CONFIG = \
            {
                'version': 1,
                'disable_existing_loggers': True,
                'formatters': {
                    'standard': {
                        'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
                    },
                    'brief': {
                        'format': '[%(levelname)s] - %(message)s'
                    },
                },
                'handlers': {
                    'console': {
                        'level': LOG_LEVEL_CONSOLE,
                        'class': 'logging.StreamHandler',
                        'formatter': 'brief'
                    },
                    'file': {
                        'level': LOG_LEVEL_FILE,
                        'class': 'logging.handlers.RotatingFileHandler',
                        'formatter': 'standard',
                        'filename': LOG_FILE_NAME,
                        'maxBytes': 1024**2,
                        'backupCount': 7,
                        'mode': 'a',
                        'encoding': 'utf8'
                    },
                },
                'root': {
                    'handlers': ['console', 'file'],
                    'level': 'NOTSET'
                }
            }
