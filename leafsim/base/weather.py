# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
"""Containers and providers for the daily weather driving the organ model.
"""
import datetime
import logging

from .. import exceptions as exc
from ..settings import settings


class WeatherDataContainer(object):
    """Class for storing weather data elements.

    Weather data elements are provided through keywords that are also the
    attribute names under which the variables can be accessed in the
    WeatherDataContainer. So the keyword TMIN=15 sets an attribute TMIN with
    value 15.

    The following keywords are compulsory:

    :keyword DAY: the day of observation (python datetime.date)
    :keyword RADN: Incoming global radiation (MJ/m2/day)
    :keyword TMIN: Daily minimum temperature (Celsius)
    :keyword TMAX: Daily maximum temperature (Celsius)

    Optional keywords:

    :keyword RAIN: Daily total rainfall (mm/day)
    :keyword VP: Daily mean vapour pressure (hPa)
    :keyword TEMP: Daily mean temperature (Celsius), will otherwise be
                   derived from (TMAX+TMIN)/2.
    """
    required = ["RADN", "TMIN", "TMAX"]
    optional = ["RAIN", "VP", "TEMP"]
    __slots__ = required + optional + ["DAY"]

    units = {"RADN": "MJ/m2/day", "TMIN": "Celsius", "TMAX": "Celsius",
             "RAIN": "mm/day", "VP": "hPa", "TEMP": "Celsius"}

    ranges = {"RADN": (0., 40.),
              "TMIN": (-50., 60.),
              "TMAX": (-50., 60.),
              "RAIN": (0., 250.),
              "VP": (0.06, 199.3),
              "TEMP": (-50., 60.)}

    def __init__(self, *args, **kwargs):

        if len(args) > 0:
            msg = ("WeatherDataContainer should be initialized by providing weather " +
                   "variables through keywords only. Got '%s' instead.")
            raise exc.LeafSimError(msg % (args,))

        if "DAY" not in kwargs:
            msg = "Date of observations 'DAY' not provided when building WeatherDataContainer."
            raise exc.LeafSimError(msg)
        self.DAY = kwargs.pop("DAY")

        for varname in self.required:
            value = kwargs.pop(varname, None)
            try:
                setattr(self, varname, float(value))
            except (ValueError, TypeError) as e:
                msg = "%s: Weather attribute '%s' missing or invalid numerical value: %s"
                raise exc.WeatherDataProviderError(msg % (self.DAY, varname, value))

        for varname in self.optional:
            value = kwargs.pop(varname, None)
            if value is None:
                continue
            try:
                setattr(self, varname, float(value))
            except (ValueError, TypeError):
                msg = "%s: Weather attribute '%s' has invalid numerical value: %s"
                logging.getLogger(__name__).warning(msg, self.DAY, varname, value)

        if not hasattr(self, "TEMP"):
            self.TEMP = (self.TMIN + self.TMAX)/2.

        if len(kwargs) > 0:
            msg = "WeatherDataContainer: unknown keywords '%s' are ignored!"
            logging.getLogger(__name__).warning(msg, list(kwargs.keys()))

    def __setattr__(self, key, value):
        # Range checking on known meteo variables, unless disabled by the user
        if settings.METEO_RANGE_CHECKS and key in self.ranges:
            vmin, vmax = self.ranges[key]
            if not vmin <= value <= vmax:
                msg = "Value (%s) for meteo variable '%s' outside allowed range (%s, %s)." % (
                    value, key, vmin, vmax)
                raise exc.WeatherDataProviderError(msg)
        object.__setattr__(self, key, value)

    def __str__(self):
        msg = "Weather data for %s (DAY)\n" % self.DAY
        for v in self.required + self.optional:
            value = getattr(self, v, None)
            if value is None:
                continue
            msg += "%5s: %12.2f %9s\n" % (v, value, self.units[v])
        return msg


class WeatherDataProvider(object):
    """In-memory provider of daily weather, indexed by date.

    Weather records are stored with `add()` or given at construction as an
    iterable of dicts with the WeatherDataContainer keywords. Calling the
    provider with a date returns the WeatherDataContainer for that day.

    example::

        >>> wdp = WeatherDataProvider([{"DAY": date(2020, 1, 1), "RADN": 25.,
        ...                             "TMIN": 15., "TMAX": 32.}])
        >>> wdp(date(2020, 1, 1)).RADN
        25.0
    """

    def __init__(self, records=None):
        self.store = {}
        if records is not None:
            for record in records:
                self.add(WeatherDataContainer(**record))

    @property
    def logger(self):
        loggername = "%s.%s" % (self.__class__.__module__,
                                self.__class__.__name__)
        return logging.getLogger(loggername)

    def add(self, wdc):
        """Stores the WeatherDataContainer under its DAY."""
        self.store[self.check_keydate(wdc.DAY)] = wdc

    @staticmethod
    def check_keydate(key):
        """Check representations of date for storage/retrieval of weather data.
        """
        if isinstance(key, datetime.datetime):
            return key.date()
        elif isinstance(key, datetime.date):
            return key
        msg = "Key for WeatherDataProvider not recognized as date: %s"
        raise KeyError(msg % key)

    @property
    def first_date(self):
        return min(self.store)

    @property
    def last_date(self):
        return max(self.store)

    def __call__(self, day):
        keydate = self.check_keydate(day)
        msg = "Retrieving weather data for day %s" % keydate
        self.logger.debug(msg)
        try:
            return self.store[keydate]
        except KeyError:
            msg = "No weather data for %s." % keydate
            raise exc.WeatherDataProviderError(msg)

    def __len__(self):
        return len(self.store)
