# -*- coding: utf-8 -*-
# Copyright (c) 2004-2024 Wageningen Environmental Research, Wageningen-UR
from pydispatch import dispatcher


class DispatcherObject(object):
    """Class only defines the _send_signal() and _connect_signal() methods.

    This class is only to be inherited from, not to be used directly.
    """

    def _send_signal(self, signal, *args, **kwargs):
        """Send <signal> using the dispatcher module.

        The VariableKiosk of this object is used as the sender of the signal.
        Additional arguments are passed to dispatcher.send()
        """

        self.logger.debug("Sent signal: %s" % signal)
        dispatcher.send(signal, self.kiosk, *args, **kwargs)

    def _connect_signal(self, handler, signal):
        """Connect the handler to the signal using the dispatcher module.

        The handler only reacts on signals that have the VariableKiosk of this
        object as sender, so that different model instances in the same
        runtime environment do not react to each others signals.
        """

        dispatcher.connect(handler, signal, sender=self.kiosk)
        self.logger.debug("Connected handler '%s' to signal '%s'." % (handler, signal))
