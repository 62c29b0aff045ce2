#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

import threading

from fwroll.common import exception


class RolloutContext(object):
    """Explicit handles passed to every stage of a rollout.

    :param fleet: a connected :class:`fwroll.drivers.base.FleetManager`.
    :param hardware: a connected
        :class:`fwroll.drivers.base.HardwareManager`.
    :param cancel_event: a ``threading.Event`` used to request cooperative
        cancellation. A new one is created when omitted.
    """

    def __init__(self, fleet, hardware, cancel_event=None):
        self.fleet = fleet
        self.hardware = hardware
        self.cancel_event = cancel_event or threading.Event()

    @property
    def cancelled(self):
        return self.cancel_event.is_set()

    def cancel(self):
        self.cancel_event.set()

    def check_cancelled(self, what):
        """Raise RolloutCancelled if cancellation was requested."""
        if self.cancelled:
            raise exception.RolloutCancelled(what=what)
