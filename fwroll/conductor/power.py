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

"""Power cycling of a node around its firmware change.

The hardware manager's power state is authoritative: the operating system
acknowledging a shutdown is not enough to touch the firmware.
"""

from oslo_log import log

from fwroll.common import polling
from fwroll.common import states
from fwroll.conf import CONF

LOG = log.getLogger(__name__)


def request_shutdown(context, node):
    """Ask the node's operating system to shut down."""
    LOG.info('Shutting down node %s', node.name)
    context.fleet.shutdown(node)


def wait_for_power_off(context, profile):
    """Wait until the hardware reports the profile powered off.

    Cancellation is not observed: the node is already going down.

    :raises: WaitTimeout after ``[rollout]power_off_timeout`` seconds.
    """
    profile.power_state = polling.wait_for(
        lambda: context.hardware.get_power_state(profile),
        lambda state: state == states.PowerState.OFF,
        'hardware profile %s to power off' % profile.id,
        interval=CONF.rollout.power_off_interval,
        timeout=CONF.rollout.power_off_timeout)
    LOG.info('Hardware profile %s is powered off', profile.id)
    return profile.power_state


def power_up(context, profile):
    """Request power on. Reconnection is awaited by a later stage."""
    LOG.info('Powering on hardware profile %s', profile.id)
    context.hardware.set_power_state(profile, states.PowerState.ON)
