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

"""Return of a power cycled node to the fleet.

A node is back once the fleet manager can reach it again, which for a node
rebooted out of maintenance means CONNECTED or MAINTENANCE. NOT_RESPONDING
and UNKNOWN keep the wait going. Once maintenance is exited the node must
be reported exactly CONNECTED.
"""

from oslo_log import log

from fwroll.common import polling
from fwroll.common import states
from fwroll.conf import CONF

LOG = log.getLogger(__name__)

REACHABLE_STATES = frozenset([states.ConnectivityState.CONNECTED,
                              states.ConnectivityState.MAINTENANCE])


def wait_for_reconnect(context, node):
    """Wait for a powered on node to be reachable again.

    Cancellation is not observed: the node is powered on and is returned
    to service first.

    :raises: WaitTimeout after ``[rollout]reconnect_timeout`` seconds.
    """
    node.state = polling.wait_for(
        lambda: context.fleet.get_node_state(node),
        lambda state: state in REACHABLE_STATES,
        'node %s to reconnect' % node.name,
        interval=CONF.rollout.reconnect_interval,
        timeout=CONF.rollout.reconnect_timeout)
    LOG.info('Node %(node)s reconnected in state %(state)s',
             {'node': node.name, 'state': node.state.value})
    return node.state


def exit_maintenance(context, node):
    """Take a node out of maintenance and wait until it is CONNECTED.

    Cancellation is not observed once the request was issued, so the node
    is never abandoned half way back to service.

    :raises: WaitTimeout after ``[rollout]reconnect_timeout`` seconds.
    """
    LOG.info('Taking node %s out of maintenance', node.name)
    context.fleet.exit_maintenance(node)
    node.state = polling.wait_for(
        lambda: context.fleet.get_node_state(node),
        lambda state: state == states.ConnectivityState.CONNECTED,
        'node %s to leave maintenance' % node.name,
        interval=CONF.rollout.reconnect_interval,
        timeout=CONF.rollout.reconnect_timeout)
    return node.state
