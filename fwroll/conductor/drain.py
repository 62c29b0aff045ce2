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

"""Evacuation of workloads and optional baseline remediation."""

from oslo_log import log

from fwroll.common import polling
from fwroll.common import states
from fwroll.conf import CONF

LOG = log.getLogger(__name__)


def _is_drained(state):
    return state == states.ConnectivityState.MAINTENANCE


def wait_for_maintenance(context, node):
    """Wait for the fleet manager to report a node in maintenance.

    :returns: the observed :class:`fwroll.common.states.ConnectivityState`.
    :raises: WaitTimeout after ``[rollout]drain_timeout`` seconds.
    :raises: RolloutCancelled if cancellation was requested meanwhile.
    """
    node.state = polling.wait_for(
        lambda: context.fleet.get_node_state(node),
        _is_drained,
        'node %s to enter maintenance' % node.name,
        interval=CONF.rollout.drain_interval,
        timeout=CONF.rollout.drain_timeout,
        cancel_event=context.cancel_event)
    return node.state


def drain_node(context, node):
    """Evacuate a node and wait until it is in maintenance."""
    LOG.info('Draining node %s', node.name)
    context.fleet.drain(node)
    wait_for_maintenance(context, node)
    LOG.info('Node %s is in maintenance', node.name)


def remediate_node(context, node, baseline):
    """Apply a patch baseline to a drained node.

    Remediation may bring workloads back or take the node out of
    maintenance, so the drained state is confirmed again afterwards and the
    node is evacuated once more if needed.
    """
    LOG.info('Remediating node %(node)s with baseline %(baseline)s',
             {'node': node.name, 'baseline': baseline})
    context.fleet.remediate(node, baseline)
    node.state = context.fleet.get_node_state(node)
    if not _is_drained(node.state):
        LOG.info('Node %(node)s left maintenance during remediation '
                 '(now %(state)s), draining it again',
                 {'node': node.name, 'state': node.state.value})
        drain_node(context, node)
