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

"""
Per-node rollout lifecycle.

A node moves strictly forward through the states below, one at a time. The
``fail`` event is accepted from every non-terminal state so that any error
ends the node's lifecycle without leaving it half processed.

Use :func:`new_machine` to get an initialized copy for one node; the module
level machine is frozen and shared.
"""

from oslo_log import log as logging

from fwroll.common import fsm
from fwroll.common import states as st

LOG = logging.getLogger(__name__)

#####################
# State machine model
#####################


def on_exit(old_state, event):
    """Used to log when a state is exited."""
    LOG.debug("Exiting old state '%s' in response to event '%s'",
              old_state, event)


def on_enter(new_state, event):
    """Used to log when entering a state."""
    LOG.debug("Entering new state '%s' in response to event '%s'",
              new_state, event)


watchers = {}
watchers['on_exit'] = on_exit
watchers['on_enter'] = on_enter

machine = fsm.FSM()

for state in (st.SELECTED, st.RESOLVING, st.VALIDATING, st.NEEDS_UPDATE,
              st.DRAINING, st.REMEDIATING):
    machine.add_state(state, **watchers)

for state in st.SHIELDED_STATES:
    machine.add_state(state, shielded=True, **watchers)

for state in st.TERMINAL_STATES:
    machine.add_state(state, terminal=True, **watchers)

machine.add_transition(st.SELECTED, st.RESOLVING, 'resolve')
machine.add_transition(st.RESOLVING, st.VALIDATING, 'validate')
machine.add_transition(st.VALIDATING, st.SKIPPED, 'skip')
machine.add_transition(st.VALIDATING, st.NEEDS_UPDATE, 'update')
machine.add_transition(st.NEEDS_UPDATE, st.DRAINING, 'drain')
machine.add_transition(st.DRAINING, st.REMEDIATING, 'remediate')
machine.add_transition(st.DRAINING, st.POWERING_DOWN, 'power_down')
machine.add_transition(st.REMEDIATING, st.POWERING_DOWN, 'power_down')
machine.add_transition(st.POWERING_DOWN, st.AWAITING_POWER_OFF,
                       'wait_power_off')
machine.add_transition(st.AWAITING_POWER_OFF, st.APPLYING_FIRMWARE, 'apply')
machine.add_transition(st.APPLYING_FIRMWARE, st.ACKNOWLEDGING, 'acknowledge')
machine.add_transition(st.ACKNOWLEDGING, st.AWAITING_ASSOCIATION,
                       'wait_association')
machine.add_transition(st.AWAITING_ASSOCIATION, st.POWERING_UP, 'power_up')
machine.add_transition(st.POWERING_UP, st.AWAITING_RECONNECT,
                       'wait_reconnect')
machine.add_transition(st.AWAITING_RECONNECT, st.EXITING_MAINTENANCE,
                       'exit_maintenance')
machine.add_transition(st.EXITING_MAINTENANCE, st.DONE, 'done')

for state in (st.SELECTED, st.RESOLVING, st.VALIDATING, st.NEEDS_UPDATE,
              st.DRAINING, st.REMEDIATING, st.POWERING_DOWN,
              st.AWAITING_POWER_OFF, st.APPLYING_FIRMWARE, st.ACKNOWLEDGING,
              st.AWAITING_ASSOCIATION, st.POWERING_UP, st.AWAITING_RECONNECT,
              st.EXITING_MAINTENANCE):
    machine.add_transition(state, st.FAILED, 'fail')

machine.freeze()


def new_machine():
    """Return a machine for a single node, positioned on SELECTED."""
    node_machine = machine.copy()
    node_machine.initialize(st.SELECTED)
    return node_machine
