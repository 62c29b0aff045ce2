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

from fwroll.common import exception
from fwroll.common import state_machine
from fwroll.common import states
from fwroll.tests import base

UPDATE_EVENTS = ['resolve', 'validate', 'update', 'drain', 'remediate',
                 'power_down', 'wait_power_off', 'apply', 'acknowledge',
                 'wait_association', 'power_up', 'wait_reconnect',
                 'exit_maintenance', 'done']


class RolloutStateMachineTestCase(base.TestCase):

    def test_new_machine(self):
        m = state_machine.new_machine()
        self.assertEqual(states.SELECTED, m.current_state)
        self.assertIsNot(state_machine.machine, m)

    def test_machines_are_independent(self):
        m1 = state_machine.new_machine()
        m2 = state_machine.new_machine()
        m1.process_event('resolve')
        self.assertEqual(states.RESOLVING, m1.current_state)
        self.assertEqual(states.SELECTED, m2.current_state)

    def test_full_update(self):
        m = state_machine.new_machine()
        visited = []
        for event in UPDATE_EVENTS:
            m.process_event(event)
            visited.append(m.current_state)
        self.assertEqual(states.DONE, m.current_state)
        self.assertTrue(m.terminated)
        self.assertEqual([s for s in visited if m.is_shielded(s)],
                         [states.POWERING_DOWN, states.AWAITING_POWER_OFF,
                          states.APPLYING_FIRMWARE, states.ACKNOWLEDGING,
                          states.AWAITING_ASSOCIATION, states.POWERING_UP,
                          states.AWAITING_RECONNECT,
                          states.EXITING_MAINTENANCE])

    def test_remediation_is_optional(self):
        m = state_machine.new_machine()
        for event in ('resolve', 'validate', 'update', 'drain',
                      'power_down'):
            m.process_event(event)
        self.assertEqual(states.POWERING_DOWN, m.current_state)

    def test_skip(self):
        m = state_machine.new_machine()
        for event in ('resolve', 'validate', 'skip'):
            m.process_event(event)
        self.assertEqual(states.SKIPPED, m.current_state)
        self.assertTrue(m.terminated)

    def test_no_stage_skipping(self):
        m = state_machine.new_machine()
        for event in ('resolve', 'validate', 'update'):
            m.process_event(event)
        self.assertRaises(exception.InvalidState, m.process_event,
                          'power_down')
        self.assertRaises(exception.InvalidState, m.process_event, 'apply')

    def test_fail_from_every_non_terminal_state(self):
        for count in range(len(UPDATE_EVENTS)):
            m = state_machine.new_machine()
            for event in UPDATE_EVENTS[:count]:
                m.process_event(event)
            m.process_event('fail')
            self.assertEqual(states.FAILED, m.current_state)

    def test_terminal_states_are_final(self):
        m = state_machine.new_machine()
        m.process_event('fail')
        self.assertRaises(exception.InvalidState, m.process_event, 'fail')
        self.assertRaises(exception.InvalidState, m.process_event, 'resolve')

    def test_shielded_states(self):
        for state in states.SHIELDED_STATES:
            self.assertTrue(state_machine.machine.is_shielded(state))
        for state in (states.SELECTED, states.RESOLVING, states.VALIDATING,
                      states.NEEDS_UPDATE, states.DRAINING,
                      states.REMEDIATING):
            self.assertFalse(state_machine.machine.is_shielded(state))

    def test_power_cycle_is_shielded(self):
        self.assertTrue(states.POWER_CYCLE_STATES < states.SHIELDED_STATES)
        self.assertNotIn(states.AWAITING_RECONNECT, states.POWER_CYCLE_STATES)
