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

from unittest import mock

from fwroll.common import polling
from fwroll.common import states
from fwroll.conductor import power
from fwroll.tests import base
from fwroll.tests.unit import utils


class PowerTestCase(base.TestCase):

    def setUp(self):
        super(PowerTestCase, self).setUp()
        self.datacenter = utils.get_test_datacenter()
        self.context = utils.get_test_context(self.datacenter)
        self.node = utils.get_test_node('esx-01')
        self.profile = utils.get_test_profile()

    def test_shutdown_powers_hardware_off(self):
        power.request_shutdown(self.context, self.node)
        state = power.wait_for_power_off(self.context, self.profile)
        self.assertEqual(states.PowerState.OFF, state)
        self.assertEqual(states.PowerState.OFF, self.profile.power_state)
        self.assertEqual(['shutdown', 'get_power_state'],
                         [c.method for c in self.datacenter.calls])

    def test_wait_for_power_off_authoritative(self):
        observed = iter([states.PowerState.ON, states.PowerState.UNKNOWN,
                         states.PowerState.OFF])
        with mock.patch.object(self.context.hardware, 'get_power_state',
                               autospec=True,
                               side_effect=lambda p: next(observed)) as gm:
            power.wait_for_power_off(self.context, self.profile)
        self.assertEqual(3, gm.call_count)

    @mock.patch.object(polling, 'wait_for', autospec=True)
    def test_wait_for_power_off_ignores_cancellation(self, wait_mock):
        self.config(power_off_interval=40, power_off_timeout=1800,
                    group='rollout')
        wait_mock.return_value = states.PowerState.OFF
        self.context.cancel()
        power.wait_for_power_off(self.context, self.profile)
        wait_mock.assert_called_once_with(
            mock.ANY, mock.ANY,
            'hardware profile org-root/ls-esx-01 to power off',
            interval=40, timeout=1800)

    def test_power_up(self):
        fake_profile = self.datacenter.profile('org-root/ls-esx-01')
        fake_profile.power_state = states.PowerState.OFF
        power.power_up(self.context, self.profile)
        self.assertEqual(states.PowerState.ON, fake_profile.power_state)
        call = self.datacenter.calls_to('set_power_state')[0]
        self.assertEqual((states.PowerState.ON,), call.args)
