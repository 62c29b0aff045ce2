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
from unittest import mock

from fwroll.common import exception
from fwroll.common import polling
from fwroll.tests import base


class WaitForTestCase(base.TestCase):

    def test_immediate(self):
        fetch = mock.Mock(return_value='off')
        result = polling.wait_for(fetch, lambda v: v == 'off', 'power off',
                                  interval=0)
        self.assertEqual('off', result)
        fetch.assert_called_once_with()

    def test_retries_until_predicate(self):
        fetch = mock.Mock(side_effect=['on', 'on', 'off'])
        result = polling.wait_for(fetch, lambda v: v == 'off', 'power off',
                                  interval=0, timeout=5)
        self.assertEqual('off', result)
        self.assertEqual(3, fetch.call_count)

    @mock.patch('time.sleep', autospec=True)
    def test_sleeps_between_checks(self, sleep_mock):
        fetch = mock.Mock(side_effect=['on', 'on', 'off'])
        polling.wait_for(fetch, lambda v: v == 'off', 'power off',
                         interval=7, timeout=0)
        sleep_mock.assert_has_calls([mock.call(7), mock.call(7)])

    @mock.patch('time.sleep', autospec=True)
    def test_backoff_is_capped(self, sleep_mock):
        self.config(poll_backoff=2.0, max_poll_interval=10, group='rollout')
        fetch = mock.Mock(side_effect=['on', 'on', 'on', 'on', 'off'])
        polling.wait_for(fetch, lambda v: v == 'off', 'power off',
                         interval=3)
        self.assertEqual([3, 6, 10, 10],
                         [c[0][0] for c in sleep_mock.call_args_list])

    def test_timeout(self):
        fetch = mock.Mock(return_value='on')
        exc = self.assertRaises(exception.WaitTimeout, polling.wait_for,
                                fetch, lambda v: v == 'off', 'power off',
                                interval=0.01, timeout=0.05)
        self.assertIn('power off', str(exc))
        self.assertEqual('Timeout', exc.reason)
        self.assertGreater(fetch.call_count, 1)

    def test_fetch_error_propagates(self):
        fetch = mock.Mock(side_effect=exception.FleetManagerError(
            operation='reading', node='esx-01', error='boom'))
        self.assertRaises(exception.FleetManagerError, polling.wait_for,
                          fetch, lambda v: True, 'anything', interval=0,
                          timeout=5)
        fetch.assert_called_once_with()

    def test_abort(self):
        def _abort(value):
            if value == 'failed':
                raise exception.AssociationFailed(profile='p', target='t')

        fetch = mock.Mock(side_effect=['associating', 'failed', 'associated'])
        self.assertRaises(exception.AssociationFailed, polling.wait_for,
                          fetch, lambda v: v == 'associated', 'association',
                          interval=0, timeout=5, abort=_abort)
        self.assertEqual(2, fetch.call_count)

    def test_cancelled_before_start(self):
        event = threading.Event()
        event.set()
        fetch = mock.Mock(return_value='on')
        self.assertRaises(exception.RolloutCancelled, polling.wait_for,
                          fetch, lambda v: v == 'off', 'power off',
                          interval=0, timeout=5, cancel_event=event)
        fetch.assert_called_once_with()

    def test_cancelled_while_waiting(self):
        event = threading.Event()

        def _fetch():
            if fetch_mock.call_count == 2:
                event.set()
            return 'on'

        fetch_mock = mock.Mock(side_effect=_fetch)
        self.assertRaises(exception.RolloutCancelled, polling.wait_for,
                          fetch_mock, lambda v: v == 'off', 'power off',
                          interval=0, cancel_event=event)
        self.assertEqual(2, fetch_mock.call_count)

    def test_cancel_event_not_set(self):
        event = threading.Event()
        fetch = mock.Mock(side_effect=['on', 'off'])
        self.assertEqual('off', polling.wait_for(
            fetch, lambda v: v == 'off', 'power off', interval=0, timeout=5,
            cancel_event=event))
