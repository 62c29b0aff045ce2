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

import re
from unittest import mock

from fwroll.common import exception
from fwroll.tests import base


class Unserializable(object):
    def __str__(self):
        raise NotImplementedError('nostr')


class TestException(exception.FwrollException):
    _msg_fmt = 'Some exception: %(spam)s, %(ham)s'


class TestFwrollException(base.TestCase):
    def test___init___json_serializable(self):
        exc = TestException(spam=[1, 2, 3], ham='eggs')
        self.assertIn('[1, 2, 3]', str(exc))
        self.assertEqual('[1, 2, 3]', exc.kwargs['spam'])

    def test___init___string_serializable(self):
        exc = TestException(
            spam=type('ni', (object,), dict(a=1, b=2))(), ham='eggs'
        )
        check_str = 'ni object at'
        self.assertIn(check_str, str(exc))
        self.assertIn(check_str, exc.kwargs['spam'])

    @mock.patch.object(exception.LOG, 'error', autospec=True)
    def test___init___invalid_kwarg(self, log_mock):
        self.config(fatal_exception_format_errors=False)
        e = TestException(spam=Unserializable(), ham='eggs')
        message = \
            log_mock.call_args_list[0][0][0] % log_mock.call_args_list[0][0][1]
        self.assertIsNotNone(
            re.search('spam: .*JSON.* NotImplementedError: nostr', message),
            message
        )
        self.assertEqual({'ham': '"eggs"'}, e.kwargs)

    @mock.patch.object(exception.LOG, 'exception', autospec=True)
    def test___init___missing_kwarg(self, log_mock):
        self.config(fatal_exception_format_errors=False)
        e = TestException(ham='eggs')
        self.assertEqual(TestException._msg_fmt, str(e))
        self.assertTrue(log_mock.called)

    @mock.patch.object(exception.LOG, 'exception', autospec=True)
    def test___init___missing_kwarg_reraise(self, log_mock):
        self.config(fatal_exception_format_errors=True)
        self.assertRaises(KeyError, TestException, ham='eggs')
        self.assertTrue(log_mock.called)

    def test___init___message(self):
        e = TestException('plain message')
        self.assertEqual('plain message', str(e))


class TestReasons(base.TestCase):

    def test_default_reason(self):
        self.assertEqual('Error', exception.FwrollException().reason)
        self.assertEqual('Error',
                         exception.PowerStateFailure(
                             profile='p', pstate='on',
                             expected='off').reason)

    def test_correlation_reasons(self):
        self.assertEqual(
            'CorrelationNotFound',
            exception.CorrelationNotFound(identity='m', node='n').reason)
        self.assertEqual(
            'CorrelationNotFound',
            exception.NetworkIdentityNotFound(node='n').reason)
        self.assertEqual(
            'CorrelationAmbiguous',
            exception.CorrelationAmbiguous(count=2, identity='m', node='n',
                                           profiles='a, b').reason)

    def test_external_call_reasons(self):
        for exc in (exception.FleetManagerError(operation='draining',
                                                node='n', error='boom'),
                    exception.HardwareManagerError(operation='x',
                                                   profile='p',
                                                   error='boom'),
                    exception.ConnectionFailed(system='s', address='a',
                                               error='boom'),
                    exception.AssociationFailed(profile='p', target='t')):
            self.assertIsInstance(exc, exception.ExternalCallFailed)
            self.assertEqual('ExternalCallFailed', exc.reason)

    def test_wait_reasons(self):
        self.assertEqual('Timeout',
                         exception.WaitTimeout(timeout=5, what='x').reason)
        self.assertEqual('Cancelled',
                         exception.RolloutCancelled(what='x').reason)

    def test_target_not_found_message(self):
        e = exception.TargetNotFound(target='4.1(3b)', count=2,
                                     domain='ucs-a')
        self.assertEqual('TargetNotFound', e.reason)
        self.assertIn('found 2 times in hardware domain ucs-a', str(e))
