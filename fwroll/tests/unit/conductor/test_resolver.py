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
from fwroll.conductor import resolver
from fwroll.tests import base
from fwroll.tests.unit import utils


class ResolveProfileTestCase(base.TestCase):

    def setUp(self):
        super(ResolveProfileTestCase, self).setUp()
        self.datacenter = utils.get_test_datacenter()
        self.context = utils.get_test_context(self.datacenter)

    def test_resolve(self):
        profile = resolver.resolve_profile(self.context,
                                           utils.get_test_node('esx-01'))
        self.assertEqual('org-root/ls-esx-01', profile.id)
        self.assertEqual(utils.DOMAIN, profile.domain)
        self.assertEqual(utils.OLD_FIRMWARE, profile.firmware_policy)
        self.assertEqual([], self.datacenter.mutating_calls)

    def test_resolve_case_insensitive(self):
        self.datacenter.host('esx-01').nics = [
            (utils.get_test_mac(1).upper(), 10000)]
        profile = resolver.resolve_profile(self.context,
                                           utils.get_test_node('esx-01'))
        self.assertEqual('org-root/ls-esx-01', profile.id)

    def test_first_active_interface(self):
        self.datacenter.host('esx-01').nics = [
            ('00:25:b5:00:00:99', 0), (utils.get_test_mac(1), 10000)]
        profile = resolver.resolve_profile(self.context,
                                           utils.get_test_node('esx-01'))
        self.assertEqual('org-root/ls-esx-01', profile.id)

    def test_no_active_interface(self):
        self.datacenter.host('esx-01').nics = [(utils.get_test_mac(1), 0)]
        exc = self.assertRaises(exception.NetworkIdentityNotFound,
                                resolver.resolve_profile, self.context,
                                utils.get_test_node('esx-01'))
        self.assertEqual('CorrelationNotFound', exc.reason)

    def test_not_found(self):
        exc = self.assertRaises(exception.CorrelationNotFound,
                                resolver.resolve_profile, self.context,
                                utils.get_test_node('esx-03'))
        self.assertIn(utils.get_test_mac(3), str(exc))

    def test_ambiguous(self):
        self.datacenter.add_profile('org-root/ls-esx-01-copy', 'ucs-b',
                                    utils.OLD_FIRMWARE,
                                    identities=[utils.get_test_mac(1)])
        exc = self.assertRaises(exception.CorrelationAmbiguous,
                                resolver.resolve_profile, self.context,
                                utils.get_test_node('esx-01'))
        self.assertEqual('CorrelationAmbiguous', exc.reason)
        self.assertIn('org-root/ls-esx-01-copy', str(exc))

    def test_ambiguous_not_strict(self):
        self.config(strict_correlation=False, group='rollout')
        self.datacenter.add_profile('org-root/ls-aaa', 'ucs-b',
                                    utils.OLD_FIRMWARE,
                                    identities=[utils.get_test_mac(1)])
        profile = resolver.resolve_profile(self.context,
                                           utils.get_test_node('esx-01'))
        self.assertEqual('org-root/ls-aaa', profile.id)

    def test_strict_argument_overrides_config(self):
        self.config(strict_correlation=False, group='rollout')
        self.datacenter.add_profile('org-root/ls-aaa', 'ucs-b',
                                    utils.OLD_FIRMWARE,
                                    identities=[utils.get_test_mac(1)])
        self.assertRaises(exception.CorrelationAmbiguous,
                          resolver.resolve_profile, self.context,
                          utils.get_test_node('esx-01'), strict=True)

    def test_not_cached(self):
        node = utils.get_test_node('esx-01')
        resolver.resolve_profile(self.context, node)
        resolver.resolve_profile(self.context, node)
        self.assertEqual(
            2, len(self.datacenter.calls_to('find_profiles_by_identity')))
