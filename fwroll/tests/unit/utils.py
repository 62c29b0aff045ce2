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

"""Fwroll test utilities."""

from fwroll.common import context
from fwroll.drivers import base
from fwroll.drivers.modules import fake

CLUSTER = 'prod-a'
DOMAIN = 'ucs-a'
OLD_FIRMWARE = '4.1(3a)'
NEW_FIRMWARE = '4.1(3b)'


def get_test_mac(index):
    return '00:25:b5:00:00:%02x' % index


def get_test_datacenter(**kw):
    """Return a datacenter for a rollout of NEW_FIRMWARE over prod-a.

    * esx-01 is bound to a profile on OLD_FIRMWARE and must be updated.
    * esx-02 is bound to a profile already on NEW_FIRMWARE.
    * esx-03 has no hardware profile bound to its network identity.
    """
    datacenter = fake.FakeDatacenter()
    for index in (1, 2, 3):
        datacenter.add_host('esx-%02d' % index, kw.get('cluster', CLUSTER),
                            nics=[(get_test_mac(index), 10000)])
    datacenter.add_profile('org-root/ls-esx-01', DOMAIN, OLD_FIRMWARE,
                           identities=[get_test_mac(1)])
    datacenter.add_profile('org-root/ls-esx-02', DOMAIN, NEW_FIRMWARE,
                           identities=[get_test_mac(2)])
    datacenter.add_firmware_target(OLD_FIRMWARE, DOMAIN)
    datacenter.add_firmware_target(NEW_FIRMWARE, DOMAIN)
    return datacenter


def get_test_context(datacenter=None, **kw):
    datacenter = datacenter or get_test_datacenter()
    return context.RolloutContext(fake.FakeFleetManager(datacenter),
                                  fake.FakeHardwareManager(datacenter), **kw)


def get_test_node(name='esx-01', **kw):
    return base.Node(name, cluster=kw.pop('cluster', CLUSTER), **kw)


def get_test_profile(id='org-root/ls-esx-01', **kw):
    kw.setdefault('firmware_policy', OLD_FIRMWARE)
    return base.HardwareProfile(id, kw.pop('domain', DOMAIN), **kw)
