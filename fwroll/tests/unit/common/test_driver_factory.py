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

from stevedore import driver

from fwroll.common import driver_factory
from fwroll.common import exception
from fwroll.drivers.modules import fake
from fwroll.tests import base


@mock.patch.object(driver, 'DriverManager', autospec=True)
class DriverLoadTestCase(base.TestCase):

    def test_get_fleet_manager(self, mgr_mock):
        impl = fake.FakeFleetManager(fake.FakeDatacenter())
        mgr_mock.return_value.driver = impl
        self.assertIs(impl, driver_factory.get_fleet_manager())
        mgr_mock.assert_called_once_with(
            driver_factory.FLEET_MANAGER_NAMESPACE, 'fake',
            invoke_on_load=True)

    def test_get_hardware_manager_by_name(self, mgr_mock):
        impl = fake.FakeHardwareManager(fake.FakeDatacenter())
        mgr_mock.return_value.driver = impl
        self.assertIs(impl, driver_factory.get_hardware_manager('ucsm'))
        mgr_mock.assert_called_once_with(
            driver_factory.HARDWARE_MANAGER_NAMESPACE, 'ucsm',
            invoke_on_load=True)

    def test_configured_name(self, mgr_mock):
        self.config(fleet_manager='vsphere')
        mgr_mock.return_value.driver = fake.FakeFleetManager(
            fake.FakeDatacenter())
        driver_factory.get_fleet_manager()
        mgr_mock.assert_called_once_with(
            driver_factory.FLEET_MANAGER_NAMESPACE, 'vsphere',
            invoke_on_load=True)

    def test_load_failure(self, mgr_mock):
        mgr_mock.side_effect = RuntimeError('no such driver')
        exc = self.assertRaises(exception.DriverLoadError,
                                driver_factory.get_fleet_manager, 'foo')
        self.assertIn('no such driver', str(exc))

    def test_wrong_type(self, mgr_mock):
        mgr_mock.return_value.driver = fake.FakeHardwareManager(
            fake.FakeDatacenter())
        self.assertRaises(exception.DriverLoadError,
                          driver_factory.get_fleet_manager)


class EntryPointTestCase(base.TestCase):

    def test_fake_entry_points(self):
        fleet = driver_factory.get_fleet_manager('fake')
        hardware = driver_factory.get_hardware_manager('fake')
        self.assertIsInstance(fleet, fake.FakeFleetManager)
        self.assertIsInstance(hardware, fake.FakeHardwareManager)
        self.assertIs(fleet.datacenter, hardware.datacenter)
