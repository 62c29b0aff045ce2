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

from oslo_log import log
from stevedore import driver

from fwroll.common import exception
from fwroll.conf import CONF
from fwroll.drivers import base


LOG = log.getLogger(__name__)

FLEET_MANAGER_NAMESPACE = 'fwroll.fleet_managers'
HARDWARE_MANAGER_NAMESPACE = 'fwroll.hardware_managers'


def _load(namespace, name, expected):
    try:
        mgr = driver.DriverManager(namespace, name, invoke_on_load=True)
    except Exception as e:
        LOG.error('Failed to load driver %(name)s from %(namespace)s: '
                  '%(err)s', {'name': name, 'namespace': namespace, 'err': e})
        raise exception.DriverLoadError(driver=name, namespace=namespace,
                                        reason=e)
    impl = mgr.driver
    if not isinstance(impl, expected):
        raise exception.DriverLoadError(
            driver=name, namespace=namespace,
            reason='%s is not a %s' % (type(impl).__name__,
                                       expected.__name__))
    LOG.debug('Loaded driver %(name)s from %(namespace)s',
              {'name': name, 'namespace': namespace})
    return impl


def get_fleet_manager(name=None):
    """Instantiate the configured fleet manager driver.

    :param name: entry point name, defaults to ``[DEFAULT]fleet_manager``.
    :raises: DriverLoadError if the driver cannot be loaded.
    """
    return _load(FLEET_MANAGER_NAMESPACE, name or CONF.fleet_manager,
                 base.FleetManager)


def get_hardware_manager(name=None):
    """Instantiate the configured hardware manager driver.

    :param name: entry point name, defaults to ``[DEFAULT]hardware_manager``.
    :raises: DriverLoadError if the driver cannot be loaded.
    """
    return _load(HARDWARE_MANAGER_NAMESPACE, name or CONF.hardware_manager,
                 base.HardwareManager)
