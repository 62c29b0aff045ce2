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

from oslo_config import cfg

from fwroll.common.i18n import _


driver_opts = [
    cfg.StrOpt('fleet_manager',
               default='vsphere',
               help=_('Name of the fleet manager driver to load from the '
                      '"fwroll.fleet_managers" entry point namespace. The '
                      'fleet manager tracks node membership, workload '
                      'placement and connectivity.')),
    cfg.StrOpt('hardware_manager',
               default='ucsm',
               help=_('Name of the hardware manager driver to load from the '
                      '"fwroll.hardware_managers" entry point namespace. '
                      'The hardware manager tracks hardware profiles, '
                      'firmware policies and power state.')),
]

exc_log_opts = [
    cfg.BoolOpt('fatal_exception_format_errors',
                default=False,
                help=_('Used if there is a formatting error when generating '
                       'an exception message (a programming error). If True, '
                       'raise an exception; if False, use the unformatted '
                       'message.')),
]


def register_opts(conf):
    conf.register_opts(driver_opts)
    conf.register_opts(exc_log_opts)


def list_opts():
    return driver_opts + exc_log_opts
