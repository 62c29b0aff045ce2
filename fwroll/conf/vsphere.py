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

opts = [
    cfg.HostAddressOpt('host',
                       help=_('Address of the vCenter server managing the '
                              'fleet.')),
    cfg.PortOpt('port',
                default=443,
                help=_('Port of the vCenter server.')),
    cfg.StrOpt('username',
               help=_('vCenter user name.')),
    cfg.StrOpt('password',
               secret=True,
               help=_('vCenter password.')),
    cfg.BoolOpt('insecure',
                default=False,
                help=_('Skip TLS certificate validation when connecting to '
                       'vCenter.')),
    cfg.IntOpt('task_interval',
               default=10, min=0,
               help=_('Seconds between checks of a vCenter task started '
                      'by the driver, such as a baseline remediation.')),
    cfg.IntOpt('task_timeout',
               default=7200, min=0,
               help=_('Maximum number of seconds to wait for a vCenter task '
                      'started by the driver. 0 means wait forever.')),
]


def register_opts(conf):
    conf.register_opts(opts, group='vsphere')
