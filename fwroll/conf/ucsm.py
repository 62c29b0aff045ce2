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
    cfg.ListOpt('addresses',
                default=[],
                help=_('IP addresses or host names of the UCS Managers. '
                       'Each UCS Manager is a separate hardware domain.')),
    cfg.StrOpt('username',
               help=_('UCS Manager user name, shared by all domains.')),
    cfg.StrOpt('password',
               secret=True,
               help=_('UCS Manager password, shared by all domains.')),
    cfg.PortOpt('port',
                default=443,
                help=_('Port of the UCS Manager XML API.')),
    cfg.BoolOpt('secure',
                default=True,
                help=_('Use HTTPS to talk to the UCS Managers.')),
]


def register_opts(conf):
    conf.register_opts(opts, group='ucsm')
