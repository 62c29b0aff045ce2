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
    cfg.StrOpt('inventory_file',
               help=_('Path to a JSON file describing the nodes and '
                      'hardware profiles simulated by the "fake" fleet and '
                      'hardware managers. Useful to rehearse a rollout. '
                      'When unset the fake drivers start empty.')),
]


def register_opts(conf):
    conf.register_opts(opts, group='fake')
