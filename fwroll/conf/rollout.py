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
    cfg.IntOpt('drain_interval',
               default=10, min=0,
               help=_('Seconds between checks that a node reached the '
                      'maintenance state after a drain request.')),
    cfg.IntOpt('drain_timeout',
               default=3600, min=0,
               help=_('Maximum number of seconds to wait for a node to be '
                      'drained. 0 means wait forever.')),
    cfg.IntOpt('power_off_interval',
               default=40, min=0,
               help=_('Seconds between checks of the hardware power state '
                      'after a node was asked to shut down.')),
    cfg.IntOpt('power_off_timeout',
               default=1800, min=0,
               help=_('Maximum number of seconds to wait for the hardware '
                      'to report a node powered off. 0 means wait '
                      'forever.')),
    cfg.IntOpt('association_interval',
               default=60, min=0,
               help=_('Seconds between checks of the hardware profile '
                      'association state after a firmware policy '
                      'change.')),
    cfg.IntOpt('association_timeout',
               default=3600, min=0,
               help=_('Maximum number of seconds to wait for a hardware '
                      'profile to be associated again. 0 means wait '
                      'forever.')),
    cfg.IntOpt('reconnect_interval',
               default=60, min=0,
               help=_('Seconds between checks of the node connectivity '
                      'after power on and after leaving maintenance.')),
    cfg.IntOpt('reconnect_timeout',
               default=3600, min=0,
               help=_('Maximum number of seconds to wait for a node to '
                      'reconnect to the fleet manager. 0 means wait '
                      'forever.')),
    cfg.FloatOpt('poll_backoff',
                 default=1.0, min=1.0,
                 help=_('Multiplier applied to a poll interval after every '
                        'unsuccessful check. 1.0 keeps the interval '
                        'fixed.')),
    cfg.IntOpt('max_poll_interval',
               default=300, min=1,
               help=_('Upper bound, in seconds, of a poll interval grown by '
                      'poll_backoff.')),
    cfg.BoolOpt('strict_correlation',
                default=True,
                help=_('Fail a node whose network identity matches more '
                       'than one hardware profile. When disabled, the first '
                       'matching profile by identifier is used and a warning '
                       'is logged.')),
    cfg.BoolOpt('power_on_after_failure',
                default=True,
                help=_('Power a node back on when it fails after it was '
                       'asked to shut down and before it was powered on '
                       'again.')),
]


def register_opts(conf):
    conf.register_opts(opts, group='rollout')
