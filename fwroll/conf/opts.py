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

import fwroll.conf


_opts = [
    ('DEFAULT', fwroll.conf.default.list_opts()),
    ('fake', fwroll.conf.fake.opts),
    ('rollout', fwroll.conf.rollout.opts),
    ('ucsm', fwroll.conf.ucsm.opts),
    ('vsphere', fwroll.conf.vsphere.opts),
]


def list_opts():
    """Return a list of oslo.config options available in fwroll code.

    The returned list includes all oslo.config options. Each element of
    the list is a tuple. The first element is the name of the group, the
    second element is the options.

    The function is discoverable via the 'fwroll' entry point under the
    'oslo.config.opts' namespace.

    :returns: a list of (group, options) tuples
    """
    return _opts


def update_opt_defaults():
    log.set_defaults(
        default_log_levels=[
            'stevedore=INFO',
            'iso8601=WARNING',
            'requests=WARNING',
            'urllib3.connectionpool=WARNING',
            'ucsmsdk=WARNING',
            'pyVmomi=WARNING',
        ]
    )
