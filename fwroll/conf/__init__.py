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

from fwroll.conf import default
from fwroll.conf import fake
from fwroll.conf import rollout
from fwroll.conf import ucsm
from fwroll.conf import vsphere

CONF = cfg.CONF

default.register_opts(CONF)
fake.register_opts(CONF)
rollout.register_opts(CONF)
ucsm.register_opts(CONF)
vsphere.register_opts(CONF)
