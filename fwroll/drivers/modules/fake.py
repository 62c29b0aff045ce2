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

"""
Fake fleet and hardware managers.

Both managers act on one in-memory :class:`FakeDatacenter`, which links a
host to the hardware profiles bound to its network interfaces. Powering a
host down powers its profiles off, powering a profile on brings its host
back in maintenance, and so on, so a whole rollout can run against them.
Every call is recorded on the datacenter.
"""

import collections
import fnmatch

from oslo_log import log as logging
from oslo_serialization import jsonutils

from fwroll.common import exception
from fwroll.common import states
from fwroll.conf import CONF
from fwroll.drivers import base

LOG = logging.getLogger(__name__)

Call = collections.namedtuple('Call', ['method', 'target', 'args', 'result'])

MUTATING_METHODS = frozenset([
    'drain', 'shutdown', 'exit_maintenance', 'remediate', 'set_power_state',
    'set_firmware_policy', 'trigger_acknowledgment',
])

_SHARED_DATACENTER = None


class FakeHost(object):

    def __init__(self, name, cluster, nics=(),
                 state=states.ConnectivityState.CONNECTED):
        self.name = name
        self.cluster = cluster
        # (mac, link speed in Mb/s) pairs, in interface order
        self.nics = [(mac.lower(), speed) for mac, speed in nics]
        self.state = state


class FakeProfile(object):

    def __init__(self, id, domain, firmware_policy, identities=(),
                 power_state=states.PowerState.ON,
                 association_state=states.AssociationState.ASSOCIATED,
                 association_polls=1):
        self.id = id
        self.domain = domain
        self.firmware_policy = firmware_policy
        self.identities = [mac.lower() for mac in identities]
        self.power_state = power_state
        self.association_state = association_state
        # get_association_state calls answered with ASSOCIATING after an
        # acknowledgment, before reporting ASSOCIATED
        self.association_polls = association_polls
        self.pending_acks = []
        self._polls_left = 0
        self._ack_seq = 0

    def snapshot(self):
        return base.HardwareProfile(
            self.id, self.domain, firmware_policy=self.firmware_policy,
            power_state=self.power_state,
            association_state=self.association_state,
            pending_acknowledgments=len(self.pending_acks))


class FakeDatacenter(object):
    """In-memory state shared by the fake managers."""

    def __init__(self):
        self.hosts = {}
        self.profiles = {}
        self.firmware_targets = collections.defaultdict(list)
        self.calls = []

    def add_host(self, name, cluster, nics=(), **kwargs):
        host = FakeHost(name, cluster, nics=nics, **kwargs)
        self.hosts[name] = host
        return host

    def add_profile(self, id, domain, firmware_policy, identities=(),
                    **kwargs):
        profile = FakeProfile(id, domain, firmware_policy,
                              identities=identities, **kwargs)
        self.profiles[id] = profile
        return profile

    def add_firmware_target(self, name, domain):
        self.firmware_targets[domain].append(name)

    @classmethod
    def from_dict(cls, inventory):
        """Build a datacenter from an inventory document.

        The document has the following shape::

            {"hosts": [{"name": "esx-01", "cluster": "prod-a",
                        "nics": [["00:25:b5:00:00:01", 10000]]}],
             "profiles": [{"id": "org-root/ls-esx-01", "domain": "ucs-a",
                           "firmware_policy": "4.1(3a)",
                           "identities": ["00:25:b5:00:00:01"]}],
             "firmware_targets": {"ucs-a": ["4.1(3a)", "4.1(3b)"]}}
        """
        datacenter = cls()
        for host in inventory.get('hosts', []):
            datacenter.add_host(host['name'], host['cluster'],
                                nics=host.get('nics', []))
        for profile in inventory.get('profiles', []):
            datacenter.add_profile(profile['id'], profile['domain'],
                                   profile.get('firmware_policy'),
                                   identities=profile.get('identities', []))
        for domain, names in inventory.get('firmware_targets', {}).items():
            for name in names:
                datacenter.add_firmware_target(name, domain)
        return datacenter

    @classmethod
    def from_file(cls, path):
        with open(path) as f:
            return cls.from_dict(jsonutils.loads(f.read()))

    @property
    def mutating_calls(self):
        return [c for c in self.calls if c.method in MUTATING_METHODS]

    def calls_to(self, method):
        return [c for c in self.calls if c.method == method]

    def record(self, method, target, *args, result=None):
        self.calls.append(Call(method, target, args, result))
        return result

    def host(self, name):
        try:
            return self.hosts[name]
        except KeyError:
            raise exception.NodeNotFound(node=name)

    def profile(self, profile_id):
        try:
            return self.profiles[profile_id]
        except KeyError:
            raise exception.ProfileNotFound(profile=profile_id)

    def profiles_of(self, host):
        macs = set(mac for mac, _speed in host.nics)
        return [p for p in self.profiles.values()
                if macs.intersection(p.identities)]

    def hosts_of(self, profile):
        identities = set(profile.identities)
        return [h for h in self.hosts.values()
                if identities.intersection(mac for mac, _speed in h.nics)]


def get_shared_datacenter():
    """Datacenter used by fake managers loaded from entry points."""
    global _SHARED_DATACENTER
    if _SHARED_DATACENTER is None:
        if CONF.fake.inventory_file:
            _SHARED_DATACENTER = FakeDatacenter.from_file(
                CONF.fake.inventory_file)
        else:
            _SHARED_DATACENTER = FakeDatacenter()
    return _SHARED_DATACENTER


class FakeFleetManager(base.FleetManager):
    """Fake fleet manager backed by a :class:`FakeDatacenter`."""

    system = 'fake fleet manager'

    def __init__(self, datacenter=None):
        self.datacenter = datacenter or get_shared_datacenter()

    def list_nodes(self, cluster, pattern):
        hosts = [h for h in self.datacenter.hosts.values()
                 if h.cluster == cluster]
        if not hosts:
            raise exception.ClusterNotFound(cluster=cluster)
        pattern = pattern.lower()
        nodes = [base.Node(h.name, state=h.state, cluster=cluster)
                 for h in hosts
                 if fnmatch.fnmatchcase(h.name.lower(), pattern)]
        return self.datacenter.record('list_nodes', cluster, pattern,
                                      result=nodes)

    def get_node_state(self, node):
        host = self.datacenter.host(node.name)
        return self.datacenter.record('get_node_state', node.name,
                                      result=host.state)

    def drain(self, node):
        host = self.datacenter.host(node.name)
        self.datacenter.record('drain', node.name)
        if host.state == states.ConnectivityState.CONNECTED:
            host.state = states.ConnectivityState.MAINTENANCE

    def get_active_network_identity(self, node):
        host = self.datacenter.host(node.name)
        for mac, speed in host.nics:
            if speed:
                return self.datacenter.record('get_active_network_identity',
                                              node.name, result=mac)
        raise exception.NetworkIdentityNotFound(node=node.name)

    def shutdown(self, node):
        host = self.datacenter.host(node.name)
        self.datacenter.record('shutdown', node.name)
        host.state = states.ConnectivityState.NOT_RESPONDING
        for profile in self.datacenter.profiles_of(host):
            profile.power_state = states.PowerState.OFF

    def exit_maintenance(self, node):
        host = self.datacenter.host(node.name)
        self.datacenter.record('exit_maintenance', node.name)
        if host.state == states.ConnectivityState.MAINTENANCE:
            host.state = states.ConnectivityState.CONNECTED

    def remediate(self, node, baseline):
        self.datacenter.host(node.name)
        self.datacenter.record('remediate', node.name, baseline)


class FakeHardwareManager(base.HardwareManager):
    """Fake hardware manager backed by a :class:`FakeDatacenter`."""

    system = 'fake hardware manager'

    def __init__(self, datacenter=None):
        self.datacenter = datacenter or get_shared_datacenter()

    def find_profiles_by_identity(self, identity):
        identity = identity.lower()
        found = sorted((p for p in self.datacenter.profiles.values()
                        if identity in p.identities), key=lambda p: p.id)
        return self.datacenter.record('find_profiles_by_identity', identity,
                                      result=[p.snapshot() for p in found])

    def list_firmware_targets(self, domain):
        targets = [base.FirmwareTarget(name, domain)
                   for name in self.datacenter.firmware_targets[domain]]
        return self.datacenter.record('list_firmware_targets', domain,
                                      result=targets)

    def get_power_state(self, profile):
        fake = self.datacenter.profile(profile.id)
        return self.datacenter.record('get_power_state', profile.id,
                                      result=fake.power_state)

    def set_power_state(self, profile, power_state):
        fake = self.datacenter.profile(profile.id)
        self.datacenter.record('set_power_state', profile.id, power_state)
        fake.power_state = power_state
        if power_state == states.PowerState.ON:
            for host in self.datacenter.hosts_of(fake):
                if host.state == states.ConnectivityState.NOT_RESPONDING:
                    host.state = states.ConnectivityState.MAINTENANCE

    def set_firmware_policy(self, profile, target_name):
        fake = self.datacenter.profile(profile.id)
        self.datacenter.record('set_firmware_policy', profile.id,
                               target_name)
        fake.firmware_policy = target_name
        fake._ack_seq += 1
        fake.pending_acks.append(base.Acknowledgment(
            '%s/ack-%d' % (fake.id, fake._ack_seq), fake.id,
            description='firmware policy %s' % target_name,
            domain=fake.domain))

    def list_pending_acknowledgments(self, profile):
        fake = self.datacenter.profile(profile.id)
        return self.datacenter.record('list_pending_acknowledgments',
                                      profile.id,
                                      result=list(fake.pending_acks))

    def trigger_acknowledgment(self, ack):
        fake = self.datacenter.profile(ack.profile_id)
        self.datacenter.record('trigger_acknowledgment', ack.id)
        fake.pending_acks = [a for a in fake.pending_acks if a.id != ack.id]
        if not fake.pending_acks:
            fake.association_state = states.AssociationState.ASSOCIATING
            fake._polls_left = fake.association_polls

    def get_association_state(self, profile):
        fake = self.datacenter.profile(profile.id)
        if fake.association_state == states.AssociationState.ASSOCIATING:
            if fake._polls_left > 0:
                fake._polls_left -= 1
            else:
                fake.association_state = states.AssociationState.ASSOCIATED
        return self.datacenter.record('get_association_state', profile.id,
                                      result=fake.association_state)
