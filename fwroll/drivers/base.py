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
Abstract base classes for the two control planes a rollout talks to, and
the snapshots of their objects that drivers hand back.

Snapshots are observations: the orchestrator never writes them back, it
refreshes them by asking the driver again.
"""

import abc

from fwroll.common import states


class Node(object):
    """A compute node as observed on the fleet manager."""

    def __init__(self, name, state=states.ConnectivityState.UNKNOWN,
                 cluster=None):
        self.name = name
        self.state = state
        self.cluster = cluster

    def __repr__(self):
        return '<Node %s (%s)>' % (self.name, self.state.value)


class HardwareProfile(object):
    """A hardware profile as observed on the hardware lifecycle manager.

    :param id: identifier of the profile within its hardware domain.
    :param domain: the hardware domain owning the profile. Firmware targets
        are looked up within this domain.
    :param firmware_policy: name of the currently bound firmware policy.
    """

    def __init__(self, id, domain, firmware_policy=None,
                 power_state=states.PowerState.UNKNOWN,
                 association_state=states.AssociationState.UNKNOWN,
                 pending_acknowledgments=0, name=None):
        self.id = id
        self.domain = domain
        self.firmware_policy = firmware_policy
        self.power_state = power_state
        self.association_state = association_state
        self.pending_acknowledgments = pending_acknowledgments
        self.name = name or id

    def __repr__(self):
        return '<HardwareProfile %s in %s>' % (self.id, self.domain)


class FirmwareTarget(object):
    """A firmware policy definition available in a hardware domain."""

    def __init__(self, name, domain, id=None):
        self.name = name
        self.domain = domain
        self.id = id or name

    def __repr__(self):
        return '<FirmwareTarget %s in %s>' % (self.name, self.domain)


class Acknowledgment(object):
    """A pending user acknowledgment gating a hardware maintenance action."""

    def __init__(self, id, profile_id, description=None, domain=None):
        self.id = id
        self.profile_id = profile_id
        self.description = description
        self.domain = domain

    def __repr__(self):
        return '<Acknowledgment %s>' % self.id


class BaseManager(object, metaclass=abc.ABCMeta):
    """Session handling shared by both managers.

    Managers are context managers: the session is opened on enter and closed
    on exit. No session is shared implicitly between managers.
    """

    system = 'base'
    """Human readable name of the control plane, used in error messages."""

    def connect(self):
        """Open the session with the control plane."""

    def disconnect(self):
        """Close the session with the control plane."""

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.disconnect()


class FleetManager(BaseManager):
    """Cluster or virtualization manager owning the nodes."""

    system = 'fleet manager'

    @abc.abstractmethod
    def list_nodes(self, cluster, pattern):
        """List the nodes of a cluster whose name matches a pattern.

        :param cluster: name of the cluster.
        :param pattern: shell style wildcard matched against node names.
        :raises: ClusterNotFound if the cluster does not exist.
        :returns: a list of :class:`Node`, in no particular order.
        """

    @abc.abstractmethod
    def get_node_state(self, node):
        """Return the connectivity of a node.

        :returns: a :class:`fwroll.common.states.ConnectivityState`.
        """

    @abc.abstractmethod
    def drain(self, node):
        """Start evacuating workloads and entering maintenance.

        Returns once the request is accepted. Completion is observed through
        :meth:`get_node_state`.
        """

    @abc.abstractmethod
    def get_active_network_identity(self, node):
        """Return the hardware address of the first active interface.

        :raises: NetworkIdentityNotFound if no interface reports link
            activity.
        :returns: a lower-case MAC address string.
        """

    @abc.abstractmethod
    def shutdown(self, node):
        """Ask the node's operating system to shut down gracefully."""

    @abc.abstractmethod
    def exit_maintenance(self, node):
        """Return a node to service."""

    @abc.abstractmethod
    def remediate(self, node, baseline):
        """Apply a patch baseline to a drained node and wait for it."""


class HardwareManager(BaseManager):
    """Hardware lifecycle manager owning the hardware profiles."""

    system = 'hardware manager'

    @abc.abstractmethod
    def find_profiles_by_identity(self, identity):
        """Return every hardware profile bound to a network identity.

        Matching is case-insensitive. Callers decide what to do when more
        than one profile matches.

        :returns: a list of :class:`HardwareProfile`, possibly empty.
        """

    @abc.abstractmethod
    def list_firmware_targets(self, domain):
        """Return the firmware targets defined in a hardware domain.

        :returns: a list of :class:`FirmwareTarget`.
        """

    @abc.abstractmethod
    def get_power_state(self, profile):
        """Return a :class:`fwroll.common.states.PowerState`."""

    @abc.abstractmethod
    def set_power_state(self, profile, power_state):
        """Request a power state. Does not wait for it to be reached."""

    @abc.abstractmethod
    def set_firmware_policy(self, profile, target_name):
        """Bind a firmware policy to a hardware profile."""

    @abc.abstractmethod
    def list_pending_acknowledgments(self, profile):
        """Return the :class:`Acknowledgment` entries gating a profile."""

    @abc.abstractmethod
    def trigger_acknowledgment(self, ack):
        """Acknowledge a pending entry so that its action runs now."""

    @abc.abstractmethod
    def get_association_state(self, profile):
        """Return a :class:`fwroll.common.states.AssociationState`."""
