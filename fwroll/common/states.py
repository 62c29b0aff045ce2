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
Mapping of node, hardware and rollout states.

The fleet manager and the hardware lifecycle manager each report states in
their own vocabulary. Drivers must convert those values to the enumerations
below and map anything they do not recognise to the ``UNKNOWN`` member, so
that an unexpected value never satisfies a wait by accident.
"""

import enum


class ConnectivityState(enum.Enum):
    """Connectivity of a node as reported by the fleet manager."""

    CONNECTED = 'connected'
    """Node is reachable and serving workloads."""

    MAINTENANCE = 'maintenance'
    """Node is reachable and drained of workloads."""

    NOT_RESPONDING = 'not responding'
    """Node is known to the fleet manager but does not answer."""

    UNKNOWN = 'unknown'
    """Any value the driver could not classify."""


class PowerState(enum.Enum):
    """Power state of a hardware profile's physical endpoint."""

    ON = 'on'
    OFF = 'off'
    UNKNOWN = 'unknown'


class AssociationState(enum.Enum):
    """Reconciliation of a hardware profile with its physical endpoint."""

    ASSOCIATING = 'associating'
    """Configuration (including firmware) is still being applied."""

    ASSOCIATED = 'associated'
    """Configuration has been fully applied."""

    FAILED = 'failed'
    """The hardware manager gave up applying the configuration."""

    UNKNOWN = 'unknown'


class Outcome(enum.Enum):
    """Terminal outcome of a node in a rollout."""

    SKIPPED = 'skipped'
    DONE = 'done'
    FAILED = 'failed'


# Skip reasons. They are not errors.
ALREADY_CURRENT = 'AlreadyCurrent'
DRY_RUN = 'DryRun'

#######################
# Node rollout states
#######################

SELECTED = 'selected'
""" Node is part of the update plan and waits for its turn. """

RESOLVING = 'resolving'
""" Node is being correlated with its hardware profile. """

VALIDATING = 'validating'
""" Firmware target is being checked against the hardware profile. """

NEEDS_UPDATE = 'needs update'
""" Hardware profile does not carry the firmware target yet. """

DRAINING = 'draining'
""" Workloads are being evacuated from the node. """

REMEDIATING = 'remediating'
""" A patch baseline is being applied to the drained node. """

POWERING_DOWN = 'powering down'
""" Node was asked to shut down. """

AWAITING_POWER_OFF = 'awaiting power off'
""" Waiting for the hardware to report the node powered off. """

APPLYING_FIRMWARE = 'applying firmware'
""" Firmware policy of the hardware profile is being changed. """

ACKNOWLEDGING = 'acknowledging'
""" Pending user acknowledgments are being triggered. """

AWAITING_ASSOCIATION = 'awaiting association'
""" Waiting for the hardware manager to finish applying firmware. """

POWERING_UP = 'powering up'
""" Hardware profile was asked to power on. """

AWAITING_RECONNECT = 'awaiting reconnect'
""" Waiting for the node to reconnect to the fleet manager. """

EXITING_MAINTENANCE = 'exiting maintenance'
""" Node is being returned to service. """

SKIPPED = 'skipped'
""" Node did not need an update. """

DONE = 'done'
""" Node was updated and returned to service. """

FAILED = 'failed'
""" Node could not be updated. """

TERMINAL_STATES = frozenset((SKIPPED, DONE, FAILED))
"""States a node never leaves."""

POWER_CYCLE_STATES = frozenset((POWERING_DOWN, AWAITING_POWER_OFF,
                                 APPLYING_FIRMWARE, ACKNOWLEDGING,
                                 AWAITING_ASSOCIATION, POWERING_UP))
"""States in which the node may be powered off."""

SHIELDED_STATES = POWER_CYCLE_STATES | frozenset((AWAITING_RECONNECT,
                                                  EXITING_MAINTENANCE))
"""States in which cancellation is deferred.

Once a node was asked to shut down it is driven back to service before a
cancellation takes effect, so it is never left powered off or in
maintenance.
"""
