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

"""Checks run before a node is touched."""

import enum

from oslo_log import log

from fwroll.common import exception

LOG = log.getLogger(__name__)


class Verdict(enum.Enum):
    """Result of :func:`validate_target`."""

    ALREADY_CURRENT = 'AlreadyCurrent'
    NEEDS_UPDATE = 'NeedsUpdate'


def find_target(context, profile, target_name):
    """Return the firmware target of that name in the profile's domain.

    :raises: TargetNotFound unless the name exists exactly once.
    """
    matches = [t for t in context.hardware.list_firmware_targets(
               profile.domain) if t.name == target_name]
    if len(matches) != 1:
        raise exception.TargetNotFound(target=target_name,
                                       count=len(matches),
                                       domain=profile.domain)
    return matches[0]


def validate_target(context, profile, target_name):
    """Decide whether a hardware profile needs the firmware target.

    Side-effect free. Must run before anything drains or shuts the node
    down.

    :param context: a :class:`fwroll.common.context.RolloutContext`.
    :param profile: a freshly resolved
        :class:`fwroll.drivers.base.HardwareProfile`.
    :param target_name: name of the firmware target.
    :raises: TargetNotFound if the target is missing or duplicated in the
        profile's hardware domain.
    :returns: a :class:`Verdict`.
    """
    find_target(context, profile, target_name)
    if profile.firmware_policy == target_name:
        LOG.info('Hardware profile %(profile)s already uses firmware '
                 'policy %(target)s',
                 {'profile': profile.id, 'target': target_name})
        return Verdict.ALREADY_CURRENT
    LOG.debug('Hardware profile %(profile)s uses firmware policy '
              '%(current)s, %(target)s requested',
              {'profile': profile.id, 'current': profile.firmware_policy,
               'target': target_name})
    return Verdict.NEEDS_UPDATE
