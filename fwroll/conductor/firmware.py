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

"""Firmware policy change, acknowledgment and completion."""

from oslo_log import log

from fwroll.common import exception
from fwroll.common import polling
from fwroll.common import states
from fwroll.conf import CONF

LOG = log.getLogger(__name__)


def apply_firmware_policy(context, profile, target_name):
    """Bind the firmware target to a powered off hardware profile.

    The power state is read again right before the change; the firmware
    policy is never changed on a profile that is not reported off.

    :raises: PowerStateFailure if the profile is not powered off.
    """
    power_state = context.hardware.get_power_state(profile)
    if power_state != states.PowerState.OFF:
        raise exception.PowerStateFailure(profile=profile.id,
                                          pstate=power_state.value,
                                          expected=states.PowerState.OFF.value)
    LOG.info('Changing firmware policy of hardware profile %(profile)s '
             'from %(current)s to %(target)s',
             {'profile': profile.id, 'current': profile.firmware_policy,
              'target': target_name})
    context.hardware.set_firmware_policy(profile, target_name)


def acknowledge_pending(context, profile):
    """Trigger every pending acknowledgment of a hardware profile.

    Unattended rollouts imply consent, so every entry is acknowledged.

    :returns: the list of acknowledged entries.
    """
    acks = context.hardware.list_pending_acknowledgments(profile)
    for ack in acks:
        LOG.info('Acknowledging pending maintenance %(ack)s of hardware '
                 'profile %(profile)s', {'ack': ack.id, 'profile': profile.id})
        context.hardware.trigger_acknowledgment(ack)
    profile.pending_acknowledgments = 0
    return acks


def wait_for_association(context, profile, target_name):
    """Wait until the firmware is applied and the profile associated.

    :raises: AssociationFailed as soon as the association is reported
        failed.
    :raises: WaitTimeout after ``[rollout]association_timeout`` seconds.
    """
    def _abort(state):
        if state == states.AssociationState.FAILED:
            raise exception.AssociationFailed(profile=profile.id,
                                              target=target_name)

    profile.association_state = polling.wait_for(
        lambda: context.hardware.get_association_state(profile),
        lambda state: state == states.AssociationState.ASSOCIATED,
        'hardware profile %s to be associated' % profile.id,
        interval=CONF.rollout.association_interval,
        timeout=CONF.rollout.association_timeout,
        abort=_abort)
    profile.firmware_policy = target_name
    LOG.info('Hardware profile %(profile)s is associated with firmware '
             'policy %(target)s', {'profile': profile.id,
                                   'target': target_name})
    return profile.association_state
