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
Hardware manager for Cisco UCS Manager domains, using the ucsmsdk.

Every address in ``[ucsm]addresses`` is a separate hardware domain with its
own session. Hardware profiles are UCS service profiles, identified by
their distinguished name within their domain.
"""

import contextlib
import http.client

from oslo_log import log as logging
from oslo_utils import importutils

from fwroll.common import exception
from fwroll.common.i18n import _
from fwroll.common import states
from fwroll.conf import CONF
from fwroll.drivers import base

ucshandle = importutils.try_import('ucsmsdk.ucshandle')
ucsexception = importutils.try_import('ucsmsdk.ucsexception')
ls_power = importutils.try_import('ucsmsdk.mometa.ls.LsPower')

LOG = logging.getLogger(__name__)

UCS_TO_POWER_STATE = {
    'on': states.PowerState.ON,
    'off': states.PowerState.OFF,
}

POWER_STATE_TO_UCS = {
    states.PowerState.ON: 'up',
    states.PowerState.OFF: 'down',
}

UCS_TO_ASSOCIATION_STATE = {
    'associated': states.AssociationState.ASSOCIATED,
    'associating': states.AssociationState.ASSOCIATING,
    'failed': states.AssociationState.FAILED,
}

# Service profile config_state values while a policy change is in flight
APPLYING_CONFIG_STATES = frozenset(['applying'])
FAILED_CONFIG_STATES = frozenset(['failed-to-apply'])

ACK_TRIGGER = 'trigger-immediate'

# Failures of the XML API transport, raised by ucsmsdk as they are
TRANSPORT_ERRORS = (OSError, http.client.HTTPException)


def _ucs_errors():
    if ucsexception is None:
        return TRANSPORT_ERRORS
    return (ucsexception.UcsException,) + TRANSPORT_ERRORS


class UcsmHardwareManager(base.HardwareManager):
    """Hardware manager talking to one or more UCS Managers."""

    system = 'UCS Manager'

    def __init__(self, addresses=None):
        if not ucshandle:
            raise exception.DriverLoadError(
                driver='ucsm', namespace='fwroll.hardware_managers',
                reason=_("Unable to import ucsmsdk library"))
        self.addresses = list(addresses or CONF.ucsm.addresses)
        if not self.addresses:
            raise exception.MissingParameterValue(
                err=_("[ucsm]addresses must list at least one UCS Manager."))
        self._handles = {}

    def connect(self):
        for address in self.addresses:
            handle = ucshandle.UcsHandle(
                address, CONF.ucsm.username, CONF.ucsm.password,
                port=CONF.ucsm.port, secure=CONF.ucsm.secure)
            try:
                handle.login()
            except Exception as e:
                LOG.error('Unable to log in to UCS Manager %(address)s: '
                          '%(err)s', {'address': address, 'err': e})
                self.disconnect()
                raise exception.ConnectionFailed(system=self.system,
                                                 address=address, error=e)
            LOG.debug('Logged in to UCS Manager %s', address)
            self._handles[address] = handle

    def disconnect(self):
        while self._handles:
            address, handle = self._handles.popitem()
            try:
                handle.logout()
            except Exception as e:
                LOG.warning('Unable to log out of UCS Manager %(address)s: '
                            '%(err)s', {'address': address, 'err': e})

    def _handle(self, domain):
        try:
            return self._handles[domain]
        except KeyError:
            raise exception.InvalidParameterValue(
                err=_("No session with UCS Manager %s, the hardware manager "
                      "is not connected.") % domain)

    @contextlib.contextmanager
    def _translate_errors(self, operation, target):
        try:
            yield
        except _ucs_errors() as e:
            LOG.error('UCS Manager failed while %(operation)s for '
                      '%(target)s: %(err)s',
                      {'operation': operation, 'target': target, 'err': e})
            raise exception.HardwareManagerError(operation=operation,
                                                 profile=target, error=e)

    def _service_profile(self, profile):
        sp = self._handle(profile.domain).query_dn(profile.id)
        if sp is None:
            raise exception.ProfileNotFound(profile=profile.id)
        return sp

    def _snapshot(self, domain, sp):
        return base.HardwareProfile(
            sp.dn, domain, firmware_policy=sp.host_fw_policy_name or None,
            association_state=self._association_state(sp), name=sp.name)

    @staticmethod
    def _association_state(sp):
        if sp.config_state in FAILED_CONFIG_STATES:
            return states.AssociationState.FAILED
        state = UCS_TO_ASSOCIATION_STATE.get(
            sp.assoc_state, states.AssociationState.UNKNOWN)
        if (state == states.AssociationState.ASSOCIATED
                and sp.config_state in APPLYING_CONFIG_STATES):
            return states.AssociationState.ASSOCIATING
        return state

    def find_profiles_by_identity(self, identity):
        identity = identity.lower()
        found = {}
        for domain, handle in sorted(self._handles.items()):
            with self._translate_errors('looking up %s' % identity, domain):
                vnics = handle.query_classid(
                    'VnicEther',
                    filter_str='(addr, "%s", type="eq", flag="I")' % identity)
                for vnic in vnics:
                    sp_dn = vnic.dn.rsplit('/', 1)[0]
                    if (domain, sp_dn) in found:
                        continue
                    sp = handle.query_dn(sp_dn)
                    # vNICs of service profile templates carry the same
                    # address field
                    if sp is None or sp.type != 'instance':
                        continue
                    found[(domain, sp_dn)] = self._snapshot(domain, sp)
        return [found[key] for key in sorted(found)]

    def list_firmware_targets(self, domain):
        handle = self._handle(domain)
        with self._translate_errors('listing firmware targets', domain):
            packs = handle.query_classid('FirmwareComputeHostPack')
        return [base.FirmwareTarget(pack.name, domain, id=pack.dn)
                for pack in packs]

    def get_power_state(self, profile):
        handle = self._handle(profile.domain)
        with self._translate_errors('getting the power state', profile.id):
            sp = self._service_profile(profile)
            if not sp.pn_dn:
                return states.PowerState.UNKNOWN
            server = handle.query_dn(sp.pn_dn)
        if server is None:
            return states.PowerState.UNKNOWN
        return UCS_TO_POWER_STATE.get(server.oper_power,
                                      states.PowerState.UNKNOWN)

    def set_power_state(self, profile, power_state):
        if power_state not in POWER_STATE_TO_UCS:
            raise exception.InvalidParameterValue(
                err=_("set_power_state called with an invalid power state: "
                      "%s.") % power_state)
        handle = self._handle(profile.domain)
        with self._translate_errors('setting the power state', profile.id):
            mo = ls_power.LsPower(parent_mo_or_dn=profile.id,
                                  state=POWER_STATE_TO_UCS[power_state])
            handle.add_mo(mo, modify_present=True)
            handle.commit()

    def set_firmware_policy(self, profile, target_name):
        handle = self._handle(profile.domain)
        with self._translate_errors('setting the firmware policy',
                                    profile.id):
            sp = self._service_profile(profile)
            sp.host_fw_policy_name = target_name
            handle.set_mo(sp)
            handle.commit()

    def list_pending_acknowledgments(self, profile):
        handle = self._handle(profile.domain)
        with self._translate_errors('listing pending acknowledgments',
                                    profile.id):
            acks = handle.query_children(in_dn=profile.id,
                                         class_id='LsmaintAck')
        return [base.Acknowledgment(ack.dn, profile.id,
                                    description=getattr(ack, 'descr', None),
                                    domain=profile.domain)
                for ack in acks]

    def trigger_acknowledgment(self, ack):
        handle = self._handle(ack.domain)
        with self._translate_errors('triggering an acknowledgment',
                                    ack.profile_id):
            mo = handle.query_dn(ack.id)
            if mo is None:
                LOG.debug('Acknowledgment %s is gone already', ack.id)
                return
            mo.admin_state = ACK_TRIGGER
            handle.set_mo(mo)
            handle.commit()

    def get_association_state(self, profile):
        with self._translate_errors('getting the association state',
                                    profile.id):
            sp = self._service_profile(profile)
        return self._association_state(sp)
