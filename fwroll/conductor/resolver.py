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

"""Correlation of fleet nodes with hardware profiles."""

from oslo_log import log

from fwroll.common import exception
from fwroll.conf import CONF

LOG = log.getLogger(__name__)


def resolve_profile(context, node, strict=None):
    """Find the hardware profile bound to a node.

    The correlation goes through the node's active network identity and is
    resolved again on every call; nothing is cached because the binding of
    hardware to nodes can change between runs. Nothing is modified.

    :param context: a :class:`fwroll.common.context.RolloutContext`.
    :param node: a :class:`fwroll.drivers.base.Node`.
    :param strict: whether more than one match is an error. Defaults to
        ``[rollout]strict_correlation``.
    :raises: NetworkIdentityNotFound if the node has no active interface.
    :raises: CorrelationNotFound if no profile matches.
    :raises: CorrelationAmbiguous if several profiles match and strict.
    :returns: a :class:`fwroll.drivers.base.HardwareProfile`.
    """
    if strict is None:
        strict = CONF.rollout.strict_correlation

    identity = context.fleet.get_active_network_identity(node)
    profiles = context.hardware.find_profiles_by_identity(identity)
    if not profiles:
        raise exception.CorrelationNotFound(identity=identity,
                                            node=node.name)
    if len(profiles) > 1:
        ids = sorted(p.id for p in profiles)
        if strict:
            raise exception.CorrelationAmbiguous(
                count=len(profiles), identity=identity, node=node.name,
                profiles=', '.join(ids))
        LOG.warning('Node %(node)s: %(count)d hardware profiles are bound '
                    'to %(identity)s (%(ids)s), using %(used)s because '
                    'strict correlation is disabled.',
                    {'node': node.name, 'count': len(profiles),
                     'identity': identity, 'ids': ', '.join(ids),
                     'used': ids[0]})
        profiles = sorted(profiles, key=lambda p: p.id)

    profile = profiles[0]
    LOG.debug('Node %(node)s is bound to hardware profile %(profile)s '
              'through %(identity)s',
              {'node': node.name, 'profile': profile.id,
               'identity': identity})
    return profile
