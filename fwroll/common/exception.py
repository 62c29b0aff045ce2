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

"""Rolling firmware update exceptions list."""
import collections
import json

from oslo_config import cfg
from oslo_log import log as logging
from oslo_utils import excutils

from fwroll.common.i18n import _

LOG = logging.getLogger(__name__)


CONF = cfg.CONF


def _ensure_exception_kwargs_serializable(exc_class_name, kwargs):
    """Ensure that kwargs are serializable

    Ensure that all kwargs passed to exception constructor can be written to
    the machine-readable run summary, by trying to convert them to JSON, or,
    as a last resort, to string. If it is not possible, unserializable kwargs
    will be removed.

    :param exc_class_name: a FwrollException class name.
    :param kwargs: a dictionary of keyword arguments passed to the exception
        constructor.
    :returns: a dictionary of serializable keyword arguments.
    """
    serializers = [(json.dumps, _('when converting to JSON')),
                   (str, _('when converting to string'))]
    exceptions = collections.defaultdict(list)
    serializable_kwargs = {}
    for k, v in kwargs.items():
        for serializer, msg in serializers:
            try:
                serializable_kwargs[k] = serializer(v)
                exceptions.pop(k, None)
                break
            except Exception as e:
                exceptions[k].append(
                    '(%(serializer_type)s) %(e_type)s: %(e_contents)s' %
                    {'serializer_type': msg, 'e_contents': e,
                     'e_type': e.__class__.__name__})
    if exceptions:
        LOG.error("One or more arguments passed to the %(exc_class)s "
                  "constructor as kwargs can not be serialized. The "
                  "serialized arguments: %(serialized)s. These "
                  "unserialized kwargs were dropped because of the "
                  "exceptions encountered during their "
                  "serialization:\n%(errors)s",
                  dict(errors=';\n'.join("%s: %s" % (k, '; '.join(v))
                                         for k, v in exceptions.items()),
                       exc_class=exc_class_name,
                       serialized=serializable_kwargs))
        for k in exceptions:
            del kwargs[k]
    return serializable_kwargs


class FwrollException(Exception):
    """Base rollout exception

    To correctly use this class, inherit from it and define
    a '_msg_fmt' property. That _msg_fmt will get printf'd
    with the keyword arguments provided to the constructor.

    The 'reason' property is the short machine-readable code written to the
    run summary for a node that failed with this exception.

    If you need to access the message from an exception you should use
    str(exc)

    """

    _msg_fmt = _("An unknown exception occurred.")
    reason = 'Error'

    def __init__(self, message=None, **kwargs):
        self.kwargs = _ensure_exception_kwargs_serializable(
            self.__class__.__name__, kwargs)

        if not message:
            try:
                message = self._msg_fmt % kwargs

            except Exception:
                with excutils.save_and_reraise_exception() as ctxt:
                    # kwargs doesn't match a variable in the message
                    # log the issue and the kwargs
                    prs = ', '.join('%s=%s' % pair for pair in kwargs.items())
                    LOG.exception('Exception in string format operation '
                                  '(arguments %s)', prs)
                    if not CONF.fatal_exception_format_errors:
                        # at least get the core message out if something
                        # happened
                        message = self._msg_fmt
                        ctxt.reraise = False

        super(FwrollException, self).__init__(message)


class Invalid(FwrollException):
    _msg_fmt = _("Unacceptable parameters.")


class InvalidParameterValue(Invalid):
    _msg_fmt = "%(err)s"


class MissingParameterValue(InvalidParameterValue):
    _msg_fmt = "%(err)s"


class InvalidState(FwrollException):
    _msg_fmt = _("Invalid resource state.")


class Duplicate(FwrollException):
    _msg_fmt = _("Resource already exists.")


class NotFound(FwrollException):
    _msg_fmt = _("Resource could not be found.")


class DriverLoadError(FwrollException):
    _msg_fmt = _("Driver %(driver)s could not be loaded from namespace "
                 "%(namespace)s. Reason: %(reason)s.")


class ClusterNotFound(NotFound):
    _msg_fmt = _("Cluster %(cluster)s could not be found.")


class NodeNotFound(NotFound):
    _msg_fmt = _("Node %(node)s could not be found.")


class ProfileNotFound(NotFound):
    _msg_fmt = _("Hardware profile %(profile)s could not be found.")


class CorrelationNotFound(NotFound):
    _msg_fmt = _("No hardware profile is bound to network identity "
                 "%(identity)s of node %(node)s.")
    reason = 'CorrelationNotFound'


class NetworkIdentityNotFound(CorrelationNotFound):
    _msg_fmt = _("Node %(node)s has no network interface reporting link "
                 "activity.")


class CorrelationAmbiguous(FwrollException):
    _msg_fmt = _("%(count)d hardware profiles are bound to network identity "
                 "%(identity)s of node %(node)s: %(profiles)s.")
    reason = 'CorrelationAmbiguous'


class TargetNotFound(NotFound):
    _msg_fmt = _("Firmware target %(target)s was found %(count)d times in "
                 "hardware domain %(domain)s, exactly one is required.")
    reason = 'TargetNotFound'


class ExternalCallFailed(FwrollException):
    _msg_fmt = _("%(system)s failed while %(operation)s: %(error)s")
    reason = 'ExternalCallFailed'


class FleetManagerError(ExternalCallFailed):
    _msg_fmt = _("Fleet manager failed while %(operation)s for node "
                 "%(node)s: %(error)s")


class HardwareManagerError(ExternalCallFailed):
    _msg_fmt = _("Hardware manager failed while %(operation)s for "
                 "%(profile)s: %(error)s")


class ConnectionFailed(ExternalCallFailed):
    _msg_fmt = _("Unable to connect to %(system)s at %(address)s: "
                 "%(error)s")


class AssociationFailed(ExternalCallFailed):
    _msg_fmt = _("Hardware profile %(profile)s reported a failed "
                 "association while applying firmware target %(target)s.")


class PowerStateFailure(InvalidState):
    _msg_fmt = _("Hardware profile %(profile)s is in power state %(pstate)s, "
                 "expected %(expected)s.")


class WaitTimeout(FwrollException):
    _msg_fmt = _("Timed out after %(timeout)s seconds waiting for "
                 "%(what)s.")
    reason = 'Timeout'


class RolloutCancelled(FwrollException):
    _msg_fmt = _("Rollout was cancelled while %(what)s.")
    reason = 'Cancelled'
