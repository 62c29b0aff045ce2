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
Fleet manager for VMware vCenter, using pyVmomi.

Nodes are ESXi hosts of a vCenter cluster, looked up by name.
"""

import contextlib
import fnmatch
import http.client
import ssl

from oslo_log import log as logging
from oslo_utils import importutils

from fwroll.common import exception
from fwroll.common.i18n import _
from fwroll.common import polling
from fwroll.common import states
from fwroll.conf import CONF
from fwroll.drivers import base

vim_connect = importutils.try_import('pyVim.connect')
pyvmomi = importutils.try_import('pyVmomi')

LOG = logging.getLogger(__name__)

TASK_FINISHED_STATES = frozenset(['success', 'error'])

# Failures of the SOAP transport, raised by pyVmomi as they are
TRANSPORT_ERRORS = (OSError, http.client.HTTPException)


def _vmodl_errors():
    if pyvmomi is None:
        return TRANSPORT_ERRORS
    return (pyvmomi.vmodl.MethodFault,) + TRANSPORT_ERRORS


def host_connectivity(host):
    """Map the runtime information of a HostSystem to a ConnectivityState."""
    runtime = host.runtime
    if runtime.connectionState == 'notResponding':
        return states.ConnectivityState.NOT_RESPONDING
    if runtime.connectionState == 'connected':
        if runtime.inMaintenanceMode:
            return states.ConnectivityState.MAINTENANCE
        return states.ConnectivityState.CONNECTED
    return states.ConnectivityState.UNKNOWN


class VsphereFleetManager(base.FleetManager):
    """Fleet manager talking to a vCenter server."""

    system = 'vCenter'

    def __init__(self):
        if not vim_connect or not pyvmomi:
            raise exception.DriverLoadError(
                driver='vsphere', namespace='fwroll.fleet_managers',
                reason=_("Unable to import pyVmomi library"))
        if not CONF.vsphere.host:
            raise exception.MissingParameterValue(
                err=_("[vsphere]host must be set."))
        self._si = None

    def connect(self):
        kwargs = {}
        if CONF.vsphere.insecure:
            ctx = ssl.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            kwargs['sslContext'] = ctx
        try:
            self._si = vim_connect.SmartConnect(
                host=CONF.vsphere.host, port=CONF.vsphere.port,
                user=CONF.vsphere.username, pwd=CONF.vsphere.password,
                **kwargs)
        except Exception as e:
            LOG.error('Unable to connect to vCenter %(host)s: %(err)s',
                      {'host': CONF.vsphere.host, 'err': e})
            raise exception.ConnectionFailed(system=self.system,
                                             address=CONF.vsphere.host,
                                             error=e)
        LOG.debug('Connected to vCenter %s', CONF.vsphere.host)

    def disconnect(self):
        if self._si is None:
            return
        si, self._si = self._si, None
        try:
            vim_connect.Disconnect(si)
        except Exception as e:
            LOG.warning('Unable to disconnect from vCenter %(host)s: '
                        '%(err)s', {'host': CONF.vsphere.host, 'err': e})

    @contextlib.contextmanager
    def _translate_errors(self, operation, node):
        try:
            yield
        except _vmodl_errors() as e:
            msg = getattr(e, 'msg', None) or e
            LOG.error('vCenter failed while %(operation)s for node '
                      '%(node)s: %(err)s',
                      {'operation': operation, 'node': node, 'err': msg})
            raise exception.FleetManagerError(operation=operation, node=node,
                                              error=msg)

    def _get_objects(self, types):
        if self._si is None:
            raise exception.InvalidParameterValue(
                err=_("The vCenter fleet manager is not connected."))
        content = self._si.RetrieveContent()
        view = content.viewManager.CreateContainerView(content.rootFolder,
                                                       types, True)
        try:
            return list(view.view)
        finally:
            view.Destroy()

    def _host(self, node):
        with self._translate_errors('looking up the host', node.name):
            for host in self._get_objects([pyvmomi.vim.HostSystem]):
                if host.name == node.name:
                    return host
        raise exception.NodeNotFound(node=node.name)

    def list_nodes(self, cluster, pattern):
        pattern = pattern.lower()
        with self._translate_errors('listing nodes', cluster):
            for compute in self._get_objects(
                    [pyvmomi.vim.ClusterComputeResource]):
                if compute.name != cluster:
                    continue
                return [base.Node(h.name, state=host_connectivity(h),
                                  cluster=cluster)
                        for h in compute.host
                        if fnmatch.fnmatchcase(h.name.lower(), pattern)]
        raise exception.ClusterNotFound(cluster=cluster)

    def get_node_state(self, node):
        host = self._host(node)
        with self._translate_errors('getting the connection state',
                                    node.name):
            return host_connectivity(host)

    def drain(self, node):
        host = self._host(node)
        with self._translate_errors('entering maintenance', node.name):
            host.EnterMaintenanceMode_Task(timeout=0,
                                           evacuatePoweredOffVms=True)

    def get_active_network_identity(self, node):
        host = self._host(node)
        with self._translate_errors('reading network interfaces', node.name):
            pnics = list(host.config.network.pnic)
        for pnic in pnics:
            # linkSpeed is unset while the link is down
            if pnic.linkSpeed and pnic.linkSpeed.speedMb:
                return pnic.mac.lower()
        raise exception.NetworkIdentityNotFound(node=node.name)

    def shutdown(self, node):
        host = self._host(node)
        with self._translate_errors('shutting down', node.name):
            host.ShutdownHost_Task(force=False)

    def exit_maintenance(self, node):
        host = self._host(node)
        with self._translate_errors('exiting maintenance', node.name):
            host.ExitMaintenanceMode_Task(timeout=0)

    def remediate(self, node, baseline):
        """Install a patch bundle on a host and wait for the task to end.

        :param baseline: URL of the offline bundle to install.
        :raises: FleetManagerError if the installation task fails.
        :raises: WaitTimeout after ``[vsphere]task_timeout`` seconds.
        """
        host = self._host(node)
        with self._translate_errors('remediating', node.name):
            spec = pyvmomi.vim.host.PatchManager.PatchManagerOperationSpec()
            task = host.configManager.patchManager.InstallHostPatchV2_Task(
                bundleUrls=[baseline], spec=spec)
            state = polling.wait_for(
                lambda: task.info.state,
                lambda state: state in TASK_FINISHED_STATES,
                'baseline %s on node %s' % (baseline, node.name),
                interval=CONF.vsphere.task_interval,
                timeout=CONF.vsphere.task_timeout)
            if state == 'error':
                error = task.info.error
                raise exception.FleetManagerError(
                    operation='remediating', node=node.name,
                    error=getattr(error, 'msg', None) or error)
