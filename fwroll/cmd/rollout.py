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
Roll a firmware policy out over the nodes of a cluster, one node at a time.
"""

import signal
import sys

from oslo_config import cfg
from oslo_log import log
from oslo_serialization import jsonutils

from fwroll.common import context as fwroll_context
from fwroll.common import driver_factory
from fwroll.common import exception
from fwroll.common.i18n import _
from fwroll.common import service
from fwroll.conductor import manager
from fwroll.conf import CONF

LOG = log.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED_NODES = 1
EXIT_USAGE = 2

cli_opts = [
    cfg.StrOpt('cluster',
               help=_('Name of the cluster whose nodes are updated. '
                      'Required.')),
    cfg.StrOpt('node-pattern',
               default='*',
               help=_('Shell style wildcard selecting nodes of the cluster '
                      'by name.')),
    cfg.StrOpt('firmware-policy',
               help=_('Name of the firmware policy to bind to the hardware '
                      'profile of every selected node. Required.')),
    cfg.StrOpt('baseline',
               help=_('Patch baseline applied to each node while it is '
                      'drained, before its firmware is updated.')),
    cfg.StrOpt('summary-file',
               help=_('Write the JSON rollout summary to this file instead '
                      'of the standard output.')),
    cfg.BoolOpt('dry-run',
                default=False,
                help=_('Only resolve and validate the selected nodes, '
                       'without modifying anything.')),
]

CONF.register_cli_opts(cli_opts)


def _install_signal_handlers(context):
    def _handler(signum, frame):
        LOG.warning('Received signal %(signum)s, the rollout stops once '
                    'the node in progress is back in a safe state',
                    {'signum': signum})
        context.cancel()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def _missing_options():
    return [name for name in ('cluster', 'firmware_policy')
            if not CONF.get(name)]


def write_summary(summary, path=None):
    """Serialize a rollout summary as JSON to a file or the standard output.
    """
    data = jsonutils.dumps(summary.as_dict(), indent=2, sort_keys=True)
    if path:
        with open(path, 'w') as f:
            f.write(data + '\n')
        LOG.info('Rollout summary written to %s', path)
    else:
        sys.stdout.write(data + '\n')


def run_rollout(fleet, hardware):
    """Run a rollout with the configured options on connected managers.

    :returns: a :class:`fwroll.conductor.records.RolloutSummary`.
    """
    context = fwroll_context.RolloutContext(fleet, hardware)
    _install_signal_handlers(context)
    rollout = manager.RolloutManager(context, CONF.firmware_policy,
                                     baseline=CONF.baseline,
                                     dry_run=CONF.dry_run)
    plan = rollout.build_plan(CONF.cluster, CONF.node_pattern)
    return rollout.run(plan)


def main(argv=None):
    argv = sys.argv if argv is None else argv
    service.prepare_command(argv)

    missing = _missing_options()
    if missing:
        LOG.error('Missing required options: %s',
                  ', '.join('--' + name.replace('_', '-')
                            for name in missing))
        return EXIT_USAGE

    try:
        fleet = driver_factory.get_fleet_manager()
        hardware = driver_factory.get_hardware_manager()
        with fleet, hardware:
            summary = run_rollout(fleet, hardware)
    except (exception.DriverLoadError, exception.Invalid,
            exception.ConnectionFailed, exception.ClusterNotFound) as e:
        LOG.error('Unable to run the rollout: %s', e)
        return EXIT_USAGE

    write_summary(summary, CONF.summary_file)
    if summary.failed:
        return EXIT_FAILED_NODES
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
