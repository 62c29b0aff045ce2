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
Rolling firmware update orchestration.

Nodes are processed one at a time, and each node goes through its stages
strictly in order, so that at most one node is missing from the fleet at
any time::

    selected -> resolving -> validating -> (skipped | needs update)
      -> draining -> [remediating] -> powering down -> awaiting power off
      -> applying firmware -> acknowledging -> awaiting association
      -> powering up -> awaiting reconnect -> exiting maintenance -> done

:meth:`RolloutManager.process_node` is the isolation boundary of a node:
whatever goes wrong, it returns a :class:`NodeUpdateRecord` and the rollout
carries on with the next node.
"""

from oslo_log import log
from oslo_utils import timeutils

from fwroll.common import exception
from fwroll.common import state_machine
from fwroll.common import states
from fwroll.conductor import drain
from fwroll.conductor import firmware
from fwroll.conductor import power
from fwroll.conductor import records
from fwroll.conductor import rejoin
from fwroll.conductor import resolver
from fwroll.conductor import validator
from fwroll.conf import CONF

LOG = log.getLogger(__name__)

PRECONDITION_STATES = frozenset([states.SELECTED, states.RESOLVING,
                                 states.VALIDATING])
"""States in which a failing node has not been touched yet."""

MAINTENANCE_STATES = frozenset([states.DRAINING, states.REMEDIATING,
                                states.AWAITING_RECONNECT,
                                states.EXITING_MAINTENANCE])
"""States in which a failing node is likely left in maintenance."""


class _NodeRun(object):
    """Mutable bookkeeping of the node currently being processed."""

    def __init__(self, context, node):
        self.context = context
        self.node = node
        self.profile = None
        self.fsm = state_machine.new_machine()

    @property
    def state(self):
        return self.fsm.current_state

    def advance(self, event):
        # Cancellation is honoured between stages, never once the node was
        # asked to shut down.
        if not self.fsm.shielded:
            self.context.check_cancelled(self.state)
        self.fsm.process_event(event)


class RolloutManager(object):
    """Drives every node of an update plan to a terminal outcome.

    :param context: a :class:`fwroll.common.context.RolloutContext`.
    :param target: name of the firmware policy to roll out.
    :param baseline: optional patch baseline applied while drained.
    :param dry_run: only resolve and validate; nodes needing an update are
        skipped with reason ``DryRun`` and nothing is modified.
    """

    def __init__(self, context, target, baseline=None, dry_run=False):
        self.context = context
        self.target = target
        self.baseline = baseline
        self.dry_run = dry_run

    def build_plan(self, cluster, pattern):
        """Select the nodes of a cluster matching a name pattern."""
        nodes = self.context.fleet.list_nodes(cluster, pattern)
        plan = records.UpdatePlan(cluster, pattern, nodes)
        LOG.info('Selected %(count)d nodes of cluster %(cluster)s matching '
                 '%(pattern)s: %(nodes)s',
                 {'count': len(plan), 'cluster': cluster,
                  'pattern': pattern,
                  'nodes': ', '.join(n.name for n in plan)})
        return plan

    def run(self, plan):
        """Process every node of a plan in order.

        :returns: a :class:`fwroll.conductor.records.RolloutSummary`.
        """
        summary = records.RolloutSummary(plan.cluster, plan.pattern,
                                         self.target)
        total = len(plan)
        for index, node in enumerate(plan.selected, 1):
            LOG.info('Processing node %(node)s (%(index)d of %(total)d)',
                     {'node': node.name, 'index': index, 'total': total})
            record = self.process_node(node)
            if (record.outcome == states.Outcome.FAILED
                    and record.stage in PRECONDITION_STATES):
                plan.drop(node)
            summary.add(record)
            LOG.info('Node %(index)d of %(total)d finished: %(record)s',
                     {'index': index, 'total': total, 'record': record})

        for record in summary.records:
            LOG.info('%s', record)
        LOG.info('Rollout of firmware policy %(target)s finished: '
                 '%(done)d done, %(skipped)d skipped, %(failed)d failed',
                 {'target': self.target,
                  'done': len(summary.by_outcome(states.Outcome.DONE)),
                  'skipped': len(summary.by_outcome(states.Outcome.SKIPPED)),
                  'failed': len(summary.by_outcome(states.Outcome.FAILED))})
        return summary

    def process_node(self, node):
        """Drive a single node to a terminal outcome.

        Never raises; every failure becomes a FAILED record.
        """
        run = _NodeRun(self.context, node)
        started_at = timeutils.utcnow()
        watch = timeutils.StopWatch()
        watch.start()
        try:
            skip_reason = self._update(run)
        except Exception as e:
            stage = run.state
            run.fsm.process_event('fail')
            if isinstance(e, exception.FwrollException):
                reason = e.reason
                LOG.error('Node %(node)s failed while %(stage)s: %(err)s',
                          {'node': node.name, 'stage': stage, 'err': e})
            else:
                reason = 'Error'
                LOG.exception('Unexpected error on node %(node)s while '
                              '%(stage)s', {'node': node.name,
                                            'stage': stage})
            if stage in states.POWER_CYCLE_STATES:
                self._recover_power(run)
            elif stage in MAINTENANCE_STATES:
                LOG.warning('Node %s may still be in maintenance and needs '
                            'manual follow-up.', node.name)
            return records.NodeUpdateRecord.failed(
                node.name, reason, str(e) or type(e).__name__, stage,
                started_at, watch.elapsed())

        if skip_reason is not None:
            return records.NodeUpdateRecord.skipped(
                node.name, skip_reason, states.VALIDATING, started_at,
                watch.elapsed())
        return records.NodeUpdateRecord.done(node.name, started_at,
                                             watch.elapsed())

    def _update(self, run):
        """Run the stages. Returns a skip reason, or None once done."""
        context = self.context
        node = run.node

        run.advance('resolve')
        run.profile = resolver.resolve_profile(context, node)

        run.advance('validate')
        verdict = validator.validate_target(context, run.profile,
                                            self.target)
        if verdict == validator.Verdict.ALREADY_CURRENT:
            run.advance('skip')
            return states.ALREADY_CURRENT
        if self.dry_run:
            LOG.info('Dry run: node %(node)s would be updated to firmware '
                     'policy %(target)s', {'node': node.name,
                                           'target': self.target})
            run.advance('skip')
            return states.DRY_RUN

        run.advance('update')
        run.advance('drain')
        drain.drain_node(context, node)
        if self.baseline:
            run.advance('remediate')
            drain.remediate_node(context, node, self.baseline)

        run.advance('power_down')
        power.request_shutdown(context, node)
        run.advance('wait_power_off')
        power.wait_for_power_off(context, run.profile)

        run.advance('apply')
        firmware.apply_firmware_policy(context, run.profile, self.target)
        run.advance('acknowledge')
        firmware.acknowledge_pending(context, run.profile)
        run.advance('wait_association')
        firmware.wait_for_association(context, run.profile, self.target)

        run.advance('power_up')
        power.power_up(context, run.profile)
        run.advance('wait_reconnect')
        rejoin.wait_for_reconnect(context, node)
        run.advance('exit_maintenance')
        rejoin.exit_maintenance(context, node)
        run.advance('done')
        return None

    def _recover_power(self, run):
        if run.profile is None or not CONF.rollout.power_on_after_failure:
            LOG.warning('Node %s may be left powered off and needs manual '
                        'follow-up.', run.node.name)
            return
        LOG.warning('Powering hardware profile %(profile)s of failed node '
                    '%(node)s back on', {'profile': run.profile.id,
                                         'node': run.node.name})
        try:
            power.power_up(self.context, run.profile)
        except Exception as e:
            LOG.error('Could not power hardware profile %(profile)s of node '
                      '%(node)s back on, manual follow-up required: %(err)s',
                      {'profile': run.profile.id, 'node': run.node.name,
                       'err': e})
