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

"""Update plan and audit trail of a rollout."""

import collections

from fwroll.common import states


class UpdatePlan(object):
    """Nodes selected for a rollout, in processing order.

    The order is a stable sort on the node name. The plan never grows; a
    node that fails its preconditions is dropped from :attr:`nodes` but
    stays in :attr:`selected`.
    """

    def __init__(self, cluster, pattern, nodes):
        self.cluster = cluster
        self.pattern = pattern
        self.selected = tuple(sorted(nodes, key=lambda n: n.name))
        self._dropped = set()

    @property
    def nodes(self):
        return tuple(n for n in self.selected
                     if n.name not in self._dropped)

    def drop(self, node):
        self._dropped.add(node.name)

    def __len__(self):
        return len(self.selected)

    def __iter__(self):
        return iter(self.selected)


_RecordBase = collections.namedtuple(
    '_RecordBase',
    ['node', 'outcome', 'reason', 'error', 'stage', 'started_at',
     'duration'])


class NodeUpdateRecord(_RecordBase):
    """Terminal outcome of one node. Immutable once created.

    :param node: node name.
    :param outcome: a :class:`fwroll.common.states.Outcome`.
    :param reason: short machine-readable code, None for DONE.
    :param error: error message for FAILED, else None.
    :param stage: the state the node was in when it reached its outcome.
    :param started_at: ``datetime`` at which processing started.
    :param duration: seconds from start to outcome.
    """

    __slots__ = ()

    @classmethod
    def skipped(cls, node, reason, stage, started_at, duration):
        return cls(node, states.Outcome.SKIPPED, reason, None, stage,
                   started_at, duration)

    @classmethod
    def done(cls, node, started_at, duration):
        return cls(node, states.Outcome.DONE, None, None, states.DONE,
                   started_at, duration)

    @classmethod
    def failed(cls, node, reason, error, stage, started_at, duration):
        return cls(node, states.Outcome.FAILED, reason, error, stage,
                   started_at, duration)

    def as_dict(self):
        return {
            'node': self.node,
            'outcome': self.outcome.value,
            'reason': self.reason,
            'error': self.error,
            'stage': self.stage,
            'started_at': (self.started_at.isoformat()
                           if self.started_at else None),
            'duration': round(self.duration, 3),
        }

    def __str__(self):
        if self.outcome == states.Outcome.DONE:
            return '%s -> Done (%.1fs)' % (self.node, self.duration)
        label = self.outcome.value.capitalize()
        return '%s -> %s(%s)' % (self.node, label, self.reason)


class RolloutSummary(object):
    """Records of a rollout, in processing order."""

    def __init__(self, cluster, pattern, target, records=()):
        self.cluster = cluster
        self.pattern = pattern
        self.target = target
        self.records = list(records)

    def add(self, record):
        self.records.append(record)

    def by_outcome(self, outcome):
        return [r for r in self.records if r.outcome == outcome]

    @property
    def failed(self):
        return bool(self.by_outcome(states.Outcome.FAILED))

    def __getitem__(self, node):
        for record in self.records:
            if record.node == node:
                return record
        raise KeyError(node)

    def as_dict(self):
        totals = {o.value: len(self.by_outcome(o)) for o in states.Outcome}
        totals['total'] = len(self.records)
        return {
            'cluster': self.cluster,
            'pattern': self.pattern,
            'firmware_policy': self.target,
            'totals': totals,
            'nodes': [r.as_dict() for r in self.records],
        }
