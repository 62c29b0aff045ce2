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

"""State machine modelling for the per-node rollout lifecycle."""

import functools

from automaton import exceptions as automaton_exceptions
from automaton import machines

from fwroll.common import exception as excp
from fwroll.common.i18n import _


def _translate_excp(func):
    """Decorator to translate automaton exceptions into rollout exceptions."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (automaton_exceptions.InvalidState,
                automaton_exceptions.NotInitialized,
                automaton_exceptions.FrozenMachine,
                automaton_exceptions.NotFound) as e:
            raise excp.InvalidState(str(e))
        except automaton_exceptions.Duplicate as e:
            raise excp.Duplicate(str(e))

    return wrapper


class FSM(machines.FiniteMachine):
    """A finite machine whose states can be shielded from cancellation."""

    add_transition = _translate_excp(machines.FiniteMachine.add_transition)

    def is_shielded(self, state):
        """Is cancellation deferred while in this state?

        :param state: the state of interest
        :raises: InvalidState if the state is invalid
        :returns: True if the state is shielded; False otherwise
        """
        try:
            return self._states[state]['shielded']
        except KeyError:
            raise excp.InvalidState(_("State '%s' does not exist") % state)

    @property
    def shielded(self):
        """Whether the current state defers cancellation."""
        return self.is_shielded(self.current_state)

    @_translate_excp
    def add_state(self, state, on_enter=None, on_exit=None,
                  terminal=None, shielded=False):
        """Adds a given state to the state machine.

        :param shielded: Use this to specify that cancellation must not
                         interrupt a node while it is in this state.

        Further arguments are interpreted as for parent method ``add_state``.
        """
        super(FSM, self).add_state(state, terminal=terminal,
                                   on_enter=on_enter, on_exit=on_exit)
        self._states[state]['shielded'] = shielded

    @_translate_excp
    def initialize(self, start_state=None):
        super(FSM, self).initialize(start_state=start_state)

    @_translate_excp
    def process_event(self, event):
        super(FSM, self).process_event(event)
