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

"""Blocking poll shared by every waiting stage of a rollout."""

import time

from oslo_log import log
import tenacity

from fwroll.common import exception
from fwroll.conf import CONF

LOG = log.getLogger(__name__)


def wait_for(fetch, predicate, what, interval, timeout=None,
             cancel_event=None, abort=None):
    """Poll until a fetched value satisfies a predicate.

    ``fetch`` is called once immediately and then again after every sleep.
    The sleep starts at ``interval`` seconds and is multiplied by
    ``[rollout]poll_backoff`` after each unsuccessful check, without
    exceeding ``[rollout]max_poll_interval``.

    :param fetch: callable without arguments returning the observed value.
    :param predicate: callable accepting the observed value and returning
        True once the wait is over.
    :param what: human readable description of the awaited condition, used
        in logs and exception messages.
    :param interval: initial number of seconds between two checks.
    :param timeout: number of seconds after which to give up. None or 0
        means wait forever.
    :param cancel_event: a ``threading.Event``. When it is set the wait ends
        at the next wake-up.
    :param abort: callable accepting the observed value and raising an
        exception when waiting any longer is pointless.
    :returns: the value that satisfied the predicate.
    :raises: WaitTimeout if the timeout expired.
    :raises: RolloutCancelled if cancel_event was set.
    :raises: any exception raised by ``fetch`` or ``abort``.
    """
    def _check():
        value = fetch()
        if abort is not None:
            abort(value)
        LOG.debug('Observed %(value)s while waiting for %(what)s',
                  {'value': value, 'what': what})
        return value

    stop = tenacity.stop_never
    if timeout:
        stop = tenacity.stop_after_delay(timeout)
    sleep = time.sleep
    if cancel_event is not None:
        stop = stop | tenacity.stop_when_event_set(cancel_event)
        sleep = cancel_event.wait

    retrying = tenacity.Retrying(
        retry=tenacity.retry_if_result(lambda value: not predicate(value)),
        stop=stop,
        wait=tenacity.wait_exponential(multiplier=interval,
                                       exp_base=CONF.rollout.poll_backoff,
                                       max=CONF.rollout.max_poll_interval),
        sleep=sleep,
        reraise=True)
    try:
        return retrying(_check)
    except tenacity.RetryError as e:
        if cancel_event is not None and cancel_event.is_set():
            raise exception.RolloutCancelled(what='waiting for %s' % what)
        LOG.error('Timed out after %(timeout)s secs waiting for %(what)s, '
                  'last observed value: %(value)s',
                  {'timeout': timeout, 'what': what,
                   'value': e.last_attempt.result()})
        raise exception.WaitTimeout(timeout=timeout, what=what)
