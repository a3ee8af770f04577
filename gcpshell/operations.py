# Copyright 2012 Google Inc. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Waiting on Compute Engine asynchronous operations.

Mutating requests (insert, delete, resize, ...) return an operation
resource instead of the mutated resource. The operation moves from PENDING
to RUNNING to DONE on the backend; OperationWaiter polls it until it is
DONE, a deadline passes, or the wait is cancelled.
"""



from concurrent import futures
import threading
import time

from gcpshell import api_requests
from gcpshell import errors
from gcpshell import shell_logging
from gcpshell import utils


LOGGER = shell_logging.LOGGER

PENDING = 'PENDING'
RUNNING = 'RUNNING'
DONE = 'DONE'

DEFAULT_SLEEP_BETWEEN_POLLS = 3
DEFAULT_MAX_WAIT_TIME = 240
DEFAULT_BACKOFF_MULTIPLIER = 1.5
DEFAULT_MAX_SLEEP = 30
DEFAULT_CONCURRENT_OPERATIONS = 10


def IsOperation(result):
  """Determine if the result object is an operation."""
  try:
    return ('kind' in result and
            result['kind'].endswith('#operation'))
  except TypeError:
    return False


class OperationScope(object):
  """Where an operation lives: globally, in a zone or in a region."""

  def __init__(self, project, zone=None, region=None):
    if zone and region:
      raise ValueError('An operation scope cannot have both a zone and a '
                       'region.')
    self.project = project
    self.zone = utils.SimpleName(zone) or None
    self.region = utils.SimpleName(region) or None

  @classmethod
  def ForOperation(cls, operation, default_project=None):
    """Derives the scope from an operation resource.

    The zone and region fields are preferred; the self link is used when
    they are absent.
    """
    self_link = operation.get('selfLink', '')
    project = utils.GetProjectFromSelfLink(self_link) or default_project
    zone = operation.get('zone') or utils.GetZoneFromSelfLink(self_link)
    region = None
    if not zone:
      region = (operation.get('region') or
                utils.GetRegionFromSelfLink(self_link))
    return cls(project, zone=zone, region=region)

  def IsGlobal(self):
    return not (self.zone or self.region)

  def __eq__(self, other):
    return (isinstance(other, OperationScope) and
            (self.project, self.zone, self.region) ==
            (other.project, other.zone, other.region))

  def __ne__(self, other):
    return not self == other

  def __repr__(self):
    if self.zone:
      return 'projects/%s/zones/%s' % (self.project, self.zone)
    if self.region:
      return 'projects/%s/regions/%s' % (self.project, self.region)
    return 'projects/%s/global' % self.project


class Operation(object):
  """A read-only view of an operation resource."""

  def __init__(self, resource):
    self.resource = resource

  @property
  def name(self):
    return self.resource.get('name')

  @property
  def status(self):
    return self.resource.get('status')

  @property
  def operation_type(self):
    return self.resource.get('operationType', 'operation')

  @property
  def target(self):
    return utils.SimpleName(self.resource.get('targetLink', ''))

  def IsDone(self):
    return self.status == DONE

  def Errors(self):
    """Returns the (code, message) pairs of the error payload.

    The payload normally holds a list under 'errors'; a payload carrying a
    code and message directly is accepted as a single error.
    """
    error = self.resource.get('error')
    if not error:
      return []
    nested = error.get('errors')
    if nested:
      return [(e.get('code'), e.get('message')) for e in nested]
    if 'code' in error or 'message' in error:
      return [(error.get('code'), error.get('message'))]
    return []


class _EventTimer(object):
  """A timer whose sleep returns early once the cancel event is set."""

  def __init__(self, cancel_event):
    self._cancel_event = cancel_event

  def time(self):
    return time.time()

  def sleep(self, seconds):
    if self._cancel_event is None:
      time.sleep(seconds)
    else:
      self._cancel_event.wait(seconds)


class OperationWaiter(object):
  """Polls operations until they reach the DONE state.

  Attributes:
    sleep_between_polls: Seconds to sleep before the first poll.
    backoff_multiplier: Factor applied to the sleep after every poll.
    max_sleep: Ceiling for the sleep between polls.
    max_wait_time: Seconds after which a wait gives up.
    concurrent_operations: Maximum number of operations waited on at once
      by WaitForAll.
  """

  def __init__(self, compute_api, project, timer=None, cancel_event=None,
               http_factory=None,
               sleep_between_polls=DEFAULT_SLEEP_BETWEEN_POLLS,
               max_wait_time=DEFAULT_MAX_WAIT_TIME,
               backoff_multiplier=DEFAULT_BACKOFF_MULTIPLIER,
               max_sleep=DEFAULT_MAX_SLEEP,
               concurrent_operations=DEFAULT_CONCURRENT_OPERATIONS):
    """Initializer.

    Args:
      compute_api: The Compute Engine discovery API.
      project: The project used when an operation's scope names none.
      timer: An object providing time() and sleep(). Defaults to wall clock
        time with a sleep that is interrupted by cancel_event.
      cancel_event: An optional threading.Event. Once set, waits stop at the
        next opportunity and return None.
      http_factory: A callable returning a new httplib2.Http; used to give
        every WaitForAll worker its own connection.
      sleep_between_polls: See class attributes.
      max_wait_time: See class attributes.
      backoff_multiplier: See class attributes.
      max_sleep: See class attributes.
      concurrent_operations: See class attributes.
    """
    self._compute_api = compute_api
    self._project = project
    # WaitForAll sets the event to stop its workers, so there always is one.
    self._cancel_event = cancel_event or threading.Event()
    self._timer = timer or _EventTimer(self._cancel_event)
    self._http_factory = http_factory
    self.sleep_between_polls = sleep_between_polls
    self.max_wait_time = max_wait_time
    self.backoff_multiplier = backoff_multiplier
    self.max_sleep = max(max_sleep, sleep_between_polls)
    self.concurrent_operations = concurrent_operations

  def _Cancelled(self):
    return self._cancel_event.is_set()

  def _GetPollRequest(self, operation, scope):
    kwargs = {'project': scope.project, 'operation': operation.name}
    if scope.zone:
      kwargs['zone'] = scope.zone
      return self._compute_api.zoneOperations().get(**kwargs)
    if scope.region:
      kwargs['region'] = scope.region
      return self._compute_api.regionOperations().get(**kwargs)
    return self._compute_api.globalOperations().get(**kwargs)

  def WaitForOperation(self, result, scope=None, http=None,
                       collection_name=None):
    """Wait for a potentially asynchronous operation to complete.

    Args:
      result: The result of a request, potentially an operation.
      scope: The OperationScope of the operation. Derived from the
        operation when omitted.
      http: An optional httplib2.Http object to use for requests.
      collection_name: The collection of the operation's target, used in
        log messages (e.g. 'disks').

    Returns:
      The DONE operation resource; result itself if it is not an operation;
      None if the wait was cancelled.

    Raises:
      OperationFailedError: If the operation finished with errors.
      OperationTimeoutError: If max_wait_time passed first.
      RequestFailedError: If polling failed.
    """
    if not IsOperation(result):
      return result

    operation = Operation(result)
    if scope is None:
      scope = OperationScope.ForOperation(result, self._project)

    if collection_name:
      qualified_name = '%s %s' % (utils.Singularize(collection_name),
                                  operation.target)
    else:
      qualified_name = operation.target

    start_time = self._timer.time()
    sleep = self.sleep_between_polls

    while not operation.IsDone():
      if self._Cancelled():
        LOGGER.info('Aborting wait for operation %s.', operation.name)
        return None

      elapsed = self._timer.time() - start_time
      if elapsed >= self.max_wait_time:
        LOGGER.warning('Timeout reached. %s of %s has not yet completed. '
                       'The operation (%s) is still %s.',
                       operation.operation_type, qualified_name,
                       operation.name, operation.status)
        raise errors.OperationTimeoutError(
            operation.name, operation.status, self.max_wait_time)

      delay = min(sleep, self.max_wait_time - elapsed)
      LOGGER.info('Waiting for %s of %s. Sleeping for %ss.',
                  operation.operation_type, qualified_name, delay)
      self._timer.sleep(delay)
      if self._Cancelled():
        LOGGER.info('Aborting wait for operation %s.', operation.name)
        return None

      operation = Operation(api_requests.Execute(
          self._GetPollRequest(operation, scope), http=http))
      sleep = min(sleep * self.backoff_multiplier, self.max_sleep)

    operation_errors = operation.Errors()
    if operation_errors:
      code, message = operation_errors[0]
      raise errors.OperationFailedError(
          code, message, errors=operation_errors,
          operation=operation.resource)
    return operation.resource

  def _WaitWithOwnHttp(self, result, collection_name):
    http = self._http_factory() if self._http_factory else None
    return self.WaitForOperation(result, http=http,
                                 collection_name=collection_name)

  def WaitForEach(self, results, collection_name=None):
    """Waits for many independent operations at once.

    Any exception other than an Error sets the cancel event, so that the
    remaining waits stop before the exception propagates. This includes
    KeyboardInterrupt.

    Args:
      results: Operation resources that have already been submitted.
      collection_name: See WaitForOperation.

    Returns:
      A list with one (operation, exception) pair per input, in input order.
      operation is the DONE operation or None; exception is the Error
      raised by the wait or None. Both are None for a cancelled wait.
    """
    if not results:
      return []

    outcomes = []
    workers = max(1, min(self.concurrent_operations, len(results)))
    with futures.ThreadPoolExecutor(max_workers=workers) as pool:
      pending = [pool.submit(self._WaitWithOwnHttp, result, collection_name)
                 for result in results]
      try:
        for future in pending:
          try:
            outcomes.append((future.result(), None))
          except errors.Error as e:
            outcomes.append((None, e))
      except BaseException:
        self._cancel_event.set()
        raise
    return outcomes

  def WaitForAll(self, results, collection_name=None):
    """Like WaitForEach, but splits the outcomes.

    Returns:
      A tuple (operations, exceptions). operations holds the DONE operation
      of every successful wait, in input order; exceptions holds the error
      raised by every other wait, in input order. Cancelled waits appear in
      neither.
    """
    done = []
    exceptions = []
    for operation, exception in self.WaitForEach(results, collection_name):
      if exception is not None:
        exceptions.append(exception)
      elif operation is not None:
        done.append(operation)
    return done, exceptions
