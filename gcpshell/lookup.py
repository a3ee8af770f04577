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

"""Get-by-name lookups and existence checks.

None of the APIs used here has an existence endpoint, so existence is
checked with a get. The outcome of a get is returned as a LookupResult so
that callers decide explicitly what a missing resource means to them.
"""



from gcpshell import api_requests
from gcpshell import errors


FOUND = 'FOUND'
NOT_FOUND = 'NOT_FOUND'
ERROR = 'ERROR'


class LookupResult(object):
  """The outcome of a get-by-name request.

  Attributes:
    state: One of FOUND, NOT_FOUND or ERROR.
    resource: The resource when state is FOUND.
    error: The RequestFailedError when state is ERROR.
  """

  def __init__(self, state, resource=None, error=None):
    self.state = state
    self.resource = resource
    self.error = error

  @classmethod
  def Found(cls, resource):
    return cls(FOUND, resource=resource)

  @classmethod
  def NotFound(cls):
    return cls(NOT_FOUND)

  @classmethod
  def Error(cls, error):
    return cls(ERROR, error=error)

  def __eq__(self, other):
    return (isinstance(other, LookupResult) and
            (self.state, self.resource, self.error) ==
            (other.state, other.resource, other.error))

  def __ne__(self, other):
    return not self == other

  def __repr__(self):
    return 'LookupResult(%s)' % self.state


def Lookup(request, http=None):
  """Executes a get request and classifies the outcome.

  Args:
    request: A discovery get request.
    http: An optional httplib2.Http object.

  Returns:
    A LookupResult.
  """
  try:
    return LookupResult.Found(api_requests.Execute(request, http=http))
  except errors.RequestFailedError as e:
    if e.status == 404:
      return LookupResult.NotFound()
    return LookupResult.Error(e)


def Get(request, description='Resource', http=None):
  """Returns the requested resource.

  Args:
    request: A discovery get request.
    description: Names the resource in the NotFoundError message.
    http: An optional httplib2.Http object.

  Returns:
    The resource.

  Raises:
    NotFoundError: If the resource does not exist.
    RequestFailedError: If the request failed for any other reason.
  """
  result = Lookup(request, http=http)
  if result.state == FOUND:
    return result.resource
  if result.state == NOT_FOUND:
    raise errors.NotFoundError('%s was not found.' % description)
  raise result.error


def Exists(request, http=None):
  """Returns True if the requested resource exists, False if it does not.

  Raises:
    RequestFailedError: If the request failed for a reason other than the
      resource not existing.
  """
  result = Lookup(request, http=http)
  if result.state == FOUND:
    return True
  if result.state == NOT_FOUND:
    return False
  raise result.error
