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

"""Executes discovery API requests and normalizes their failures."""



from googleapiclient import errors as api_errors
import httplib2

from gcpshell import errors
from gcpshell import shell_logging


LOGGER = shell_logging.LOGGER


def Execute(request, http=None):
  """Executes a single API request.

  Args:
    request: A googleapiclient HttpRequest (or anything with an
      execute(http=...) method).
    http: An optional httplib2.Http object. Worker threads must pass their
      own since httplib2.Http objects are not thread safe.

  Returns:
    The decoded JSON response.

  Raises:
    RequestFailedError: If the backend answered with a non-2xx status, or
      the request could not be sent.
  """
  try:
    if http is None:
      return request.execute()
    return request.execute(http=http)
  except api_errors.HttpError as e:
    LOGGER.debug('Request failed: %s', getattr(e, 'resp', None))
    LOGGER.debug(getattr(e, 'content', None))
    raise errors.FromHttpError(e)
  except (httplib2.HttpLib2Error, OSError) as e:
    LOGGER.debug('Request not completed: %r', e)
    raise errors.RequestFailedError(None, 'Request failed: %s' % e)
