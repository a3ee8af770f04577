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

"""Error types raised by gcpshell and helpers to build them."""



import json


class Error(Exception):
  """The base class for this tool's error reporting infrastructure."""


class CommandError(Error):
  """Raised when a command hits a general error."""


class RequestFailedError(Error):
  """Raised when the backend answers a request with a non-2xx status.

  Attributes:
    status: The HTTP status code, or None if it is unknown.
    message: The backend's error message.
  """

  def __init__(self, status, message):
    super(RequestFailedError, self).__init__(
        '%s (HTTP %s)' % (message, status) if status else message)
    self.status = status
    self.message = message


class NotFoundError(RequestFailedError):
  """Raised when a direct lookup of a single resource returns 404."""

  def __init__(self, message, status=404):
    super(NotFoundError, self).__init__(status, message)


class OperationFailedError(Error):
  """Raised when an asynchronous operation completes with an error payload.

  Attributes:
    code: The code of the first error reported by the backend.
    message: The message of the first error reported by the backend.
    errors: Every (code, message) pair reported for the operation.
    operation: The raw operation resource.
  """

  def __init__(self, code, message, errors=None, operation=None):
    super(OperationFailedError, self).__init__(
        'Operation failed: %s: %s' % (code, message))
    self.code = code
    self.message = message
    self.errors = errors or [(code, message)]
    self.operation = operation


class OperationTimeoutError(Error):
  """Raised when an operation has not completed within the allowed time."""

  def __init__(self, operation_name, status, max_wait_time):
    super(OperationTimeoutError, self).__init__(
        'Operation %s has not finished in %s seconds; it is still %s.' % (
            operation_name, max_wait_time, status))
    self.operation_name = operation_name
    self.status = status


class AlreadyExistsError(CommandError):
  """Raised when a command requires that a resource does not exist."""


class PreconditionNotMetError(CommandError):
  """Raised when a command requires that a resource already exists."""


def ExtractHttpErrorMessage(http_error):
  """Returns the human readable message carried by an HttpError.

  The backend's JSON error body may contain a top-level message and a
  list of per-error messages; all distinct messages are joined.

  Args:
    http_error: A googleapiclient.errors.HttpError.

  Returns:
    The message string.
  """
  messages = []

  def AddMessage(error):
    msg = error.get('message')
    if msg and msg not in messages:
      messages.append(msg)

  message = getattr(http_error.resp, 'reason', None) or str(http_error)
  content = http_error.content
  if isinstance(content, bytes):
    content = content.decode('utf-8', 'replace')
  try:
    data = json.loads(content)
  except (TypeError, ValueError):
    return message

  if isinstance(data, dict):
    error = data.get('error', {})
    if isinstance(error, dict):
      AddMessage(error)
      for sub_error in error.get('errors') or []:
        if isinstance(sub_error, dict):
          AddMessage(sub_error)
  if messages:
    message = '\n'.join(messages)
  return message


def GetHttpStatus(http_error):
  """Returns the integer HTTP status of an HttpError, or None."""
  try:
    return int(http_error.resp.status)
  except (AttributeError, TypeError, ValueError):
    return None


def FromHttpError(http_error):
  """Converts an HttpError into a RequestFailedError."""
  return RequestFailedError(GetHttpStatus(http_error),
                            ExtractHttpErrorMessage(http_error))
