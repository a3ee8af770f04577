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

"""Fakes of the discovery API objects used by the unit tests.

A MockApi hands out MockCollections on demand, so that
api.disks().get(project='p', zone='z', disk='d') records the call and
returns a MockRequest. By default a request echoes its keyword arguments
back as the response; tests queue canned responses or errors instead:

  api = mock_api.MockApi()
  api.disks().get.SetResponses({'name': 'd'}, mock_api.MakeHttpError(404))
"""



import json
import threading

from googleapiclient import errors as api_errors
import httplib2


def MakeHttpError(status, message=None):
  """Returns a googleapiclient HttpError carrying a JSON error body."""
  resp = httplib2.Response({'status': status})
  resp.reason = message or 'HTTP %s' % status
  content = {'error': {'code': status, 'message': message or resp.reason}}
  return api_errors.HttpError(resp, json.dumps(content).encode('utf-8'))


class MockRequest(object):
  """A request returning a canned response, or raising a canned error."""

  def __init__(self, response=None, error=None):
    self.response = response
    self.error = error
    self.http = None
    self.execute_count = 0

  def execute(self, http=None):
    self.http = http
    self.execute_count += 1
    if self.error is not None:
      raise self.error
    return self.response


class MockMethod(object):
  """A discovery method recording its calls.

  Responses queued with SetResponses are handed out in order; the last one
  repeats. A response may be a dict, an exception, or a callable receiving
  the call's keyword arguments.
  """

  def __init__(self, name):
    self.name = name
    self.calls = []
    self.requests = []
    self._responses = []
    self._lock = threading.Lock()

  def SetResponses(self, *responses):
    self._responses = list(responses)

  def _NextResponse(self, kwargs):
    if not self._responses:
      return dict(kwargs)
    if len(self._responses) > 1:
      response = self._responses.pop(0)
    else:
      response = self._responses[0]
    if callable(response) and not isinstance(response, BaseException):
      response = response(**kwargs)
    return response

  def __call__(self, **kwargs):
    with self._lock:
      self.calls.append(kwargs)
      response = self._NextResponse(kwargs)
      if isinstance(response, BaseException):
        request = MockRequest(error=response)
      else:
        request = MockRequest(response)
      self.requests.append(request)
    return request

  @property
  def call_count(self):
    return len(self.calls)


class MockCollection(object):
  """A discovery collection whose methods are created on first use."""

  def __init__(self, name):
    self.name = name
    self._methods = {}

  def __getattr__(self, name):
    if name.startswith('_'):
      raise AttributeError(name)
    if name not in self._methods:
      self._methods[name] = MockMethod('%s.%s' % (self.name, name))
    return self._methods[name]


class MockApi(object):
  """A discovery API whose collections are created on first use."""

  def __init__(self):
    self._collections = {}

  def __getattr__(self, name):
    if name.startswith('_'):
      raise AttributeError(name)
    if name not in self._collections:
      self._collections[name] = MockCollection(name)
    collection = self._collections[name]
    return lambda: collection


class MockTimer(object):
  """A timer whose sleep advances a fake clock."""

  def __init__(self):
    self._current_time = 0
    self.sleeps = []

  def time(self):
    return self._current_time

  def sleep(self, time_to_sleep):
    self.sleeps.append(time_to_sleep)
    self._current_time += time_to_sleep
    return self._current_time


class MockOutput(object):

  def __init__(self):
    self._capture_text = ''

  def write(self, text):
    self._capture_text += text

  def flush(self):
    pass

  def GetCapturedText(self):
    return self._capture_text


class MockInput(object):
  """Stands in for the input builtin, answering every prompt the same."""

  def __init__(self, input_string):
    self._input_string = input_string
    self.prompts = []

  def __call__(self, prompt=''):
    self.prompts.append(prompt)
    return self._input_string
