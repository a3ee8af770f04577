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

"""Cache of the monitored resource descriptors known to Cloud Logging."""



import threading

from gcpshell import paging
from gcpshell import shell_logging


LOGGER = shell_logging.LOGGER


class DescriptorCache(object):
  """Holds the monitored resource descriptor list once it has been fetched.

  The list is fetched at most once until Invalidate() is called, even when
  several threads ask for it at the same time.
  """

  def __init__(self):
    self._lock = threading.Lock()
    self._descriptors = None

  def Get(self, logging_api, cancel_event=None):
    """Returns the tuple of descriptor resources, fetching it if needed.

    Args:
      logging_api: The Cloud Logging discovery API.
      cancel_event: An optional threading.Event passed to the pager.
    """
    with self._lock:
      if self._descriptors is None:
        LOGGER.debug('Fetching monitored resource descriptors.')
        descriptors = paging.All(
            logging_api.monitoredResourceDescriptors().list, {},
            items_field='resourceDescriptors', cancel_event=cancel_event)
        if cancel_event is not None and cancel_event.is_set():
          return tuple(descriptors)
        self._descriptors = tuple(descriptors)
      return self._descriptors

  def Invalidate(self):
    with self._lock:
      self._descriptors = None

  def ValidTypes(self, logging_api):
    return sorted(d.get('type') for d in self.Get(logging_api))

  def Find(self, logging_api, resource_type):
    """Returns the descriptor for resource_type, compared case-insensitively.

    Returns None if there is no such descriptor.
    """
    wanted = (resource_type or '').lower()
    for descriptor in self.Get(logging_api):
      if (descriptor.get('type') or '').lower() == wanted:
        return descriptor
    return None
