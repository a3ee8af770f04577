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

"""Client-side predicates applied to listed resources.

The list filters understood by the backend accept a single equality
predicate per request. The predicates here are evaluated on each item
after it is fetched so that further restrictions (a second field, or a
substring match such as a partial zone or region name) still apply.

A predicate is any callable taking a resource dict and returning a bool.
"""



def _GetField(resource, field):
  """Returns the value at a dotted field path, or None."""
  value = resource
  for part in field.split('.'):
    if not isinstance(value, dict):
      return None
    value = value.get(part)
  return value


class FieldEquals(object):
  """Matches resources whose field is exactly the given value."""

  def __init__(self, field, value):
    self.field = field
    self.value = value

  def __call__(self, resource):
    return _GetField(resource, self.field) == self.value

  def __repr__(self):
    return '%s == %r' % (self.field, self.value)


class FieldContains(object):
  """Matches resources whose field contains the given substring."""

  def __init__(self, field, substring):
    self.field = field
    self.substring = substring

  def __call__(self, resource):
    value = _GetField(resource, self.field)
    return value is not None and self.substring in str(value)

  def __repr__(self):
    return '%s contains %r' % (self.field, self.substring)


def NameEquals(name):
  return FieldEquals('name', name)


def ZoneContains(zone):
  return FieldContains('zone', zone)


def BuildPredicates(name=None, zone=None):
  """Returns the predicates for an optional exact name and partial zone."""
  predicates = []
  if name:
    predicates.append(NameEquals(name))
  if zone:
    predicates.append(ZoneContains(zone))
  return predicates


def MatchesAll(resource, predicates):
  """Returns True if resource satisfies every predicate."""
  for predicate in predicates or ():
    if not predicate(resource):
      return False
  return True
