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

"""A set of utility functions."""

import io
import numbers
import sys

from gcpshell import errors


def SimpleName(entity):
  if entity is None:
    return ''

  elif isinstance(entity, str):
    return entity.rstrip('/').split('/')[-1]

  elif isinstance(entity, numbers.Number):
    return str(entity)

  raise ValueError('Expected number or string: ' + str(entity))


def FlattenList(list_of_lists):
  """Flattens a list of lists."""
  return [item for sublist in list_of_lists for item in sublist]


def NamesToFilterExpression(names, op='eq'):
  """Converts a list of resource names to a server-side filter expression.

  The Compute Engine list filter accepts a single predicate, so multiple
  names are expressed as an alternation on the name field.

  Args:
    names: A list of resource names. Names are split on whitespace since
      resource names cannot contain whitespace.
    op: The comparison operator, 'eq' or 'ne'.

  Returns:
    The filter expression or None if names evaluates to False.
  """
  if not names:
    return None
  names = FlattenList(name.split() for name in names)
  if len(names) == 1:
    return 'name %s "%s"' % (op, names[0])
  return 'name %s %s' % (op, '|'.join(names))


def ListStrings(strings, prefix='  '):
  """Returns a string containing each item in strings on its own line.

  Args:
    strings: The list of strings to place in the result.
    prefix: A string to place before each name.

  Returns:
    A string containing the names.
  """
  strings = sorted(str(s) for s in strings)
  buf = io.StringIO()
  for string in strings:
    buf.write(prefix + string + '\n')
  return buf.getvalue().rstrip()


def Proceed(message=None, input_func=input):
  """Prompts the user to proceed.

  Args:
    message: An optional message to include before
      'Proceed? [y/N] ' is printed.
    input_func: The function used to read the answer.

  Returns:
    True if the user answers yes.
  """
  message = ((message or '') + ' Proceed? [y/N] ').lstrip()
  sys.stdout.flush()
  return input_func(message).strip().lower() == 'y'


def Singularize(string):
  """A naive function for singularizing collection names."""
  return string[:len(string) - 1] if string.endswith('s') else string


def ParseResourcePath(uri):
  """Splits a resource URI into a dict of collection name to value.

  Only the path after the last 'projects/' segment is considered, so both
  full self links and relative names are accepted:

    https://.../compute/v1/projects/p/zones/z/disks/d
        -> {'projects': 'p', 'zones': 'z', 'disks': 'd'}

  Args:
    uri: A self link or relative resource name.

  Returns:
    A dict; empty if the uri holds no 'projects/' segment.
  """
  if not uri:
    return {}
  parts = uri.strip('/').split('/')
  try:
    start = len(parts) - 1 - parts[::-1].index('projects')
  except ValueError:
    return {}
  parts = parts[start:]
  return dict(zip(parts[0::2], parts[1::2]))


def GetProjectFromSelfLink(self_link):
  """Returns the project named in a self link, or None."""
  return ParseResourcePath(self_link).get('projects')


def GetZoneFromSelfLink(self_link):
  """Returns the unqualified zone named in a self link, or None."""
  return ParseResourcePath(self_link).get('zones')


def GetRegionFromSelfLink(self_link):
  """Returns the unqualified region named in a self link, or None."""
  return ParseResourcePath(self_link).get('regions')


def ParseKeyValuePairs(pairs):
  """Converts a list of 'key=value' strings into a dict.

  Args:
    pairs: A list of strings, e.g. the value of a list flag.

  Returns:
    A dict of key to value; later duplicates win.

  Raises:
    CommandError: If an entry has no '=' or an empty key.
  """
  result = {}
  for pair in pairs or []:
    key, sep, value = pair.partition('=')
    if not sep or not key:
      raise errors.CommandError(
          'Expected an entry of the form key=value: %s' % pair)
    result[key] = value
  return result
