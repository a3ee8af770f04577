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

"""Reads default properties from the active Cloud SDK configuration.

The Cloud SDK keeps named configurations under its config directory:

  <config dir>/active_config             name of the active configuration
  <config dir>/configurations/config_<name>
      [core]
      project = my-project
      [compute]
      zone = us-central1-a
"""



import configparser
import os


class Error(Exception):
  """Raised when the Cloud SDK configuration cannot be read."""


class CloudSdkConfig(object):
  """Properties of the active Cloud SDK configuration."""

  def __init__(self, config_dir=None, environ=None):
    environ = os.environ if environ is None else environ
    self._config_dir = config_dir or environ.get('CLOUDSDK_CONFIG') or (
        os.path.join(os.path.expanduser('~'), '.config', 'gcloud'))
    self._environ = environ
    self._parser = None

  def _ActiveConfigName(self):
    name = self._environ.get('CLOUDSDK_ACTIVE_CONFIG_NAME')
    if name:
      return name
    path = os.path.join(self._config_dir, 'active_config')
    try:
      with open(path) as f:
        return f.read().strip() or 'default'
    except IOError:
      return 'default'

  def _GetParser(self):
    if self._parser is None:
      self._parser = configparser.ConfigParser()
      path = os.path.join(self._config_dir, 'configurations',
                          'config_%s' % self._ActiveConfigName())
      try:
        self._parser.read(path)
      except configparser.Error as e:
        raise Error('Could not parse Cloud SDK configuration %s: %s' %
                    (path, e))
    return self._parser

  def GetProperty(self, section, name):
    """Returns the value of a property, or None if it is not set."""
    parser = self._GetParser()
    if parser.has_option(section, name):
      return parser.get(section, name).strip() or None
    return None

  def GetProject(self):
    return self.GetProperty('core', 'project')

  def GetZone(self):
    return self.GetProperty('compute', 'zone')
