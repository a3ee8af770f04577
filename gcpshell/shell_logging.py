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

"""Logging setup shared by every gcpshell command."""



import logging
import sys

from absl import flags


FLAGS = flags.FLAGS
LOGGER = logging.getLogger('gcpshell')

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

flags.DEFINE_enum(
    'log_level',
    'INFO',
    LOG_LEVELS,
    'Logging output level for core Google Cloud library messages.')


def SetupLogging(level=None, stream=None):
  """Configures LOGGER to write to stderr at the requested level.

  Calling this repeatedly replaces the previously installed handler.

  Args:
    level: A name from LOG_LEVELS. Defaults to the --log_level flag.
    stream: The stream to write to. Defaults to sys.stderr.
  """
  if level is None:
    level = FLAGS.log_level if FLAGS.is_parsed() else 'INFO'

  for handler in list(LOGGER.handlers):
    LOGGER.removeHandler(handler)

  handler = logging.StreamHandler(stream or sys.stderr)
  handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
  LOGGER.addHandler(handler)
  LOGGER.setLevel(getattr(logging, level))
  LOGGER.propagate = False
