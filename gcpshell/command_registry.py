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

"""Registry mapping command names to command classes."""

import os
import sys

from absl import flags


FLAGS = flags.FLAGS

_COMMANDS = {}


def AddCmd(command_name, command_class):
  """Registers command_class to run as command_name.

  Raises:
    ValueError: If command_name is already registered.
  """
  if command_name in _COMMANDS:
    raise ValueError('Command %s is already registered.' % command_name)
  _COMMANDS[command_name] = command_class


def GetCommandNames():
  return sorted(_COMMANDS)


def GetCommand(command_name, flag_values=FLAGS):
  """Returns a new instance of the named command, or None if unknown."""
  command_class = _COMMANDS.get(command_name)
  if command_class is None:
    return None
  return command_class(command_name, flag_values)


def _Summary(command_class):
  doc = (command_class.__doc__ or '').strip()
  return doc.splitlines()[0] if doc else ''


def ShortHelp(stream=None):
  """Writes the list of commands with a one line summary of each."""
  stream = stream or sys.stdout
  stream.write('Usage: %s <command> [--flags] [args]\n\n' %
               os.path.basename(sys.argv[0]))
  stream.write('Available commands:\n')
  width = max([len(name) for name in _COMMANDS] or [0])
  for name in GetCommandNames():
    stream.write('  %s  %s\n' % (name.ljust(width), _Summary(_COMMANDS[name])))
  stream.write('\nRun "%s help <command>" for help on a command.\n' %
               os.path.basename(sys.argv[0]))


def CommandHelp(command_name, stream=None):
  """Writes the usage and flags of one command.

  Returns:
    False if there is no such command.
  """
  stream = stream or sys.stdout
  flag_values = flags.FlagValues()
  command = GetCommand(command_name, flag_values)
  if command is None:
    return False
  stream.write('%s\n\n' % command.GetUsage())
  stream.write('%s\n' % (command.__doc__ or '').strip())
  help_text = flag_values.get_help()
  if help_text:
    stream.write('\nCommand flags:\n%s\n' % help_text)
  return True
