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

"""The gcpshell command line entry point."""



import sys

from absl import flags

from gcpshell import command_registry
from gcpshell import disk_cmds
from gcpshell import log_cmds
from gcpshell import operation_cmds
from gcpshell import storage_cmds
from gcpshell import version


FLAGS = flags.FLAGS

_MODULES = (disk_cmds, operation_cmds, log_cmds, storage_cmds)
_commands_added = False


def AddCommands():
  global _commands_added
  if _commands_added:
    return
  for module in _MODULES:
    module.AddCommands()
  _commands_added = True


def main(argv=None):
  """Runs the command named by argv[1].

  Args:
    argv: The command line, sys.argv by default.

  Returns:
    The process exit status.
  """
  argv = list(sys.argv if argv is None else argv)
  AddCommands()

  if len(argv) < 2 or argv[1] in ('-h', '--help'):
    command_registry.ShortHelp()
    return 0
  if argv[1] == 'help':
    if len(argv) > 2:
      if command_registry.CommandHelp(argv[2]):
        return 0
      sys.stderr.write('Error: Unknown command: %s\n' % argv[2])
      return 1
    command_registry.ShortHelp()
    return 0
  if argv[1] == 'version':
    sys.stdout.write('%s\n' % version.__version__)
    return 0

  command = command_registry.GetCommand(argv[1], FLAGS)
  if command is None:
    sys.stderr.write('Error: Unknown command: %s\n' % argv[1])
    command_registry.ShortHelp(sys.stderr)
    return 1

  # The command sees its own name in place of the program name.
  return command.Run(argv[1:])


def Run():
  sys.exit(main())


if __name__ == '__main__':
  Run()
