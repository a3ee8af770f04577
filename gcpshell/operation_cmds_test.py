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

"""Unit tests for the operation commands."""



import copy
import unittest

from absl import flags

from gcpshell import errors
from gcpshell import mock_api
from gcpshell import operation_cmds

FLAGS = flags.FLAGS


class OperationCmdsTest(unittest.TestCase):

  def setUp(self):
    self.api = mock_api.MockApi()
    self.timer = mock_api.MockTimer()

  def _CreateCommand(self, command_class, argv):
    flag_values = copy.deepcopy(FLAGS)
    command = command_class('operation_command', flag_values)
    args = command._ParseArgumentsAndFlags(
        flag_values, ['operation_command'] + argv + ['--project=user'])
    command.SetFlags(flag_values)
    command.SetApi({'compute': self.api})
    command._compute_api = self.api
    command._timer = self.timer
    command.CreateHttp = lambda: None
    return command, args

  def testGetGlobalOperation(self):
    for argv in (['op-1'], ['op-1', '--zone=global']):
      api = self.api = mock_api.MockApi()
      api.globalOperations().get.SetResponses({'name': 'op-1'})
      command, args = self._CreateCommand(operation_cmds.GetOperation, argv)

      self.assertEqual(command.Handle(*args), {'name': 'op-1'})
      self.assertEqual(api.globalOperations().get.calls,
                       [{'project': 'user', 'operation': 'op-1'}])

  def testGetZoneOperation(self):
    command, args = self._CreateCommand(
        operation_cmds.GetOperation,
        ['projects/user/zones/zone-a/operations/op-1', '--zone=zone-a'])

    result = command.Handle(*args)

    self.assertEqual(result, {'project': 'user', 'zone': 'zone-a',
                              'operation': 'op-1'})
    self.assertEqual(self.api.globalOperations().get.call_count, 0)

  def testGetRegionOperation(self):
    command, args = self._CreateCommand(operation_cmds.GetOperation,
                                        ['op-1', '--region=region-a'])

    result = command.Handle(*args)

    self.assertEqual(result, {'project': 'user', 'region': 'region-a',
                              'operation': 'op-1'})

  def testZoneAndRegionAreExclusive(self):
    command, args = self._CreateCommand(
        operation_cmds.GetOperation,
        ['op-1', '--region=region-a', '--zone=zone-a'])

    self.assertRaises(errors.CommandError, command.Handle, *args)

  def testGetMissingOperation(self):
    self.api.globalOperations().get.SetResponses(mock_api.MakeHttpError(404))
    command, args = self._CreateCommand(operation_cmds.GetOperation, ['op-1'])

    self.assertRaises(errors.NotFoundError, command.Handle, *args)

  def testWaitOperation(self):
    pending = {'kind': 'compute#operation', 'name': 'op-1',
               'status': 'PENDING', 'zone': 'zones/zone-a'}
    done = dict(pending, status='DONE')
    self.api.zoneOperations().get.SetResponses(pending, pending, done)
    command, args = self._CreateCommand(operation_cmds.WaitOperation,
                                        ['op-1', '--zone=zone-a'])

    result = command.Handle(*args)

    self.assertEqual(result['status'], 'DONE')
    self.assertEqual(self.api.zoneOperations().get.call_count, 3)
    self.assertEqual(self.timer.sleeps, [3, 4.5])

  def testWaitOperationTimesOut(self):
    running = {'kind': 'compute#operation', 'name': 'op-1',
               'status': 'RUNNING'}
    self.api.globalOperations().get.SetResponses(running)
    command, args = self._CreateCommand(
        operation_cmds.WaitOperation,
        ['op-1', '--max_wait_time=10', '--sleep_between_polls=4'])

    self.assertRaises(errors.OperationTimeoutError, command.Handle, *args)
    self.assertEqual(self.timer.sleeps, [4, 6])

  def _SetAggregatedResponse(self):
    self.api.globalOperations().aggregatedList.SetResponses({
        'items': {
            'global': {'operations': [
                {'name': 'op-g', 'insertTime': '3'}]},
            'regions/us-central1': {'operations': [
                {'name': 'op-r', 'insertTime': '2',
                 'region': 'projects/user/regions/us-central1'}]},
            'zones/us-central1-a': {'operations': [
                {'name': 'op-z', 'insertTime': '1',
                 'zone': 'projects/user/zones/us-central1-a'}]},
            'zones/europe-west1-b': {'warning': {'code': 'NO_RESULTS'}},
        }})

  def testListAllOperations(self):
    self._SetAggregatedResponse()
    command, args = self._CreateCommand(
        operation_cmds.ListOperations, ['--filter=status eq "DONE"'])

    result = list(command.Handle(*args))

    self.assertEqual([op['name'] for op in result], ['op-g', 'op-r', 'op-z'])
    self.assertEqual(self.api.globalOperations().aggregatedList.calls,
                     [{'project': 'user', 'filter': 'status eq "DONE"'}])

  def testListGlobalOperations(self):
    self._SetAggregatedResponse()
    command, args = self._CreateCommand(operation_cmds.ListOperations,
                                        ['--zone=global'])

    self.assertEqual([op['name'] for op in command.Handle(*args)], ['op-g'])

  def testListOperationsByPartialZone(self):
    self._SetAggregatedResponse()
    command, args = self._CreateCommand(operation_cmds.ListOperations,
                                        ['--zone=us-central1'])

    self.assertEqual([op['name'] for op in command.Handle(*args)], ['op-z'])

  def testListOperationsByRegion(self):
    self._SetAggregatedResponse()
    command, args = self._CreateCommand(operation_cmds.ListOperations,
                                        ['--region=us-central1'])

    self.assertEqual([op['name'] for op in command.Handle(*args)], ['op-r'])

  def testListOperationsMaxResults(self):
    self._SetAggregatedResponse()
    command, args = self._CreateCommand(operation_cmds.ListOperations,
                                        ['--max_results=2'])

    self.assertEqual(len(list(command.Handle(*args))), 2)


if __name__ == '__main__':
  unittest.main()
