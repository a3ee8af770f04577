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

"""Unit tests for the Cloud Logging commands."""



import copy
import unittest

from absl import flags

from gcpshell import errors
from gcpshell import log_cmds
from gcpshell import mock_api

FLAGS = flags.FLAGS

DESCRIPTORS = [
    {'type': 'gce_instance',
     'labels': [{'key': 'project_id'}, {'key': 'instance_id'},
                {'key': 'zone'}]},
    {'type': 'global', 'labels': [{'key': 'project_id'}]},
]


class LogFilterTest(unittest.TestCase):

  def testPrefixProject(self):
    self.assertEqual(log_cmds.PrefixProject('syslog', 'user'),
                     'projects/user/logs/syslog')
    self.assertEqual(log_cmds.PrefixProject('my/log', 'user'),
                     'projects/user/logs/my%2Flog')
    self.assertEqual(log_cmds.PrefixProject('projects/user/logs/a', 'user'),
                     'projects/user/logs/a')
    self.assertEqual(log_cmds.PrefixProject(None, 'user'), None)

  def testNoRestrictions(self):
    self.assertEqual(log_cmds.BuildEntriesFilter('user'), None)

  def testEveryRestriction(self):
    self.assertEqual(
        log_cmds.BuildEntriesFilter(
            'user', log_name='syslog', severity='ERROR',
            after='2024-01-02T03:04:05Z', before='2024-01-03',
            raw_filter='textPayload:"disk" OR jsonPayload.disk:*'),
        'logName = "projects/user/logs/syslog" AND '
        'severity >= ERROR AND '
        'timestamp >= "2024-01-02T03:04:05+00:00" AND '
        'timestamp <= "2024-01-03T00:00:00+00:00" AND '
        '(textPayload:"disk" OR jsonPayload.disk:*)')

  def testTimestampWithOffset(self):
    self.assertEqual(log_cmds.ParseTimestamp('2024-01-02T03:04:05+02:00',
                                             'after'),
                     '2024-01-02T03:04:05+02:00')

  def testInvalidTimestamp(self):
    self.assertRaises(errors.CommandError, log_cmds.BuildEntriesFilter,
                      'user', after='yesterday')


class LogCmdsTest(unittest.TestCase):

  def setUp(self):
    self.api = mock_api.MockApi()
    self.api.monitoredResourceDescriptors().list.SetResponses(
        {'resourceDescriptors': DESCRIPTORS})

  def _CreateCommand(self, command_class, argv):
    flag_values = copy.deepcopy(FLAGS)
    command = command_class('log_command', flag_values)
    args = command._ParseArgumentsAndFlags(
        flag_values, ['log_command'] + argv + ['--project=user'])
    command.SetFlags(flag_values)
    command.SetApi({'logging': self.api})
    return command, args

  def testGetLogEntries(self):
    self.api.entries().list.SetResponses(
        {'entries': [{'textPayload': 'one'}], 'nextPageToken': 't1'},
        {'entries': [{'textPayload': 'two'}]})
    command, args = self._CreateCommand(
        log_cmds.GetLogEntries, ['--log_name=syslog', '--severity=WARNING'])

    result = list(command.Handle(*args))

    self.assertEqual([e['textPayload'] for e in result], ['one', 'two'])
    expected_body = {
        'resourceNames': ['projects/user'],
        'filter': ('logName = "projects/user/logs/syslog" AND '
                   'severity >= WARNING')}
    self.assertEqual(self.api.entries().list.calls, [
        {'body': expected_body},
        {'body': dict(expected_body, pageToken='t1')}])

  def testGetLogEntriesWithoutFilter(self):
    self.api.entries().list.SetResponses({})
    command, args = self._CreateCommand(log_cmds.GetLogEntries,
                                        ['--max_results=5'])

    self.assertEqual(list(command.Handle(*args)), [])
    self.assertEqual(self.api.entries().list.calls,
                     [{'body': {'resourceNames': ['projects/user']}}])

  def testAddTextEntries(self):
    self.api.entries().write.SetResponses({})
    command, args = self._CreateCommand(
        log_cmds.AddLogEntry, ['--log_name=my-log', 'hello', 'world'])

    result = command.Handle(*args)

    resource = {'type': 'global', 'labels': {'project_id': 'user'}}
    self.assertEqual(result, [
        {'logName': 'projects/user/logs/my-log', 'severity': 'DEFAULT',
         'resource': resource, 'textPayload': 'hello'},
        {'logName': 'projects/user/logs/my-log', 'severity': 'DEFAULT',
         'resource': resource, 'textPayload': 'world'}])
    body = self.api.entries().write.calls[0]['body']
    self.assertEqual(body['logName'], 'projects/user/logs/my-log')
    self.assertEqual(body['resource'], resource)
    self.assertEqual(body['entries'], result)
    self.assertEqual(
        self.api.monitoredResourceDescriptors().list.call_count, 0)

  def testAddJsonEntry(self):
    command, args = self._CreateCommand(
        log_cmds.AddLogEntry,
        ['--log_name=my-log', '--severity=ERROR',
         '--json_payload={"disk": "disk-1", "free": 0}',
         '--resource_type=GCE_Instance',
         '--resource_labels=instance_id=123,zone=zone-a'])

    result = command.Handle(*args)

    self.assertEqual(len(result), 1)
    self.assertEqual(result[0]['jsonPayload'], {'disk': 'disk-1', 'free': 0})
    self.assertEqual(result[0]['severity'], 'ERROR')
    self.assertEqual(result[0]['resource'],
                     {'type': 'gce_instance',
                      'labels': {'instance_id': '123', 'zone': 'zone-a'}})

  def testAddEntryErrors(self):
    test_cases = (
        ['hello'],
        ['--log_name=my-log'],
        ['--log_name=my-log', '--json_payload=[1, 2]'],
        ['--log_name=my-log', '--json_payload={not json'],
        ['--log_name=my-log', '--json_payload={}', 'hello'],
        ['--log_name=my-log', '--resource_type=nope', 'hello'],
        ['--log_name=my-log', '--resource_type=global',
         '--resource_labels=zone=zone-a', 'hello'],
        ['--log_name=my-log', '--resource_type=global',
         '--resource_labels=zone', 'hello'],
    )
    for argv in test_cases:
      command, args = self._CreateCommand(log_cmds.AddLogEntry, argv)
      self.assertRaises(errors.CommandError, command.Handle, *args)
    self.assertEqual(self.api.entries().write.call_count, 0)

  def testUnknownResourceTypeListsValidTypes(self):
    command, args = self._CreateCommand(log_cmds.NewMonitoredResource,
                                        ['nope'])
    try:
      command.Handle(*args)
      self.fail('CommandError was not raised')
    except errors.CommandError as e:
      self.assertIn('gce_instance', str(e))
      self.assertIn('global', str(e))

  def testNewMonitoredResource(self):
    command, args = self._CreateCommand(
        log_cmds.NewMonitoredResource,
        ['gce_instance', '--labels=zone=zone-a,instance_id=1'])

    self.assertEqual(command.Handle(*args),
                     {'type': 'gce_instance',
                      'labels': {'zone': 'zone-a', 'instance_id': '1'}})

  def testDescriptorsAreFetchedOnce(self):
    command, _ = self._CreateCommand(log_cmds.NewMonitoredResource,
                                     ['global'])
    command.BuildMonitoredResource('global', {})
    command.BuildMonitoredResource('gce_instance', {'zone': 'z'})

    self.assertEqual(
        self.api.monitoredResourceDescriptors().list.call_count, 1)

  def testDeleteLog(self):
    self.api.logs().delete.SetResponses({})
    command, args = self._CreateCommand(log_cmds.DeleteLog,
                                        ['my/log', '--force'])

    self.assertEqual(command.Handle(*args), None)
    self.assertEqual(self.api.logs().delete.calls,
                     [{'logName': 'projects/user/logs/my%2Flog'}])

  def testDeleteMissingLog(self):
    self.api.logs().delete.SetResponses(mock_api.MakeHttpError(404))
    command, args = self._CreateCommand(log_cmds.DeleteLog, ['my-log'])

    self.assertRaises(errors.RequestFailedError, command.Handle, *args)

  def testListLogs(self):
    self.api.logs().list.SetResponses(
        {'logNames': ['projects/user/logs/syslog'], 'nextPageToken': 'a'},
        {'logNames': ['projects/user/logs/my%2Flog']})
    command, args = self._CreateCommand(log_cmds.ListLogs, [])

    result = list(command.Handle(*args))

    self.assertEqual(result, [
        {'name': 'syslog', 'logName': 'projects/user/logs/syslog'},
        {'name': 'my/log', 'logName': 'projects/user/logs/my%2Flog'}])
    self.assertEqual(self.api.logs().list.calls,
                     [{'parent': 'projects/user'},
                      {'parent': 'projects/user', 'pageToken': 'a'}])


if __name__ == '__main__':
  unittest.main()
