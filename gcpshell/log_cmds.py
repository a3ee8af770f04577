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

"""Commands for interacting with Google Cloud Logging."""



import json
import urllib.parse

from absl import flags
import iso8601

from gcpshell import api_requests
from gcpshell import command_base
from gcpshell import command_registry
from gcpshell import monitored_resources
from gcpshell import paging
from gcpshell import utils


SEVERITIES = ('DEFAULT', 'DEBUG', 'INFO', 'NOTICE', 'WARNING', 'ERROR',
              'CRITICAL', 'ALERT', 'EMERGENCY')

DEFAULT_RESOURCE_TYPE = 'global'


def PrefixProject(log_name, project):
  """Returns log_name qualified as projects/<project>/logs/<log_name>."""
  if log_name and not log_name.startswith('projects/%s/logs' % project):
    log_name = 'projects/%s/logs/%s' % (
        project, urllib.parse.quote(log_name, safe=''))
  return log_name


def ParseTimestamp(value, flag_name):
  """Returns value as an RFC 3339 timestamp; naive times are taken as UTC."""
  try:
    return iso8601.parse_date(value).isoformat()
  except iso8601.ParseError as e:
    raise command_base.CommandError(
        'Invalid timestamp for --%s: %s' % (flag_name, e))


def BuildEntriesFilter(project, log_name=None, severity=None, after=None,
                       before=None, raw_filter=None):
  """Builds the advanced logs filter for listing log entries.

  Every given restriction becomes one clause; the clauses are joined with
  AND. raw_filter is appended as a parenthesized clause of its own.

  Returns:
    The filter expression, or None if there is nothing to filter on.
  """
  clauses = []
  if log_name:
    clauses.append('logName = "%s"' % PrefixProject(log_name, project))
  if severity:
    clauses.append('severity >= %s' % severity)
  if after:
    clauses.append('timestamp >= "%s"' % ParseTimestamp(after, 'after'))
  if before:
    clauses.append('timestamp <= "%s"' % ParseTimestamp(before, 'before'))
  if raw_filter:
    clauses.append('(%s)' % raw_filter)
  if not clauses:
    return None
  return ' AND '.join(clauses)


class LogCommand(command_base.GoogleCloudCommand):
  """Base command for working with Cloud Logging."""

  required_apis = ('logging',)

  def __init__(self, name, flag_values):
    super(LogCommand, self).__init__(name, flag_values)
    self._descriptor_cache = monitored_resources.DescriptorCache()

  def SetApi(self, api):
    """Set the Cloud Logging API for the command.

    Args:
      api: The APIs used by this command.
    """
    self._logging_api = api['logging']

  def BuildMonitoredResource(self, resource_type, labels):
    """Returns a monitored resource after validating it against descriptors.

    Args:
      resource_type: The monitored resource type, compared
          case-insensitively.
      labels: A dict of label key to value.

    Raises:
      CommandError: If the type or a label key is unknown.
    """
    descriptor = self._descriptor_cache.Find(self._logging_api,
                                             resource_type)
    if descriptor is None:
      raise command_base.CommandError(
          'Unknown monitored resource type \'%s\'. The valid types are:\n%s'
          % (resource_type, utils.ListStrings(
              self._descriptor_cache.ValidTypes(self._logging_api))))

    label_keys = [label.get('key') for label in
                  descriptor.get('labels') or []]
    for key in sorted(labels):
      if key not in label_keys:
        raise command_base.CommandError(
            'Label \'%s\' cannot be found for monitored resource of type '
            '\'%s\'. The available labels are \'%s\'.' % (
                key, descriptor['type'], ', '.join(label_keys)))

    return {'type': descriptor['type'], 'labels': dict(labels)}


class GetLogEntries(LogCommand, command_base.GoogleCloudListCommand):
  """List the log entries of a project, newest last."""

  summary_fields = (('timestamp', 'timestamp'),
                    ('severity', 'severity'),
                    ('log', 'logName'),
                    ('text', 'textPayload'))

  def __init__(self, name, flag_values):
    super(GetLogEntries, self).__init__(name, flag_values)
    flags.DEFINE_string('log_name',
                        None,
                        'Only list entries of this log.',
                        flag_values=flag_values)
    flags.DEFINE_enum('severity',
                      None,
                      SEVERITIES,
                      'Only list entries at least this severe.',
                      flag_values=flag_values)
    flags.DEFINE_string('after',
                        None,
                        'Only list entries logged at or after this ISO 8601 '
                        'timestamp.',
                        flag_values=flag_values)
    flags.DEFINE_string('before',
                        None,
                        'Only list entries logged at or before this ISO 8601 '
                        'timestamp.',
                        flag_values=flag_values)
    flags.DEFINE_string('filter',
                        None,
                        'An additional advanced logs filter, combined with '
                        'the other restrictions using AND.',
                        flag_values=flag_values)

  def ListItems(self, max_results):
    """Returns a generator over the matching log entries."""
    body = {'resourceNames': ['projects/%s' % self._project]}
    entries_filter = BuildEntriesFilter(
        self._project,
        log_name=self._flags.log_name,
        severity=self._flags.severity,
        after=self._flags.after,
        before=self._flags.before,
        raw_filter=self._flags.filter)
    if entries_filter:
      body['filter'] = entries_filter
    return paging.ListAll(self._logging_api.entries().list,
                          {'body': body},
                          items_field='entries',
                          token_in_body=True,
                          max_results=max_results,
                          cancel_event=self._cancel_event)


class AddLogEntry(LogCommand):
  """Write entries to a log, creating the log if needed.

  Each positional argument becomes one text entry. Each --json_payload
  becomes one structured entry instead.
  """

  positional_args = '<text-1> ... <text-n>'

  def __init__(self, name, flag_values):
    super(AddLogEntry, self).__init__(name, flag_values)
    flags.DEFINE_string('log_name',
                        None,
                        'The log to write to.',
                        flag_values=flag_values)
    flags.DEFINE_multi_string('json_payload',
                              [],
                              'A JSON object to write as a structured entry. '
                              'May be repeated.',
                              flag_values=flag_values)
    flags.DEFINE_enum('severity',
                      'DEFAULT',
                      SEVERITIES,
                      'The severity of the entries.',
                      flag_values=flag_values)
    flags.DEFINE_string('resource_type',
                        None,
                        'The monitored resource type the entries are '
                        'associated with. Defaults to \'%s\'.' %
                        DEFAULT_RESOURCE_TYPE,
                        flag_values=flag_values)
    flags.DEFINE_list('resource_labels',
                      [],
                      'Comma separated key=value labels of the monitored '
                      'resource.',
                      flag_values=flag_values)

  def _GetMonitoredResource(self):
    if not self._flags.resource_type:
      return {'type': DEFAULT_RESOURCE_TYPE,
              'labels': {'project_id': self._project}}
    return self.BuildMonitoredResource(
        self._flags.resource_type,
        utils.ParseKeyValuePairs(self._flags.resource_labels))

  def _GetPayloads(self, texts):
    if texts and self._flags.json_payload:
      raise command_base.CommandError(
          'Specify either text entries or --json_payload, not both.')
    if self._flags.json_payload:
      payloads = []
      for payload in self._flags.json_payload:
        try:
          value = json.loads(payload)
        except ValueError as e:
          raise command_base.CommandError(
              'Invalid --json_payload %s: %s' % (payload, e))
        if not isinstance(value, dict):
          raise command_base.CommandError(
              '--json_payload must be a JSON object: %s' % payload)
        payloads.append(('jsonPayload', value))
      return payloads
    if not texts:
      raise command_base.CommandError(
          'Specify at least one text entry or --json_payload.')
    return [('textPayload', text) for text in texts]

  def Handle(self, *texts):
    """Writes the entries.

    Args:
      *texts: The text payloads, one per entry.

    Returns:
      The written log entries.
    """
    if not self._flags.log_name:
      raise command_base.CommandError(
          'You must specify a log using the "--log_name" flag.')
    log_name = PrefixProject(self._flags.log_name, self._project)
    resource = self._GetMonitoredResource()

    entries = []
    for field, payload in self._GetPayloads(texts):
      entries.append({'logName': log_name,
                      'severity': self._flags.severity,
                      'resource': resource,
                      field: payload})

    api_requests.Execute(self._logging_api.entries().write(body={
        'entries': entries,
        'logName': log_name,
        'resource': resource}))
    return entries


class DeleteLog(LogCommand):
  """Delete a log and all of its entries."""

  positional_args = '<log-name>'
  safety_prompt = 'Delete log'

  def Handle(self, log_name):
    """Delete the specified log.

    Args:
      log_name: The name of the log to delete.

    Returns:
      None.
    """
    api_requests.Execute(self._logging_api.logs().delete(
        logName=PrefixProject(log_name, self._project)))
    return None


class ListLogs(LogCommand, command_base.GoogleCloudListCommand):
  """List the logs of a project."""

  summary_fields = (('name', 'name'),
                    ('log-name', 'logName'))
  default_sort_field = 'name'

  def ListItems(self, max_results):
    """Returns a generator over the logs of the project."""
    log_names = paging.ListAll(self._logging_api.logs().list,
                               {'parent': 'projects/%s' % self._project},
                               items_field='logNames',
                               max_results=max_results,
                               cancel_event=self._cancel_event)
    for log_name in log_names:
      yield {'name': urllib.parse.unquote(utils.SimpleName(log_name)),
             'logName': log_name}


class NewMonitoredResource(LogCommand):
  """Build a monitored resource after validating its type and labels."""

  positional_args = '<resource-type>'
  detail_fields = (('type', 'type'),
                   ('labels', 'labels'))

  def __init__(self, name, flag_values):
    super(NewMonitoredResource, self).__init__(name, flag_values)
    flags.DEFINE_list('labels',
                      [],
                      'Comma separated key=value labels of the resource.',
                      flag_values=flag_values)

  def Handle(self, resource_type):
    """Returns the monitored resource.

    Args:
      resource_type: The monitored resource type, e.g. 'gce_instance'.
    """
    return self.BuildMonitoredResource(
        resource_type, utils.ParseKeyValuePairs(self._flags.labels))


def AddCommands():
  command_registry.AddCmd('getlogentries', GetLogEntries)
  command_registry.AddCmd('addlogentry', AddLogEntry)
  command_registry.AddCmd('deletelog', DeleteLog)
  command_registry.AddCmd('listlogs', ListLogs)
  command_registry.AddCmd('newmonitoredresource', NewMonitoredResource)
