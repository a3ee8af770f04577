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

"""Commands for interacting with Google Compute Engine operations."""



from absl import flags

from gcpshell import command_base
from gcpshell import command_registry
from gcpshell import filters
from gcpshell import lookup
from gcpshell import operations
from gcpshell import paging


class OperationCommand(command_base.GoogleCloudCommand):
  """Base command for working with the operations collection.

  Attributes:
    summary_fields: A set of tuples of (human readable name, json field
        path) used to generate a pretty-printed summary description of a
        list of operation resources.
    detail_fields: A set of tuples of (human readable name, json field
        path) used to generate a pretty-printed detailed description of an
        operation resource.
    resource_collection_name: The name of the REST API collection handled by
        this command type.
  """

  summary_fields = command_base.GoogleCloudCommand.operation_summary_fields
  detail_fields = command_base.GoogleCloudCommand.operation_detail_fields

  resource_collection_name = 'operations'

  def __init__(self, name, flag_values):
    super(OperationCommand, self).__init__(name, flag_values)
    flags.DEFINE_string('zone',
                        None,
                        'The zone of the operation. Omit, or use \'%s\', '
                        'for global operations.' %
                        command_base.GLOBAL_ZONE_NAME,
                        flag_values=flag_values)
    flags.DEFINE_string('region',
                        None,
                        'The region of the operation.',
                        flag_values=flag_values)

  def SetApi(self, api):
    """Set the Google Compute Engine API for the command.

    Args:
      api: The APIs used by this command.
    """
    compute_api = api['compute']
    self._global_operations_api = compute_api.globalOperations()
    self._zone_operations_api = compute_api.zoneOperations()
    self._region_operations_api = compute_api.regionOperations()

  def _GetScope(self):
    zone = self._flags.zone
    if zone == command_base.GLOBAL_ZONE_NAME:
      zone = None
    if zone and self._flags.region:
      raise command_base.CommandError(
          'Specify at most one of "--zone" and "--region".')
    return operations.OperationScope(self._project, zone=zone,
                                     region=self._flags.region)

  def _GetOperationRequest(self, operation_name):
    """Builds the get request for an operation in the flags' scope."""
    scope = self._GetScope()
    kwargs = {
        'project': self._project,
        'operation': self.DenormalizeResourceName(operation_name)
    }
    if scope.zone:
      kwargs['zone'] = scope.zone
      return scope, self._zone_operations_api.get(**kwargs)
    if scope.region:
      kwargs['region'] = scope.region
      return scope, self._region_operations_api.get(**kwargs)
    return scope, self._global_operations_api.get(**kwargs)


class GetOperation(OperationCommand):
  """Retrieve an operation resource."""

  positional_args = '<operation-name>'

  def Handle(self, operation_name):
    """Get the specified operation.

    Args:
      operation_name: The name of the operation to get.

    Returns:
      The json formatted object resulting from retrieving the operation
      resource.
    """
    _, request = self._GetOperationRequest(operation_name)
    return lookup.Get(request, description='Operation %s' % operation_name)


class WaitOperation(OperationCommand):
  """Wait for an operation to finish."""

  positional_args = '<operation-name>'

  def Handle(self, operation_name):
    """Wait for the specified operation.

    Args:
      operation_name: The name of the operation to wait for.

    Returns:
      The finished operation, or None if the wait was cancelled.
    """
    scope, request = self._GetOperationRequest(operation_name)
    operation = lookup.Get(request,
                           description='Operation %s' % operation_name)
    return self.MakeOperationWaiter().WaitForOperation(operation,
                                                       scope=scope)


class ListOperations(OperationCommand, command_base.GoogleCloudListCommand):
  """List the operations of every scope in a project."""

  default_sort_field = 'insert-time'

  def __init__(self, name, flag_values):
    super(ListOperations, self).__init__(name, flag_values)
    flags.DEFINE_string('filter',
                        None,
                        'A server-side filter expression, e.g. '
                        '\'status eq "RUNNING"\'.',
                        flag_values=flag_values)

  def ListItems(self, max_results):
    """Returns a generator over the operations matching the flags.

    --zone keeps operations whose zone contains the given text, so a
    region name selects all of its zones.
    """
    params = {'project': self._project}
    if self._flags.filter:
      params['filter'] = self._flags.filter
    if self._flags.zone == command_base.GLOBAL_ZONE_NAME:
      predicates = [filters.FieldEquals('zone', None),
                    filters.FieldEquals('region', None)]
    else:
      predicates = filters.BuildPredicates(zone=self._flags.zone)
    if self._flags.region:
      predicates.append(filters.FieldContains('region', self._flags.region))
    return paging.ListAggregated(
        self._global_operations_api.aggregatedList, params, 'operations',
        predicates=predicates, max_results=max_results,
        cancel_event=self._cancel_event)


def AddCommands():
  command_registry.AddCmd('getoperation', GetOperation)
  command_registry.AddCmd('waitoperation', WaitOperation)
  command_registry.AddCmd('listoperations', ListOperations)
