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

"""Commands for interacting with Google Compute Engine persistent disks."""




from absl import flags

from gcpshell import api_requests
from gcpshell import command_base
from gcpshell import command_registry
from gcpshell import filters
from gcpshell import lookup
from gcpshell import operations
from gcpshell import paging
from gcpshell import utils


DISK_TYPES = ('pd-ssd', 'pd-standard')


class DiskCommand(command_base.GoogleCloudCommand):
  """Base command for working with the disks collection."""

  default_sort_field = 'name'
  summary_fields = (('name', 'name'),
                    ('zone', 'zone'),
                    ('status', 'status'),
                    ('source-image', 'sourceImage'),
                    ('size-gb', 'sizeGb'))

  detail_fields = (('name', 'name'),
                   ('description', 'description'),
                   ('creation-time', 'creationTimestamp'),
                   ('zone', 'zone'),
                   ('status', 'status'),
                   ('type', 'type'),
                   ('source-image', 'sourceImage'),
                   ('size-gb', 'sizeGb'),
                   ('users', 'users'))

  resource_collection_name = 'disks'

  # Commands acting on a single known disk take --zone from the Cloud SDK
  # configuration when it is not given.
  zone_from_config = True

  def __init__(self, name, flag_values):
    super(DiskCommand, self).__init__(name, flag_values)
    flags.DEFINE_string('zone',
                        None,
                        'The zone of the disk.',
                        flag_values=flag_values)

  def SetApi(self, api):
    """Set the Google Compute Engine API for the command.

    Args:
      api: The APIs used by this command.
    """
    self._disks_api = api['compute'].disks()

  def _GetZone(self):
    if not self._flags.zone:
      raise command_base.CommandError(
          'You must specify a zone using the "--zone" flag or set one in the '
          'active Cloud SDK configuration.')
    return utils.SimpleName(self._flags.zone)

  def _GetDisk(self, disk_name, zone):
    """Fetches a disk, raising NotFoundError if it does not exist."""
    return lookup.Get(
        self._disks_api.get(project=self._project, zone=zone,
                            disk=disk_name),
        description='Disk %s in zone %s' % (disk_name, zone))

  def _WaitAndGetDisk(self, operation, disk_name, zone):
    """Waits for a zone operation on disk_name and returns the new disk.

    Returns None if the wait was cancelled.
    """
    result = self.WaitForOperation(
        operation,
        scope=operations.OperationScope(self._project, zone=zone))
    if result is None:
      return None
    if not self._flags.synchronous_mode:
      return result
    return self._GetDisk(disk_name, zone)


class GetDisk(DiskCommand):
  """Get one disk, or every disk matching the given name and zone.

  When --project, --zone and a disk name are all known the disk is fetched
  directly. Otherwise every zone is searched; --zone then matches any zone
  containing the given text, so a region name such as 'us-central1' is
  accepted.
  """

  positional_args = '[<disk-name>]'
  zone_from_config = False

  def Handle(self, disk_name=None):
    """Get the specified disk or disks.

    Args:
      disk_name: The name of the disk, optional.

    Returns:
      The disk resource, or a generator of matching disk resources.
    """
    if disk_name:
      disk_name = self.DenormalizeResourceName(disk_name)

    if disk_name and self._flags.zone:
      return self._GetDisk(disk_name, self._GetZone())

    params = {'project': self._project}
    server_filter = utils.NamesToFilterExpression([disk_name] if disk_name
                                                  else None)
    if server_filter:
      params['filter'] = server_filter

    return paging.ListAggregated(
        self._disks_api.aggregatedList, params, 'disks',
        predicates=filters.BuildPredicates(name=disk_name,
                                           zone=self._flags.zone),
        cancel_event=self._cancel_event)


class AddDisk(DiskCommand):
  """Create a new persistent disk."""

  positional_args = '<disk-name>'

  def __init__(self, name, flag_values):
    super(AddDisk, self).__init__(name, flag_values)
    flags.DEFINE_string('description',
                        None,
                        'An optional description of the disk.',
                        flag_values=flag_values)
    flags.DEFINE_integer('size_gb',
                         None,
                         'The size of the disk in GB. Defaults to the size '
                         'of the source image, or the backend default.',
                         lower_bound=1,
                         flag_values=flag_values)
    flags.DEFINE_enum('disk_type',
                      None,
                      DISK_TYPES,
                      'The type of the disk. Defaults to pd-standard.',
                      flag_values=flag_values)
    flags.DEFINE_string('source_image',
                        None,
                        'The image to initialize the disk from, e.g. '
                        'projects/debian-cloud/global/images/family/'
                        'debian-12.',
                        flag_values=flag_values)

  def Handle(self, disk_name):
    """Add the specified disk.

    Args:
      disk_name: The name of the disk to add.

    Returns:
      The created disk resource, or the operation when not waiting.
    """
    disk_name = self.DenormalizeResourceName(disk_name)
    zone = self._GetZone()

    disk = {'name': disk_name}
    if self._flags.description:
      disk['description'] = self._flags.description
    if self._flags.size_gb:
      disk['sizeGb'] = str(self._flags.size_gb)
    if self._flags.disk_type:
      disk['type'] = 'zones/%s/diskTypes/%s' % (zone, self._flags.disk_type)

    kwargs = {'project': self._project, 'zone': zone, 'body': disk}
    if self._flags.source_image:
      kwargs['sourceImage'] = self._flags.source_image

    operation = api_requests.Execute(self._disks_api.insert(**kwargs))
    return self._WaitAndGetDisk(operation, disk_name, zone)


class ResizeDisk(DiskCommand):
  """Grow a persistent disk."""

  positional_args = '<disk-name> <size-gb>'

  def Handle(self, disk_name, size_gb):
    """Resize the specified disk.

    Args:
      disk_name: The name of the disk to resize.
      size_gb: The new size of the disk in GB.

    Returns:
      The resized disk resource, or the operation when not waiting.
    """
    disk_name = self.DenormalizeResourceName(disk_name)
    zone = self._GetZone()
    try:
      size_gb = int(size_gb)
    except ValueError:
      raise command_base.CommandError(
          'The disk size must be a whole number of GB: %s' % size_gb)
    if size_gb < 1:
      raise command_base.CommandError(
          'The disk size must be at least 1 GB: %s' % size_gb)

    operation = api_requests.Execute(self._disks_api.resize(
        project=self._project, zone=zone, disk=disk_name,
        body={'sizeGb': str(size_gb)}))
    return self._WaitAndGetDisk(operation, disk_name, zone)


class DeleteDisk(DiskCommand):
  """Delete one or more persistent disks.

  Every disk is looked up first, so that deleting a disk that does not exist
  fails instead of silently succeeding.
  """

  positional_args = '<disk-name-1> ... <disk-name-n>'
  safety_prompt = 'Delete disk'

  def Handle(self, *disk_names):
    """Delete the specified disks.

    Args:
      *disk_names: The names of the disks to delete.

    Returns:
      Tuple (results, exceptions) - results of deleting the disks.
    """
    if not disk_names:
      raise command_base.CommandError('Specify at least one disk to delete.')
    zone = self._GetZone()

    lookup_errors = {}
    disk_names = [self.DenormalizeResourceName(name) for name in disk_names]
    for index, disk_name in enumerate(disk_names):
      try:
        self._GetDisk(disk_name, zone)
      except command_base.Error as e:
        lookup_errors[index] = e

    found = [index for index in range(len(disk_names))
             if index not in lookup_errors]
    outcomes = dict(zip(found, self.ExecuteEachRequest(
        [self._disks_api.delete(project=self._project, zone=zone,
                                disk=disk_names[index])
         for index in found])))

    results = []
    exceptions = []
    for index in range(len(disk_names)):
      if index in lookup_errors:
        exceptions.append(lookup_errors[index])
        continue
      result, exception = outcomes[index]
      if exception is not None:
        exceptions.append(exception)
      elif result is not None:
        results.append(result)
    return results, exceptions


def AddCommands():
  command_registry.AddCmd('getdisk', GetDisk)
  command_registry.AddCmd('adddisk', AddDisk)
  command_registry.AddCmd('resizedisk', ResizeDisk)
  command_registry.AddCmd('deletedisk', DeleteDisk)
