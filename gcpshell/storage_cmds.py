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

"""Commands for interacting with Google Cloud Storage objects."""



import io
import mimetypes
import os
import posixpath

from absl import flags
from googleapiclient import http as api_http

from gcpshell import api_requests
from gcpshell import command_base
from gcpshell import command_registry
from gcpshell import errors
from gcpshell import lookup
from gcpshell import paging
from gcpshell import shell_logging
from gcpshell import utils


LOGGER = shell_logging.LOGGER

UTF8_TEXT_MIME_TYPE = 'text/plain; charset=utf-8'
DEFAULT_MIME_TYPE = 'application/octet-stream'

PREDEFINED_ACLS = ('authenticatedRead', 'bucketOwnerFullControl',
                   'bucketOwnerRead', 'private', 'projectPrivate',
                   'publicRead')

# Uploads larger than this are sent in resumable chunks.
RESUMABLE_THRESHOLD = 5 * 1024 * 1024


def InferContentType(path):
  """Guesses the content type of a local file from its name."""
  content_type, _ = mimetypes.guess_type(path)
  return content_type or DEFAULT_MIME_TYPE


def GetContentType(content_type, metadata, default):
  """Picks the content type for an upload.

  An explicit content type wins, then a 'Content-Type' metadata entry, then
  the default.
  """
  if content_type:
    return content_type
  if metadata and metadata.get('Content-Type'):
    return metadata['Content-Type']
  return default


def LocalToObjectPath(path):
  return path.replace('\\', '/')


class StorageCommand(command_base.GoogleCloudCommand):
  """Base command for working with Cloud Storage objects."""

  required_apis = ('storage',)
  requires_project = False

  summary_fields = (('name', 'name'),
                    ('bucket', 'bucket'),
                    ('size', 'size'),
                    ('content-type', 'contentType'),
                    ('updated', 'updated'))

  detail_fields = (('name', 'name'),
                   ('bucket', 'bucket'),
                   ('size', 'size'),
                   ('content-type', 'contentType'),
                   ('storage-class', 'storageClass'),
                   ('generation', 'generation'),
                   ('md5-hash', 'md5Hash'),
                   ('created', 'timeCreated'),
                   ('updated', 'updated'),
                   ('metadata', 'metadata'))

  resource_collection_name = 'objects'

  def SetApi(self, api):
    """Set the Cloud Storage API for the command.

    Args:
      api: The APIs used by this command.
    """
    self._objects_api = api['storage'].objects()

  def _DefineForceFlag(self, flag_values, help_text):
    flags.DEFINE_bool('force',
                      False,
                      help_text,
                      flag_values=flag_values,
                      short_name='f')

  def _GetRequest(self, bucket, object_name):
    return self._objects_api.get(bucket=bucket, object=object_name,
                                 projection='full')

  def _GetObject(self, bucket, object_name):
    """Fetches an object, raising NotFoundError if it does not exist."""
    return lookup.Get(self._GetRequest(bucket, object_name),
                      description='Storage object \'%s\' in bucket \'%s\'' % (
                          object_name, bucket))

  def _ObjectExists(self, bucket, object_name):
    return lookup.Exists(self._GetRequest(bucket, object_name))

  def _Upload(self, bucket, object_name, stream, size, content_type,
              metadata, predefined_acl=None):
    """Creates or replaces an object with the contents of stream.

    Args:
      bucket: The bucket to write to.
      object_name: The name of the object.
      stream: A binary file-like object holding the contents.
      size: The number of bytes in stream.
      content_type: The content type of the object.
      metadata: A dict of custom metadata, or None.
      predefined_acl: One of PREDEFINED_ACLS, or None.

    Returns:
      The new object resource.
    """
    if metadata and 'Content-Type' in metadata:
      metadata = dict(metadata)
      metadata['Content-Type'] = content_type

    body = {'bucket': bucket, 'name': object_name,
            'contentType': content_type}
    if metadata:
      body['metadata'] = metadata

    kwargs = {
        'bucket': bucket,
        'body': body,
        'media_body': api_http.MediaIoBaseUpload(
            stream, mimetype=content_type,
            resumable=size > RESUMABLE_THRESHOLD),
        'projection': 'full',
    }
    if predefined_acl:
      kwargs['predefinedAcl'] = predefined_acl

    LOGGER.debug('Uploading %s bytes to gs://%s/%s.', size, bucket,
                 object_name)
    return api_requests.Execute(self._objects_api.insert(**kwargs))


class AddObject(StorageCommand):
  """Create a new storage object from a string, a file or a folder.

  With --folder every file below the folder is uploaded, keeping the folder
  structure in the object names. No object is overwritten unless --force is
  given.
  """

  positional_args = '<bucket> [<object-name>]'

  def __init__(self, name, flag_values):
    super(AddObject, self).__init__(name, flag_values)
    flags.DEFINE_string('value',
                        None,
                        'The contents of the object, stored as UTF-8 text.',
                        flag_values=flag_values)
    flags.DEFINE_string('file',
                        None,
                        'A local file holding the contents of the object. '
                        'The object name defaults to the file name.',
                        flag_values=flag_values)
    flags.DEFINE_string('folder',
                        None,
                        'A local folder to upload recursively.',
                        flag_values=flag_values)
    flags.DEFINE_string('object_name_prefix',
                        None,
                        'With --folder, a prefix for the uploaded object '
                        'names.',
                        flag_values=flag_values)
    flags.DEFINE_string('content_type',
                        None,
                        'The content type of the object. Inferred from the '
                        'file name when omitted.',
                        flag_values=flag_values)
    flags.DEFINE_enum('predefined_acl',
                      None,
                      PREDEFINED_ACLS,
                      'A predefined ACL to apply to the new objects.',
                      flag_values=flag_values)
    flags.DEFINE_list('metadata',
                      [],
                      'Comma separated key=value metadata of the object.',
                      flag_values=flag_values)
    self._DefineForceFlag(flag_values, 'Overwrite existing objects.')

  def _UploadNew(self, bucket, object_name, stream, size, content_type,
                 metadata):
    if self._ObjectExists(bucket, object_name) and not self._flags.force:
      raise errors.AlreadyExistsError(
          'Storage object \'%s\' already exists. Use --force to overwrite.' %
          object_name)
    return self._Upload(bucket, object_name, stream, size, content_type,
                        metadata, predefined_acl=self._flags.predefined_acl)

  def _UploadFile(self, bucket, object_name, path, content_type, metadata):
    with open(path, 'rb') as stream:
      return self._UploadNew(bucket, object_name, stream,
                             os.path.getsize(path), content_type, metadata)

  def _UploadDirectory(self, bucket, directory, prefix, metadata):
    """Uploads directory and everything below it under prefix.

    Returns:
      The list of created objects, including the empty object marking the
      folder itself.
    """
    if not prefix.endswith('/'):
      prefix += '/'

    created = [self._UploadNew(
        bucket, prefix, io.BytesIO(b''), 0,
        GetContentType(None, metadata, UTF8_TEXT_MIME_TYPE), metadata)]

    entries = sorted(os.listdir(directory))
    for entry in entries:
      path = os.path.join(directory, entry)
      if os.path.isfile(path):
        created.append(self._UploadFile(
            bucket, LocalToObjectPath(posixpath.join(prefix, entry)), path,
            GetContentType(self._flags.content_type, metadata,
                           InferContentType(path)),
            metadata))
    for entry in entries:
      path = os.path.join(directory, entry)
      if os.path.isdir(path):
        created.extend(self._UploadDirectory(
            bucket, path, posixpath.join(prefix, entry), metadata))
    return created

  def Handle(self, bucket, object_name=None):
    """Create the object or objects.

    Args:
      bucket: The bucket to create the objects in.
      object_name: The name of the new object. Not used with --folder.

    Returns:
      The new object, or a list of new objects for --folder.
    """
    sources = [f for f in ('value', 'file', 'folder')
               if self._flags[f].value is not None]
    if len(sources) > 1:
      raise command_base.CommandError(
          'Specify at most one of --value, --file and --folder.')
    metadata = utils.ParseKeyValuePairs(self._flags.metadata)

    if self._flags.folder:
      folder = os.path.abspath(self._flags.folder).rstrip('/\\')
      if not os.path.isdir(folder):
        raise command_base.CommandError(
            'Directory \'%s\' cannot be found.' % folder)
      prefix = os.path.basename(folder)
      if self._flags.object_name_prefix:
        prefix = posixpath.join(
            LocalToObjectPath(self._flags.object_name_prefix), prefix)
      return self._UploadDirectory(bucket, folder, prefix, metadata)

    if self._flags.file:
      path = os.path.abspath(self._flags.file)
      if not os.path.isfile(path):
        raise command_base.CommandError('File not found: %s' % path)
      return self._UploadFile(
          bucket, object_name or os.path.basename(path), path,
          GetContentType(self._flags.content_type, metadata,
                         InferContentType(path)),
          metadata)

    if not object_name:
      raise command_base.CommandError(
          'Positional argument "object_name" is missing.')
    contents = (self._flags.value or '').encode('utf-8')
    return self._UploadNew(
        bucket, object_name, io.BytesIO(contents), len(contents),
        GetContentType(self._flags.content_type, metadata,
                       UTF8_TEXT_MIME_TYPE),
        metadata)


class GetObject(StorageCommand):
  """Get the metadata of a storage object."""

  positional_args = '<bucket> <object-name>'

  def Handle(self, bucket, object_name):
    """Get the specified object.

    Args:
      bucket: The bucket holding the object.
      object_name: The name of the object.

    Returns:
      The object resource.
    """
    return self._GetObject(bucket, object_name)


class SetObject(StorageCommand):
  """Replace the ACL of a storage object with a predefined ACL."""

  positional_args = '<bucket> <object-name>'

  def __init__(self, name, flag_values):
    super(SetObject, self).__init__(name, flag_values)
    flags.DEFINE_enum('predefined_acl',
                      None,
                      PREDEFINED_ACLS,
                      'The predefined ACL to apply.',
                      flag_values=flag_values)

  def Handle(self, bucket, object_name):
    """Update the ACL of the specified object.

    Args:
      bucket: The bucket holding the object.
      object_name: The name of the object.

    Returns:
      The updated object resource.
    """
    if not self._flags.predefined_acl:
      raise command_base.CommandError(
          'You must specify an ACL using the "--predefined_acl" flag.')
    storage_object = self._GetObject(bucket, object_name)
    # A request may not carry both an ACL list and a predefined ACL.
    storage_object.pop('acl', None)
    return api_requests.Execute(self._objects_api.update(
        bucket=bucket, object=object_name, body=storage_object,
        predefinedAcl=self._flags.predefined_acl, projection='full'))


class FindObjects(StorageCommand, command_base.GoogleCloudListCommand):
  """List the objects of a bucket."""

  positional_args = '<bucket>'
  default_sort_field = 'name'

  def __init__(self, name, flag_values):
    super(FindObjects, self).__init__(name, flag_values)
    flags.DEFINE_string('prefix',
                        None,
                        'Only list objects whose names begin with this '
                        'prefix.',
                        flag_values=flag_values)
    flags.DEFINE_string('delimiter',
                        None,
                        'Omit objects whose names contain the delimiter '
                        'after the prefix, e.g. \'/\' lists one folder '
                        'level.',
                        flag_values=flag_values)

  def Handle(self, bucket):
    """Returns the lazy listing of the bucket's objects.

    Args:
      bucket: The bucket to list.
    """
    params = {'bucket': bucket, 'projection': 'full'}
    if self._flags.prefix:
      params['prefix'] = self._flags.prefix
    if self._flags.delimiter:
      params['delimiter'] = self._flags.delimiter
    return paging.ListAll(self._objects_api.list, params,
                          max_results=self._flags.max_results,
                          cancel_event=self._cancel_event)


class DeleteObject(StorageCommand):
  """Delete one or more storage objects."""

  positional_args = '<bucket> <object-name-1> ... <object-name-n>'
  safety_prompt = 'Delete object'

  def Handle(self, bucket, *object_names):
    """Delete the specified objects.

    Args:
      bucket: The bucket holding the objects.
      *object_names: The names of the objects to delete.

    Returns:
      Tuple (results, exceptions) - results of deleting the objects.
    """
    if not object_names:
      raise command_base.CommandError(
          'Specify at least one object to delete.')
    exceptions = []
    for object_name in object_names:
      try:
        api_requests.Execute(self._objects_api.delete(bucket=bucket,
                                                      object=object_name))
      except errors.Error as e:
        exceptions.append(e)
    return None, exceptions


class ReadObject(StorageCommand):
  """Print the contents of a storage object, or save them to a file."""

  positional_args = '<bucket> <object-name>'

  def __init__(self, name, flag_values):
    super(ReadObject, self).__init__(name, flag_values)
    flags.DEFINE_string('out_file',
                        None,
                        'Save the contents to this local file instead of '
                        'printing them.',
                        flag_values=flag_values)
    self._DefineForceFlag(flag_values, 'Overwrite an existing --out_file.')

  def Handle(self, bucket, object_name):
    """Download the specified object.

    Args:
      bucket: The bucket holding the object.
      object_name: The name of the object.

    Returns:
      None.
    """
    out_file = self._flags.out_file
    if out_file:
      out_file = os.path.abspath(out_file)
      if os.path.exists(out_file) and not self._flags.force:
        raise command_base.CommandError(
            'File \'%s\' already exists. Use --force to overwrite.' %
            out_file)

    contents = api_requests.Execute(
        self._objects_api.get_media(bucket=bucket, object=object_name))
    if isinstance(contents, str):
      contents = contents.encode('utf-8')

    if out_file:
      with open(out_file, 'wb') as f:
        f.write(contents)
    else:
      self._stdout.write(contents.decode('utf-8', 'replace'))
      self._stdout.flush()
    return None


class WriteObject(StorageCommand):
  """Replace the contents of an existing storage object.

  The object's metadata is kept; --metadata entries are merged into it.
  """

  positional_args = '<bucket> <object-name>'

  def __init__(self, name, flag_values):
    super(WriteObject, self).__init__(name, flag_values)
    flags.DEFINE_string('value',
                        None,
                        'The new contents of the object, stored as UTF-8 '
                        'text.',
                        flag_values=flag_values)
    flags.DEFINE_string('file',
                        None,
                        'A local file holding the new contents.',
                        flag_values=flag_values)
    flags.DEFINE_string('content_type',
                        None,
                        'The content type of the object. Defaults to the '
                        'existing content type.',
                        flag_values=flag_values)
    flags.DEFINE_list('metadata',
                      [],
                      'Comma separated key=value metadata to merge into the '
                      'object\'s metadata.',
                      flag_values=flag_values)
    self._DefineForceFlag(flag_values,
                          'Create the object if it does not exist.')

  def Handle(self, bucket, object_name):
    """Overwrite the specified object.

    Args:
      bucket: The bucket holding the object.
      object_name: The name of the object.

    Returns:
      The rewritten object resource.
    """
    if self._flags.value is not None and self._flags.file:
      raise command_base.CommandError(
          'Specify at most one of --value and --file.')
    new_metadata = utils.ParseKeyValuePairs(self._flags.metadata)
    path = None
    if self._flags.file:
      path = os.path.abspath(self._flags.file)
      if not os.path.isfile(path):
        raise command_base.CommandError('File not found: %s' % path)

    result = lookup.Lookup(self._GetRequest(bucket, object_name))
    if result.state == lookup.ERROR:
      raise result.error
    existing = result.resource
    if existing is None:
      if not self._flags.force:
        raise errors.PreconditionNotMetError(
            'Storage object \'%s\' does not exist. Use --force to ignore.' %
            object_name)
      existing = {}
    # The upload replaces the whole resource, metadata included.
    metadata = dict(existing.get('metadata') or {}, **new_metadata)
    default_content_type = existing.get('contentType')

    if path:
      content_type = GetContentType(
          self._flags.content_type, metadata,
          default_content_type or InferContentType(path))
      with open(path, 'rb') as stream:
        return self._Upload(bucket, object_name, stream,
                            os.path.getsize(path), content_type, metadata)

    contents = (self._flags.value or '').encode('utf-8')
    content_type = GetContentType(
        self._flags.content_type, metadata,
        default_content_type or UTF8_TEXT_MIME_TYPE)
    return self._Upload(bucket, object_name, io.BytesIO(contents),
                        len(contents), content_type, metadata)


class TestObject(StorageCommand):
  """Print whether a storage object exists."""

  positional_args = '<bucket> <object-name>'

  def Handle(self, bucket, object_name):
    """Check the specified object.

    Args:
      bucket: The bucket to look in.
      object_name: The name of the object.

    Returns:
      True if the object exists, False if it does not.
    """
    return self._ObjectExists(bucket, object_name)


class CopyObject(StorageCommand):
  """Copy a storage object.

  The destination bucket and object name default to the source's.
  """

  positional_args = ('<source-bucket> <source-object-name> '
                     '[<destination-bucket>] [<destination-object-name>]')

  def __init__(self, name, flag_values):
    super(CopyObject, self).__init__(name, flag_values)
    self._DefineForceFlag(flag_values,
                          'Overwrite the destination without asking.')

  def Handle(self, source_bucket, source_object, destination_bucket=None,
             destination_object=None):
    """Copy the specified object.

    Args:
      source_bucket: The bucket holding the object to copy.
      source_object: The name of the object to copy.
      destination_bucket: The bucket to copy to.
      destination_object: The name of the copy.

    Returns:
      The new object resource, or None if the user declined to overwrite.
    """
    source = self._GetObject(source_bucket, source_object)
    destination_bucket = destination_bucket or source['bucket']
    destination_object = destination_object or source['name']

    if (not self._flags.force and
        self._ObjectExists(destination_bucket, destination_object)):
      if not self.Confirm('Object gs://%s/%s exists. Overwrite?' % (
          destination_bucket, destination_object)):
        return None

    return api_requests.Execute(self._objects_api.copy(
        sourceBucket=source['bucket'], sourceObject=source['name'],
        destinationBucket=destination_bucket,
        destinationObject=destination_object, body={}))


def AddCommands():
  command_registry.AddCmd('addobject', AddObject)
  command_registry.AddCmd('getobject', GetObject)
  command_registry.AddCmd('setobject', SetObject)
  command_registry.AddCmd('findobjects', FindObjects)
  command_registry.AddCmd('deleteobject', DeleteObject)
  command_registry.AddCmd('readobject', ReadObject)
  command_registry.AddCmd('writeobject', WriteObject)
  command_registry.AddCmd('testobject', TestObject)
  command_registry.AddCmd('copyobject', CopyObject)
