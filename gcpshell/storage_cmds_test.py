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

"""Unit tests for the Cloud Storage object commands."""



import copy
import os
import shutil
import tempfile
import unittest

from absl import flags

from gcpshell import errors
from gcpshell import mock_api
from gcpshell import storage_cmds

FLAGS = flags.FLAGS


class StorageCmdsTestBase(unittest.TestCase):

  def setUp(self):
    self.api = mock_api.MockApi()
    self.objects = self.api.objects()
    self.temp_dir = tempfile.mkdtemp()

  def tearDown(self):
    shutil.rmtree(self.temp_dir)

  def _CreateCommand(self, command_class, argv):
    flag_values = copy.deepcopy(FLAGS)
    command = command_class('storage_command', flag_values)
    args = command._ParseArgumentsAndFlags(flag_values,
                                           ['storage_command'] + argv)
    command.SetFlags(flag_values)
    command.SetApi({'storage': self.api})
    command._stdout = mock_api.MockOutput()
    return command, args

  def _WriteFile(self, relative_path, contents):
    path = os.path.join(self.temp_dir, relative_path)
    if not os.path.isdir(os.path.dirname(path)):
      os.makedirs(os.path.dirname(path))
    with open(path, 'wb') as f:
      f.write(contents)
    return path

  def _ObjectMissing(self):
    self.objects.get.SetResponses(mock_api.MakeHttpError(404))

  def _InsertedNames(self):
    return [call['body']['name'] for call in self.objects.insert.calls]


class ContentTypeTest(unittest.TestCase):

  def testGetContentType(self):
    self.assertEqual(storage_cmds.GetContentType('a/b', {}, 'c/d'), 'a/b')
    self.assertEqual(
        storage_cmds.GetContentType(None, {'Content-Type': 'e/f'}, 'c/d'),
        'e/f')
    self.assertEqual(storage_cmds.GetContentType(None, None, 'c/d'), 'c/d')

  def testInferContentType(self):
    self.assertEqual(storage_cmds.InferContentType('a/index.html'),
                     'text/html')
    self.assertEqual(storage_cmds.InferContentType('blob'),
                     storage_cmds.DEFAULT_MIME_TYPE)


class AddObjectTest(StorageCmdsTestBase):

  def testAddValue(self):
    self._ObjectMissing()
    command, args = self._CreateCommand(
        storage_cmds.AddObject,
        ['bucket', 'greeting', '--value=héllo', '--metadata=a=1,b=2',
         '--predefined_acl=publicRead'])

    command.Handle(*args)

    call = self.objects.insert.calls[0]
    self.assertEqual(call['bucket'], 'bucket')
    self.assertEqual(call['predefinedAcl'], 'publicRead')
    self.assertEqual(call['body'],
                     {'bucket': 'bucket', 'name': 'greeting',
                      'contentType': storage_cmds.UTF8_TEXT_MIME_TYPE,
                      'metadata': {'a': '1', 'b': '2'}})
    media = call['media_body']
    self.assertEqual(media.mimetype(), storage_cmds.UTF8_TEXT_MIME_TYPE)
    self.assertEqual(media.size(), len('héllo'.encode('utf-8')))
    self.assertEqual(media.getbytes(0, media.size()),
                     'héllo'.encode('utf-8'))
    self.assertFalse(media.resumable())

  def testAddExistingObject(self):
    self.objects.get.SetResponses({'name': 'greeting'})
    command, args = self._CreateCommand(storage_cmds.AddObject,
                                        ['bucket', 'greeting', '--value=x'])

    self.assertRaises(errors.AlreadyExistsError, command.Handle, *args)
    self.assertEqual(self.objects.insert.call_count, 0)

  def testForceOverwritesExistingObject(self):
    self.objects.get.SetResponses({'name': 'greeting'})
    command, args = self._CreateCommand(
        storage_cmds.AddObject, ['bucket', 'greeting', '--value=x', '-f'])

    command.Handle(*args)

    self.assertEqual(self._InsertedNames(), ['greeting'])

  def testAddFile(self):
    self._ObjectMissing()
    path = self._WriteFile('page.html', b'<html></html>')
    command, args = self._CreateCommand(storage_cmds.AddObject,
                                        ['bucket', '--file=%s' % path])

    command.Handle(*args)

    call = self.objects.insert.calls[0]
    self.assertEqual(call['body']['name'], 'page.html')
    self.assertEqual(call['body']['contentType'], 'text/html')
    self.assertNotIn('predefinedAcl', call)

  def testAddMissingFile(self):
    command, args = self._CreateCommand(
        storage_cmds.AddObject,
        ['bucket', '--file=%s' % os.path.join(self.temp_dir, 'nope')])

    self.assertRaises(errors.CommandError, command.Handle, *args)

  def testAddFolder(self):
    self._ObjectMissing()
    self._WriteFile('site/index.html', b'<html></html>')
    self._WriteFile('site/b.txt', b'b')
    self._WriteFile('site/css/main.css', b'body {}')
    command, args = self._CreateCommand(
        storage_cmds.AddObject,
        ['bucket', '--folder=%s' % os.path.join(self.temp_dir, 'site'),
         '--object_name_prefix=www'])

    result = command.Handle(*args)

    self.assertEqual(len(result), 5)
    self.assertEqual(self._InsertedNames(),
                     ['www/site/', 'www/site/b.txt', 'www/site/index.html',
                      'www/site/css/', 'www/site/css/main.css'])
    content_types = [call['body']['contentType']
                     for call in self.objects.insert.calls]
    self.assertEqual(content_types,
                     [storage_cmds.UTF8_TEXT_MIME_TYPE, 'text/plain',
                      'text/html', storage_cmds.UTF8_TEXT_MIME_TYPE,
                      'text/css'])

  def testAddFolderStopsAtExistingObject(self):
    self.objects.get.SetResponses(
        lambda bucket, object, projection: (
            {'name': object} if object == 'site/b.txt'
            else mock_api.MakeHttpError(404)))
    self._WriteFile('site/a.txt', b'a')
    self._WriteFile('site/b.txt', b'b')
    self._WriteFile('site/c.txt', b'c')
    command, args = self._CreateCommand(
        storage_cmds.AddObject,
        ['bucket', '--folder=%s' % os.path.join(self.temp_dir, 'site')])

    self.assertRaises(errors.AlreadyExistsError, command.Handle, *args)
    self.assertEqual(self._InsertedNames(), ['site/', 'site/a.txt'])

  def testConflictingSources(self):
    command, args = self._CreateCommand(
        storage_cmds.AddObject,
        ['bucket', 'name', '--value=x', '--file=%s' % self.temp_dir])

    self.assertRaises(errors.CommandError, command.Handle, *args)

  def testMissingObjectName(self):
    command, args = self._CreateCommand(storage_cmds.AddObject,
                                        ['bucket', '--value=x'])

    self.assertRaises(errors.CommandError, command.Handle, *args)


class GetAndTestObjectTest(StorageCmdsTestBase):

  def testGetObject(self):
    command, args = self._CreateCommand(storage_cmds.GetObject,
                                        ['bucket', 'name'])

    self.assertEqual(command.Handle(*args),
                     {'bucket': 'bucket', 'object': 'name',
                      'projection': 'full'})

  def testGetMissingObject(self):
    self._ObjectMissing()
    command, args = self._CreateCommand(storage_cmds.GetObject,
                                        ['bucket', 'name'])

    self.assertRaises(errors.NotFoundError, command.Handle, *args)

  def testTestObject(self):
    command, args = self._CreateCommand(storage_cmds.TestObject,
                                        ['bucket', 'name'])
    self.assertTrue(command.Handle(*args))

    self._ObjectMissing()
    self.assertFalse(command.Handle(*args))

    self.objects.get.SetResponses(mock_api.MakeHttpError(403))
    self.assertRaises(errors.RequestFailedError, command.Handle, *args)


class SetObjectTest(StorageCmdsTestBase):

  def testSetPredefinedAcl(self):
    self.objects.get.SetResponses(
        {'bucket': 'bucket', 'name': 'name', 'acl': [{'role': 'OWNER'}]})
    command, args = self._CreateCommand(
        storage_cmds.SetObject,
        ['bucket', 'name', '--predefined_acl=private'])

    command.Handle(*args)

    self.assertEqual(self.objects.update.calls, [{
        'bucket': 'bucket', 'object': 'name',
        'body': {'bucket': 'bucket', 'name': 'name'},
        'predefinedAcl': 'private', 'projection': 'full'}])

  def testAclIsRequired(self):
    command, args = self._CreateCommand(storage_cmds.SetObject,
                                        ['bucket', 'name'])

    self.assertRaises(errors.CommandError, command.Handle, *args)
    self.assertEqual(self.objects.get.call_count, 0)


class FindObjectsTest(StorageCmdsTestBase):

  def testFindObjects(self):
    self.objects.list.SetResponses(
        {'items': [{'name': 'logs/a'}], 'nextPageToken': 'p2'},
        {'items': [{'name': 'logs/b'}]})
    command, args = self._CreateCommand(
        storage_cmds.FindObjects,
        ['bucket', '--prefix=logs/', '--delimiter=/'])

    result = list(command.Handle(*args))

    self.assertEqual([o['name'] for o in result], ['logs/a', 'logs/b'])
    params = {'bucket': 'bucket', 'projection': 'full', 'prefix': 'logs/',
              'delimiter': '/'}
    self.assertEqual(self.objects.list.calls,
                     [params, dict(params, pageToken='p2')])


class DeleteObjectTest(StorageCmdsTestBase):

  def testDeleteObjects(self):
    self.objects.delete.SetResponses(
        lambda bucket, object: (mock_api.MakeHttpError(404)
                                if object == 'missing' else {}))
    command, args = self._CreateCommand(
        storage_cmds.DeleteObject, ['bucket', 'a', 'missing', 'b', '-f'])

    result, exceptions = command.Handle(*args)

    self.assertEqual(result, None)
    self.assertEqual([call['object'] for call in self.objects.delete.calls],
                     ['a', 'missing', 'b'])
    self.assertEqual(len(exceptions), 1)
    self.assertEqual(exceptions[0].status, 404)


class ReadObjectTest(StorageCmdsTestBase):

  def testReadToOutput(self):
    self.objects.get_media.SetResponses(
        lambda bucket, object: 'héllo'.encode('utf-8'))
    command, args = self._CreateCommand(storage_cmds.ReadObject,
                                        ['bucket', 'name'])

    self.assertEqual(command.Handle(*args), None)
    self.assertEqual(command._stdout.GetCapturedText(), 'héllo')

  def testReadToFile(self):
    self.objects.get_media.SetResponses(lambda bucket, object: b'\x00\x01')
    out_file = os.path.join(self.temp_dir, 'out.bin')
    command, args = self._CreateCommand(
        storage_cmds.ReadObject, ['bucket', 'name', '--out_file=%s' % out_file])

    command.Handle(*args)

    with open(out_file, 'rb') as f:
      self.assertEqual(f.read(), b'\x00\x01')

  def testReadDoesNotClobber(self):
    out_file = self._WriteFile('out.bin', b'old')
    command, args = self._CreateCommand(
        storage_cmds.ReadObject, ['bucket', 'name', '--out_file=%s' % out_file])

    self.assertRaises(errors.CommandError, command.Handle, *args)
    self.assertEqual(self.objects.get_media.call_count, 0)
    with open(out_file, 'rb') as f:
      self.assertEqual(f.read(), b'old')


class WriteObjectTest(StorageCmdsTestBase):

  def testWriteMissingObject(self):
    self._ObjectMissing()
    command, args = self._CreateCommand(storage_cmds.WriteObject,
                                        ['bucket', 'name', '--value=x'])

    self.assertRaises(errors.PreconditionNotMetError, command.Handle, *args)
    self.assertEqual(self.objects.insert.call_count, 0)

  def testForceCreatesMissingObject(self):
    self._ObjectMissing()
    command, args = self._CreateCommand(
        storage_cmds.WriteObject, ['bucket', 'name', '--value=x', '--force'])

    command.Handle(*args)

    self.assertEqual(self.objects.insert.calls[0]['body']['contentType'],
                     storage_cmds.UTF8_TEXT_MIME_TYPE)

  def testWriteKeepsContentTypeAndMergesMetadata(self):
    self.objects.get.SetResponses({
        'bucket': 'bucket', 'name': 'name', 'contentType': 'text/csv',
        'metadata': {'owner': 'ops'}})
    command, args = self._CreateCommand(
        storage_cmds.WriteObject,
        ['bucket', 'name', '--value=a,b', '--metadata=reviewed=yes'])

    command.Handle(*args)

    self.assertEqual(self.objects.patch.call_count, 0)
    self.assertEqual(self.objects.insert.calls[0]['body'], {
        'bucket': 'bucket', 'name': 'name', 'contentType': 'text/csv',
        'metadata': {'owner': 'ops', 'reviewed': 'yes'}})

  def testMissingFileChangesNothing(self):
    self.objects.get.SetResponses({
        'bucket': 'bucket', 'name': 'name', 'metadata': {'owner': 'ops'}})
    command, args = self._CreateCommand(
        storage_cmds.WriteObject,
        ['bucket', 'name', '--file=/no/such/file', '--metadata=k=v'])

    self.assertRaises(errors.CommandError, command.Handle, *args)
    self.assertEqual(self.objects.get.call_count, 0)
    self.assertEqual(self.objects.patch.call_count, 0)
    self.assertEqual(self.objects.insert.call_count, 0)

  def testWriteWithoutNewMetadataKeepsNone(self):
    self.objects.get.SetResponses({'bucket': 'bucket', 'name': 'name'})
    command, args = self._CreateCommand(storage_cmds.WriteObject,
                                        ['bucket', 'name', '--value=x'])

    command.Handle(*args)

    self.assertEqual(self.objects.patch.call_count, 0)
    self.assertEqual(self.objects.insert.calls[0]['body'],
                     {'bucket': 'bucket', 'name': 'name',
                      'contentType': storage_cmds.UTF8_TEXT_MIME_TYPE})


class CopyObjectTest(StorageCmdsTestBase):

  def testCopyToNewObject(self):
    self.objects.get.SetResponses(
        lambda bucket, object, projection: (
            {'bucket': bucket, 'name': object} if bucket == 'src'
            else mock_api.MakeHttpError(404)))
    command, args = self._CreateCommand(storage_cmds.CopyObject,
                                        ['src', 'name', 'dst'])
    command._input = mock_api.MockInput('n')

    command.Handle(*args)

    self.assertEqual(command._input.prompts, [])
    self.assertEqual(self.objects.copy.calls, [{
        'sourceBucket': 'src', 'sourceObject': 'name',
        'destinationBucket': 'dst', 'destinationObject': 'name',
        'body': {}}])

  def testCopyOverExistingObjectAsks(self):
    self.objects.get.SetResponses(
        lambda bucket, object, projection: {'bucket': bucket, 'name': object})
    command, args = self._CreateCommand(storage_cmds.CopyObject,
                                        ['src', 'name', 'dst', 'copy'])

    command._input = mock_api.MockInput('n')
    self.assertEqual(command.Handle(*args), None)
    self.assertEqual(self.objects.copy.call_count, 0)
    self.assertEqual(len(command._input.prompts), 1)

    command._input = mock_api.MockInput('y')
    command.Handle(*args)
    self.assertEqual(self.objects.copy.calls[0]['destinationObject'], 'copy')

  def testCopyWithForceDoesNotAsk(self):
    self.objects.get.SetResponses({'bucket': 'src', 'name': 'name'})
    command, args = self._CreateCommand(storage_cmds.CopyObject,
                                        ['src', 'name', 'dst', '--force'])
    command._input = mock_api.MockInput('n')

    command.Handle(*args)

    self.assertEqual(command._input.prompts, [])
    self.assertEqual(self.objects.copy.call_count, 1)

  def testCopyMissingSource(self):
    self._ObjectMissing()
    command, args = self._CreateCommand(storage_cmds.CopyObject,
                                        ['src', 'name'])

    self.assertRaises(errors.NotFoundError, command.Handle, *args)
    self.assertEqual(self.objects.copy.call_count, 0)


if __name__ == '__main__':
  unittest.main()
