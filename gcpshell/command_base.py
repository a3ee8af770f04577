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

"""Base command types for interacting with Google Cloud Platform APIs."""



import inspect
import json
import os
import sys
import threading
import types

from absl import flags
from googleapiclient import discovery
import httplib2
import oauth2client.client as oauth2_client

from gcpshell import api_requests
from gcpshell import cloud_sdk_config
from gcpshell import errors
from gcpshell import operations
from gcpshell import shell_logging
from gcpshell import table_formatter
from gcpshell import utils
from gcpshell import version


FLAGS = flags.FLAGS
LOGGER = shell_logging.LOGGER

GLOBAL_ZONE_NAME = 'global'

DEFAULT_AUTH_SCOPES = (
    'https://www.googleapis.com/auth/cloud-platform',
)

# Re-exported so commands only need to import command_base.
Error = errors.Error
CommandError = errors.CommandError


flags.DEFINE_string(
    'project',
    None,
    'The name of the Google Cloud Platform project. Defaults to the project '
    'of the active Cloud SDK configuration.')
flags.DEFINE_enum(
    'format', 'table',
    ('table', 'sparse', 'json', 'csv', 'names'),
    'Format for command output. Options include:'
    '\n table: formatted table output'
    '\n sparse: simpler table output'
    '\n json: raw json output'
    '\n csv: csv format with header'
    '\n names: list of resource names only, no header')
flags.DEFINE_enum(
    'long_values_display_format',
    'elided',
    ['elided', 'full'],
    'The display preference for long table values.')
flags.DEFINE_string(
    'api_host',
    None,
    'The base URL of the Google Cloud APIs, e.g. a test endpoint. The '
    'service path of each API is appended to it.')
flags.DEFINE_bool(
    'fetch_discovery',
    False,
    'If true, grab the API descriptions from the discovery API instead of '
    'using the copies bundled with the client library.')
flags.DEFINE_bool(
    'synchronous_mode',
    True,
    'If false, return immediately after posting a request.')
flags.DEFINE_integer(
    'sleep_between_polls',
    operations.DEFAULT_SLEEP_BETWEEN_POLLS,
    'The time to sleep between polls to the server in seconds. The sleep '
    'grows after every poll.',
    lower_bound=1, upper_bound=600)
flags.DEFINE_integer(
    'max_wait_time',
    operations.DEFAULT_MAX_WAIT_TIME,
    'The maximum time to wait for an asynchronous operation to complete in '
    'seconds.',
    lower_bound=1, upper_bound=3600)
flags.DEFINE_integer(
    'concurrent_operations',
    operations.DEFAULT_CONCURRENT_OPERATIONS,
    'The maximum number of concurrent operations to wait on at once.',
    lower_bound=1, upper_bound=20)


class GoogleCloudCommand(object):
  """Base class for commands that interact with Google Cloud APIs.

  Overriding classes must override the SetApi and Handle methods.

  Attributes:
    required_apis: The names of the APIs (keys of version.API_VERSIONS) the
        command needs. SetApi receives a dict of them.
    requires_project: Whether the command fails without a --project.
    operation_detail_fields: A set of tuples of (human readable name, json
        field path) used to generate a pretty-printed detailed description
        of an operation resource.
    safety_prompt: If defined, the user must confirm before the command
        runs, unless --force is given.
    positional_args: The usage string for the positional arguments.
  """

  required_apis = ('compute',)
  requires_project = True

  operation_summary_fields = (('name', 'name'),
                              ('zone', 'zone'),
                              ('status', 'status'),
                              ('status-message', 'statusMessage'),
                              ('target', 'targetLink'),
                              ('insert-time', 'insertTime'),
                              ('operation-type', 'operationType'),
                              ('error', 'error.errors.code'),
                              ('warning', 'warnings.code'))
  operation_detail_fields = (('name', 'name'),
                             ('zone', 'zone'),
                             ('region', 'region'),
                             ('creation-time', 'creationTimestamp'),
                             ('status', 'status'),
                             ('progress', 'progress'),
                             ('status-message', 'statusMessage'),
                             ('target', 'targetLink'),
                             ('target-id', 'targetId'),
                             ('insert-time', 'insertTime'),
                             ('user', 'user'),
                             ('start-time', 'startTime'),
                             ('end-time', 'endTime'),
                             ('operation-type', 'operationType'),
                             ('error-code', 'httpErrorStatusCode'),
                             ('error-message', 'httpErrorMessage'),
                             ('warning', 'warnings.code'),
                             ('warning-message', 'warnings.message'))

  # If this is set to True then the arguments and flags for this
  # command are sorted such that everything that looks like a flag is
  # pulled out of the arguments.
  sort_args_and_flags = True

  def __init__(self, name, flag_values):
    """Initializes a new instance of a GoogleCloudCommand.

    Args:
      name: The name of the command.
      flag_values: The FlagValues instance command flags are defined on.
    """
    self._command_name = name
    self._flag_values = flag_values
    self._flags = None
    self._project = None
    self._credential = None
    self._cancel_event = threading.Event()
    # None waits on the wall clock.
    self._timer = None
    self._compute_api = None
    self._input = input
    self._stdout = sys.stdout

    if hasattr(self, 'safety_prompt'):
      flags.DEFINE_bool('force',
                        False,
                        'Override the "%s" prompt' % self.safety_prompt,
                        flag_values=flag_values,
                        short_name='f')

  def _ParseArgumentsAndFlags(self, flag_values, argv):
    """Parses the command line arguments for the command.

    This method matches up positional arguments based on the
    signature of the Handle method.  It also parses the flags
    found on the command line.

    argv will contain, <main python file>, positional-arguments, flags...

    Args:
      flag_values: The flags list to update
      argv: The command line argument list

    Returns:
      The list of position arguments for the given command.

    Raises:
      CommandError: If any problems occur with parsing the commands (e.g.,
          type mismatches, out of bounds, unknown flags, ...).
    """
    old_gnu_mode = flag_values.is_gnu_getopt()
    try:
      flag_values.set_gnu_getopt(self.sort_args_and_flags)
      argv = flag_values(argv)
    except flags.Error as e:
      raise CommandError(e)
    finally:
      flag_values.set_gnu_getopt(old_gnu_mode)

    argspec = inspect.getfullargspec(self.Handle)

    # Skip the implicit argument 'self'.
    default_count = len(argspec.defaults) if argspec.defaults else 0
    pos_arg_names = argspec.args[1:]
    pos_arg_values = argv[1:len(pos_arg_names) + 1]
    unparsed_args = argv[len(pos_arg_names) + 1:]

    if len(pos_arg_names) - default_count > len(pos_arg_values):
      missing_args = pos_arg_names[len(pos_arg_values):]
      missing_args = ['"%s"' % a for a in missing_args]
      raise CommandError('Positional argument %s is missing.' %
                         ', '.join(missing_args))

    for (name, value) in zip(pos_arg_names, pos_arg_values):
      if value.startswith('--'):
        raise CommandError('Invalid positional argument value \'%s\' '
                           'for argument \'%s\'\n' % (value, name))

    if unparsed_args and not argspec.varargs:
      unparsed_args = ['"%s"' % a for a in unparsed_args]
      raise CommandError('Unknown argument: %s' %
                         ', '.join(unparsed_args))

    return argv[1:]

  @staticmethod
  def DenormalizeResourceName(resource_name):
    """Return the relative name for the given resource.

    Args:
      resource_name: The name of the resource. This can be either relative or
          absolute.

    Returns:
      The name of the resource relative to its enclosing collection.
    """
    return resource_name.strip('/').rpartition('/')[2]

  @staticmethod
  def DenormalizeProjectName(flag_values):
    """Denormalize the 'project' entry in the given FlagValues instance.

    Args:
      flag_values: The FlagValues instance to update.

    Raises:
      CommandError: If the project is missing or malformed.
    """
    project = flag_values.project

    if not project:
      raise CommandError(
          'You must specify a project name using the "--project" flag or '
          'set one in the active Cloud SDK configuration.')
    elif project.lower() != project:
      raise CommandError(
          'Characters in project name must be lowercase: %s.' % project)

    project = project.strip('/')
    if project.startswith('projects/'):
      project = project[len('projects/'):]
    if '/' in project:
      raise CommandError('Project names can contain a \'/\' only when they '
                         'begin with \'projects/\'.')

    flag_values.project = project

  def SetFlagDefaults(self, flag_values, sdk_config=None):
    """Fills unset --project and --zone from the Cloud SDK configuration.

    Args:
      flag_values: The parsed FlagValues instance.
      sdk_config: A CloudSdkConfig; the active configuration by default.
    """
    sdk_config = sdk_config or cloud_sdk_config.CloudSdkConfig()
    try:
      if 'project' in flag_values and not flag_values.project:
        flag_values.project = sdk_config.GetProject()
      if ('zone' in flag_values and not flag_values.zone and
          getattr(self, 'zone_from_config', False)):
        flag_values.zone = sdk_config.GetZone()
    except cloud_sdk_config.Error as e:
      LOGGER.warning('%s', e)

  def SetFlags(self, flag_values):
    """Set the flags to be used by the command.

    Args:
      flag_values: The parsed flags values.
    """
    self._flags = flag_values
    self._project = self._flags.project

  def _AuthenticateWrapper(self, http):
    """Adds the OAuth token into http requests.

    Args:
      http: An instance of httplib2.Http or something that acts like it.

    Returns:
      httplib2.Http like object.

    Raises:
      CommandError: If the credentials can't be found.
    """
    if not self._credential:
      try:
        credential = oauth2_client.GoogleCredentials.get_application_default()
      except oauth2_client.ApplicationDefaultCredentialsError as e:
        raise CommandError(
            'Could not get valid credentials for API: %s' % e)
      if credential.create_scoped_required():
        credential = credential.create_scoped(DEFAULT_AUTH_SCOPES)
      self._credential = credential
    return self._credential.authorize(http)

  def CreateHttp(self):
    """Construct an HTTP object to use with an API call.

    This is useful when doing multithreaded work as httplib2 Http
    objects aren't threadsafe.

    Returns:
      An object that implements the httplib2.Http interface
    """
    http = httplib2.Http()
    return self._AuthenticateWrapper(http)

  def BuildApi(self, api_name, http):
    """Builds the discovery API for api_name.

    Args:
      api_name: A key of version.API_VERSIONS.
      http: a httplib2.Http like object for communication.

    Returns:
      The API object to use.
    """
    client_options = None
    if self._flags.api_host:
      client_options = {
          'api_endpoint': '%s/%s' % (self._flags.api_host.rstrip('/'),
                                     version.API_SERVICE_PATHS[api_name])}
    return discovery.build(
        api_name,
        version.API_VERSIONS[api_name],
        http=http,
        cache_discovery=False,
        static_discovery=not self._flags.fetch_discovery,
        client_options=client_options)

  def SetApi(self, api):
    """Set the APIs for the command.

    Derived classes override this method, pulling the necessary
    domain specific API out of the given APIs.

    Args:
      api: A dict of API name to discovery API, holding required_apis.
    """
    raise NotImplementedError()

  def Handle(self):
    """Actual implementation of the command.

    Derived classes override this method, adding positional arguments
    to this method as required.

    Returns:
      Either a single JSON-serializable result, an iterable of results, or a
      tuple of a result and a list of exceptions that were raised.
    """
    raise NotImplementedError()

  def _HandleSafetyPrompt(self, positional_arguments):
    """If a safety prompt is present on the class, handle it now.

    By defining a field 'safety_prompt', derived classes can request
    that the user confirm a dangerous operation prior to execution,
    e.g. deleting a resource.  Users may override this check by
    passing the --force flag on the command line.

    Args:
      positional_arguments: A list of positional argument strings.

    Returns:
      True if the command should continue, False if not.
    """
    if hasattr(self, 'safety_prompt'):
      if not self._flags.force:
        prompt = self.safety_prompt
        if positional_arguments:
          prompt = '%s %s' % (prompt, ', '.join(positional_arguments))
        self._stdout.write('%s? [y/N]\n' % prompt)
        userinput = self._input('>>> ')

        if not userinput:
          userinput = 'n'
        userinput = userinput.lstrip()[:1].lower()

        if not userinput == 'y':
          return False

    return True

  def Confirm(self, message):
    """Asks the user to confirm message unless --force was given."""
    if 'force' in self._flags and self._flags.force:
      return True
    return utils.Proceed(message, input_func=self._input)

  def MakeOperationWaiter(self):
    """Returns an OperationWaiter configured from the flags."""
    return operations.OperationWaiter(
        self._compute_api,
        self._project,
        timer=self._timer,
        cancel_event=self._cancel_event,
        http_factory=self.CreateHttp,
        sleep_between_polls=self._flags.sleep_between_polls,
        max_wait_time=self._flags.max_wait_time,
        concurrent_operations=self._flags.concurrent_operations)

  def WaitForOperation(self, result, scope=None, collection_name=None):
    """Waits for result if it is an operation and synchronous mode is on.

    Returns:
      The DONE operation, result itself when there is nothing to wait on,
      or None if the wait was cancelled.
    """
    if not self._flags.synchronous_mode:
      return result
    collection_name = (collection_name or
                       getattr(self, 'resource_collection_name', None))
    return self.MakeOperationWaiter().WaitForOperation(
        result, scope=scope, collection_name=collection_name)

  def ExecuteEachRequest(self, requests, collection_name=None):
    """Submits requests in order, then waits for the resulting operations.

    Every request is submitted before any wait begins. Waits then run
    concurrently.

    Args:
      requests: A list of request objects to execute.
      collection_name: The name of the collection, used in log messages.

    Returns:
      A list with one (result, exception) pair per request, in request
      order. Requests left unsent after a cancel, and cancelled waits, give
      (None, None).
    """
    outcomes = []
    sent = []
    for index, request in enumerate(requests):
      if self._cancel_event.is_set():
        outcomes.append((None, None))
        continue
      try:
        outcomes.append((api_requests.Execute(request), None))
        sent.append(index)
      except errors.Error as e:
        outcomes.append((None, e))

    if not self._flags.synchronous_mode or not sent:
      return outcomes

    collection_name = (collection_name or
                       getattr(self, 'resource_collection_name', None))
    waited = self.MakeOperationWaiter().WaitForEach(
        [outcomes[index][0] for index in sent],
        collection_name=collection_name)
    for index, outcome in zip(sent, waited):
      outcomes[index] = outcome
    return outcomes

  def ExecuteRequests(self, requests, collection_name=None):
    """Like ExecuteEachRequest, but splits the outcomes.

    Returns:
      A tuple with (results, exceptions) where results is the list
      of all results and exceptions is any exceptions that were
      raised, both in request order.
    """
    results = []
    exceptions = []
    for result, exception in self.ExecuteEachRequest(requests,
                                                     collection_name):
      if exception is not None:
        exceptions.append(exception)
      elif result is not None:
        results.append(result)
    return results, exceptions

  def RunWithFlagsAndPositionalArgs(self, flag_values, pos_arg_values):
    """Run the command with the parsed flags and positional arguments.

    Args:
      flag_values: The parsed FlagValues instance.
      pos_arg_values: The positional arguments for the Handle method.

    Raises:
      CommandError: If user chooses to not proceed with the command at
          the safety prompt.

    Returns:
      A tuple (result, exceptions) where result is a JSON-serializable
      result or an iterable of them and exceptions is a list of
      exceptions that were raised when running this command.
    """
    http = self.CreateHttp()
    apis = {}
    for api_name in self.required_apis:
      apis[api_name] = self.BuildApi(api_name, http)
    self._compute_api = apis.get('compute')

    self.SetApi(apis)

    if not self._HandleSafetyPrompt(pos_arg_values):
      raise CommandError('Operation aborted')

    exceptions = []
    result = self.Handle(*pos_arg_values)
    if isinstance(result, tuple):
      result, exceptions = result
    return result, exceptions

  def Run(self, argv):
    """Run the command, printing the result.

    Args:
      argv: The arguments to the command.

    Returns:
      0 if the command completes successfully, otherwise 1.
    """
    try:
      pos_arg_values = self._ParseArgumentsAndFlags(self._flag_values, argv)
      shell_logging.SetupLogging(self._flag_values.log_level)

      self.SetFlagDefaults(self._flag_values)
      if self.requires_project or self._flag_values.project:
        self.DenormalizeProjectName(self._flag_values)
      self.SetFlags(self._flag_values)

      auth_retry = True
      while True:
        try:
          result, exceptions = self.RunWithFlagsAndPositionalArgs(
              self._flags, pos_arg_values)
          self.PrintResult(result)
          break
        except oauth2_client.AccessTokenRefreshError as e:
          if not auth_retry:
            raise
          # Retrying induces OAuth2 reauthentication.
          LOGGER.info('OAuth2 token refresh error (%s), retrying.', e)
          self._credential = None
          auth_retry = False

      self.LogExceptions(exceptions)
      return 1 if exceptions else 0
    except KeyboardInterrupt:
      self._cancel_event.set()
      LOGGER.info('Command cancelled.')
      return 1
    except errors.Error as e:
      sys.stderr.write('Error: %s\n' % e)
      return 1
    except oauth2_client.Error as e:
      sys.stderr.write('Error: %s\n' % e)
      return 1

  def LogExceptions(self, exceptions):
    """Log a list of exceptions collected from a batch of requests."""
    for exception in exceptions:
      sys.stderr.write('Error: %s\n' % exception)

  def GetUsage(self):
    """Get the usage string for the command, used to print help messages."""
    res = '%s [--global_flags] %s [--command_flags]' % (
        os.path.basename(sys.argv[0]), self._command_name)

    args = getattr(self, 'positional_args', None)
    if args:
      res = '%s %s' % (res, args)

    return res

  def _PresentElement(self, field_value):
    """Format a json value for tabular display.

    Strips off the project qualifier if present and elides the value
    if it won't fit inside of a max column size of 64 characters.

    Args:
      field_value: The json field value to be formatted.

    Returns:
      The formatted json value.
    """
    if isinstance(field_value, str):
      if '/projects/' in field_value and '://' in field_value:
        field_value = field_value[field_value.index('/projects/'):]
      field_value = field_value.strip('/')

      if self._project and field_value.startswith(
          'projects/' + self._project + '/'):
        field_value = '/'.join(field_value.split('/')[2:])
      elif self._project and field_value == 'projects/' + self._project:
        field_value = self._project
      if (self._flags.long_values_display_format == 'elided' and
          len(field_value) > 64):
        return field_value[:31] + '..' + field_value[-31:]
    return field_value

  def _FlattenObjectToList(self, instance_json, name_map):
    """Convert a json instance to a list of values for output.

    Args:
      instance_json: A JSON object represented as a python dict.
      name_map: A list of key, json-path tuples, e.g. ('name',
          'container.id').

    Returns:
      A list of extracted values selected by the associated JSON path.
    """

    def ExtractSubKeys(json_object, subkey):
      """Extract and flatten a (possibly-repeated) field in a json object."""
      if not subkey:
        return [self._PresentElement(json_object)]
      if isinstance(json_object, dict) and subkey[0] in json_object:
        element = json_object[subkey[0]]
        if isinstance(element, list):
          return sum([ExtractSubKeys(x, subkey[1:]) for x in element], [])
        return ExtractSubKeys(element, subkey[1:])
      return []

    ret = []
    for unused_key, path in name_map:
      elements = ExtractSubKeys(instance_json, path.split('.'))
      ret.append(','.join([str(x) for x in elements]))
    return ret

  def _CreateFormatter(self):
    if self._flags.format == 'sparse':
      return table_formatter.SparsePrettyFormatter()
    elif self._flags.format == 'csv':
      return table_formatter.CsvFormatter()
    else:
      return table_formatter.PrettyFormatter()

  @staticmethod
  def IsResultASequence(result):
    """Determine if the result is a sequence of resources."""
    return isinstance(result, (list, types.GeneratorType))

  def _Print(self, text):
    self._stdout.write('%s\n' % text)
    self._stdout.flush()

  def PrintResult(self, result):
    """Pretty-print the result of the command.

    Sequences of resources are printed as they are produced for the json
    and names formats. Table formats print a row per resource using
    'summary_fields', or a property table using 'detail_fields' for a
    single resource. Operations use the operation field lists.

    Args:
      result: A JSON-serializable object, or a list or generator of them.
    """
    if result is None:
      return

    if self._flags.format == 'json':
      if self.IsResultASequence(result):
        for item in result:
          self._Print(json.dumps(item, sort_keys=True, indent=2))
      else:
        self._Print(json.dumps(result, sort_keys=True, indent=2))
      return

    if self._flags.format == 'names':
      items = result if self.IsResultASequence(result) else [result]
      for item in items:
        if isinstance(item, dict):
          name = item.get('name')
          if name:
            self._Print(name)
        else:
          self._Print(item)
      return

    if self.IsResultASequence(result):
      self._PrintList(list(result))
    elif isinstance(result, dict):
      self._PrintDetail(result)
    else:
      self._Print(result)

  def _PrintList(self, items):
    """Prints a table of resources; operations get their own table."""
    res = [i for i in items if not operations.IsOperation(i)]
    ops = [i for i in items if operations.IsOperation(i)]
    if res and ops:
      res_header = '\nTable of resources:\n'
      ops_header = '\nTable of operations:\n'
    else:
      res_header = ops_header = None

    if res or not ops:
      fields = getattr(self, 'summary_fields', None) or (('name', 'name'),)
      self._CreateAndPrintTable(res, res_header, fields)

    if ops:
      self._CreateAndPrintTable(ops, ops_header,
                                self.operation_summary_fields)

  def _CreateAndPrintTable(self, values, header, fields):
    """Creates a table representation of the list of resources and prints it.

    Args:
      values: List of resources to display.
      header: A header to print before the table (can be None).
      fields: Summary field definition for the table.
    """
    column_names = [x[0] for x in fields]
    rows = [self._FlattenObjectToList(row, fields) for row in values]

    table = self._CreateFormatter()
    table.AddColumns(column_names)
    table.AddRows(rows)

    if header:
      self._Print(header)
    self._Print(table)

  def _PrintDetail(self, result):
    """Prints a detail view of the result which is an individual resource.

    Args:
      result: A resource to print.
    """
    if operations.IsOperation(result):
      detail_fields = self.operation_detail_fields
    else:
      detail_fields = getattr(self, 'detail_fields', None)

    if not detail_fields:
      self._Print(json.dumps(result, sort_keys=True, indent=2))
      return

    row_names = [x[0] for x in detail_fields]
    table = self._CreateFormatter()
    table.AddColumns(('property', 'value'))
    property_bag = self._FlattenObjectToList(result, detail_fields)
    for i, v in enumerate(property_bag):
      table.AddRow((row_names[i], v))

    if operations.IsOperation(result):
      for code, message in operations.Operation(result).Errors():
        table.AddRow(('', ''))
        table.AddRow(('  error', code))
        table.AddRow(('  message', message))

    self._Print(table)


class GoogleCloudListCommand(GoogleCloudCommand):
  """Base class for list commands.

  Derived classes override ListItems to return a lazy sequence of
  resources.
  """

  def __init__(self, name, flag_values):
    super(GoogleCloudListCommand, self).__init__(name, flag_values)

    summary_fields = [x[0] for x in getattr(self, 'summary_fields', [])]
    if summary_fields:
      sort_fields = []
      for field in summary_fields:
        sort_fields.append(field)
        sort_fields.append('-' + field)

      flags.DEFINE_enum('sort_by',
                        None,
                        sort_fields,
                        'Sort output results by the given field name. Field '
                        'names starting with a "-" will lead to a descending '
                        'order.',
                        flag_values=flag_values)

    flags.DEFINE_integer('max_results',
                         None,
                         'Maximum number of items to list',
                         lower_bound=1,
                         flag_values=flag_values)

  def ListItems(self, max_results):
    """Returns an iterator over the listed resources."""
    raise NotImplementedError()

  def Handle(self):
    """Returns the lazy result of listing a resource type."""
    return self.ListItems(self._flags.max_results)

  def _PrintList(self, items):
    """Prints a table for the given resources, sorted if requested."""
    column_names = [x[0] for x in self.summary_fields]
    rows = [self._FlattenObjectToList(row, self.summary_fields)
            for row in items]

    sort_col = (self._flags.sort_by if 'sort_by' in self._flags else None)
    sort_col = sort_col or getattr(self, 'default_sort_field', None)
    if sort_col:
      reverse = False
      if sort_col.startswith('-'):
        reverse = True
        sort_col = sort_col[1:]

      if sort_col in column_names:
        sort_col_idx = column_names.index(sort_col)
        rows = sorted(rows, key=(lambda row: row[sort_col_idx]),
                      reverse=reverse)
      else:
        LOGGER.warning('Invalid sort column: %s', sort_col)

    table = self._CreateFormatter()
    table.AddColumns(column_names)
    table.AddRows(rows)

    self._Print(table)
