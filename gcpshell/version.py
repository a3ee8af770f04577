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

"""Version information for gcpshell and the APIs it uses."""

__version__ = '1.0.0'

# API name -> version used to build the discovery client.
API_VERSIONS = {
    'compute': 'v1',
    'logging': 'v2',
    'storage': 'v1',
}

# API name -> path of the service below the API host.
API_SERVICE_PATHS = {
    'compute': 'compute/v1/',
    'logging': 'v2/',
    'storage': 'storage/v1/',
}
