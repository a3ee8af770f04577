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

"""Paging through list methods, including aggregated (per-scope) lists.

List methods return one page of results together with an opaque
'nextPageToken'. Aggregated list methods additionally group the items of a
page by scope:

  {'items': {'zones/us-central1-a': {'disks': [...]},
             'zones/europe-west1-b': {'warning': {...}}},
   'nextPageToken': '...'}

The functions here hide both details and produce a single lazy sequence of
resources.
"""



import collections

from gcpshell import api_requests
from gcpshell import filters


PagedResult = collections.namedtuple(
    'PagedResult', ['items', 'next_page_token'])


def ExtractScopedItems(scoped_items, scoped_field):
  """Flattens the scope -> scoped list mapping of an aggregated page.

  Args:
    scoped_items: The 'items' mapping of an aggregated list response. May be
      None.
    scoped_field: The name of the item list inside each scoped list, e.g.
      'disks' or 'operations'.

  Returns:
    A list of the items of every scope, in the mapping's order. Scopes
    whose value or item list is missing contribute nothing.
  """
  items = []
  for scoped_list in (scoped_items or {}).values():
    if not scoped_list:
      continue
    items.extend(scoped_list.get(scoped_field) or [])
  return items


def ParsePage(response, items_field='items', scoped_field=None):
  """Converts a list response into a PagedResult."""
  if scoped_field:
    items = ExtractScopedItems(response.get(items_field), scoped_field)
  else:
    items = list(response.get(items_field) or [])
  return PagedResult(items, response.get('nextPageToken') or None)


def ListPages(func, params, items_field='items', scoped_field=None,
              token_in_body=False, http=None, cancel_event=None):
  """Calls the given list function while taking care of paging logic.

  Page N+1 is requested only once page N has been received, with the
  token page N returned.

  Args:
    func: A discovery list method, e.g. api.disks().aggregatedList.
    params: The keyword arguments for func. Not modified.
    items_field: The response field holding the items.
    scoped_field: For aggregated lists, the field holding the items in each
      scoped list.
    token_in_body: Whether the page token is sent inside params['body']
      rather than as a query parameter (as with entries.list).
    http: An optional httplib2.Http object.
    cancel_event: An optional threading.Event; once set, no further page is
      requested.

  Yields:
    PagedResult objects.

  Raises:
    RequestFailedError: If any page request fails.
  """
  params = dict(params)
  if token_in_body:
    params['body'] = dict(params.get('body') or {})

  while True:
    if cancel_event is not None and cancel_event.is_set():
      return

    response = api_requests.Execute(func(**params), http=http)
    page = ParsePage(response, items_field, scoped_field)
    yield page

    if not page.next_page_token:
      return
    if token_in_body:
      params['body'] = dict(params['body'], pageToken=page.next_page_token)
    else:
      params['pageToken'] = page.next_page_token


def ListAll(func, params, predicates=None, max_results=None,
            cancel_event=None, **kwargs):
  """Lazily yields every item of a listing that satisfies predicates.

  Args:
    func: A discovery list method.
    params: The keyword arguments for func.
    predicates: Client-side filters; see the filters module.
    max_results: If given, stop after yielding this many items.
    cancel_event: An optional threading.Event; once set, nothing more is
      fetched or yielded.
    **kwargs: Passed through to ListPages.

  Yields:
    Resources, in page order.
  """
  if max_results is not None and max_results <= 0:
    return
  count = 0
  for page in ListPages(func, params, cancel_event=cancel_event, **kwargs):
    for item in page.items:
      if cancel_event is not None and cancel_event.is_set():
        return
      if not filters.MatchesAll(item, predicates):
        continue
      yield item
      count += 1
      if max_results is not None and count >= max_results:
        return


def ListAggregated(func, params, scoped_field, predicates=None, **kwargs):
  """Like ListAll, for aggregated list methods."""
  return ListAll(func, params, predicates=predicates,
                 scoped_field=scoped_field, **kwargs)


def All(func, params, **kwargs):
  """Like ListAll, except returns a list of every matching item."""
  return list(ListAll(func, params, **kwargs))


def AllNames(func, params, **kwargs):
  """Like All, except returns a list of the names of the resources."""
  return [resource.get('name') for resource in All(func, params, **kwargs)]
