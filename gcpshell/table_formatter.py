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

"""Table formatters used to print command results."""



import csv
import io

import prettytable


class TableFormatter(object):
  """Collects columns and rows; str() renders them."""

  def __init__(self):
    self._columns = []
    self._rows = []

  def AddColumns(self, columns):
    self._columns.extend(columns)

  def AddRow(self, row):
    self._rows.append(list(row))

  def AddRows(self, rows):
    for row in rows:
      self.AddRow(row)


class PrettyFormatter(TableFormatter):
  """Bordered table output."""

  border = True

  def __str__(self):
    table = prettytable.PrettyTable(self._columns)
    table.border = self.border
    table.align = 'l'
    for row in self._rows:
      table.add_row(row)
    return table.get_string()


class SparsePrettyFormatter(PrettyFormatter):
  """Table output without borders."""

  border = False


class CsvFormatter(TableFormatter):
  """Comma separated values with a header line."""

  def __str__(self):
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator='\n')
    writer.writerow(self._columns)
    writer.writerows(self._rows)
    return buf.getvalue().rstrip('\n')
