# Copyright (c) 2025, NVIDIA CORPORATION.
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

"""Utility and helper methods"""

import os
import re
from pathlib import PurePath

from spark_batch_tools.common.utilities import Utils
from spark_batch_tools.exceptions import CspPathAttributeError


def stringify_path(fpath) -> str:
    if isinstance(fpath, str):
        actual_val = fpath
    elif hasattr(fpath, '__fspath__'):
        actual_val = os.fspath(fpath)
    else:
        raise CspPathAttributeError('Not a valid path')
    expanded_path = os.path.expanduser(actual_val)
    # make sure we return absolute path
    return os.path.abspath(expanded_path)


def get_path_as_uri(fpath: str) -> str:
    if re.match(r'\w+://', fpath):
        # that's already a valid url
        return fpath
    # stringify the path to apply the common methods which is expanding the file.
    local_path = stringify_path(fpath)
    return PurePath(local_path).as_uri()


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def init_environment(short_name: str) -> str:
    """
    Initialize the environment of a tools execution. The generated RUN_ID tags the log records of
    the execution.
    :return: the generated uuid of the execution session.
    """
    uuid = Utils.gen_uuid_with_ts(suffix_len=8)
    Utils.set_tools_env('RUN_ID', f'{short_name}_{uuid}')
    return uuid
