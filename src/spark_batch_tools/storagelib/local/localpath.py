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

"""Wrapper implementation for local path"""

from typing_extensions import override

from ..csppath import register_path_class, CspPath


@register_path_class('local')
class LocalPath(CspPath):
    """
    A path implementation for the local file system. Job artifacts built on the machine
    submitting the job are represented with this class before being deployed.
    """
    protocol_prefix: str = 'file://'

    @override
    def to_str_format(self) -> str:
        return self.no_scheme
