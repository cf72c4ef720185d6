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

"""init file of the Spark batch job submission tools"""

from .enums import (
    EnumeratedType, SparkSubmitStorageType, MessageInfoType, ComputeState
)

from .storagelib.csppath import (
    CspPath, path_impl_registry, CspPathT
)

__version__ = '0.1.0'

__all__ = [
    'ComputeState',
    'CspPath',
    'CspPathT',
    'EnumeratedType',
    'MessageInfoType',
    'path_impl_registry',
    'SparkSubmitStorageType',
]
