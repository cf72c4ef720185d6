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

"""Wrapper for the Azure Blob storage File system"""

from typing import Any

import adlfs
from pyarrow.fs import PyFileSystem, FSSpecHandler

from ..cspfs import CspFs, BoundedArrowFsT, register_fs_class


@register_fs_class('wasb', 'PyFileSystem')
class WasbFs(CspFs):
    """Access Azure Blob storage containers as if they were a file system (wraps adlfs).

    Since AzureBlobFileSystem follows the fsspec interface, this class wraps it into a python-based
    PyArrow filesystem (PyFileSystem) using FSSpecHandler.

    The jobs deployment passes the storage account and the access key explicitly. Otherwise, the
    initialization of the filesystem looks for the following env_variables:
    AZURE_STORAGE_ACCOUNT_NAME
    AZURE_STORAGE_ACCOUNT_KEY
    AZURE_STORAGE_CONNECTION_STRING
    AZURE_STORAGE_SAS_TOKEN
    """

    @classmethod
    def create_fs_handler(cls, *args: Any, **kwargs: Any) -> BoundedArrowFsT:
        azure_fs = adlfs.AzureBlobFileSystem(*args, **kwargs)
        return PyFileSystem(FSSpecHandler(azure_fs))

    @classmethod
    def for_storage_account(cls, storage_account: str, storage_key: str = None) -> 'WasbFs':
        if storage_key:
            return cls(account_name=storage_account, account_key=storage_key)
        return cls(account_name=storage_account)
