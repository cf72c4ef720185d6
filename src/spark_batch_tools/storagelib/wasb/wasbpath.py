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

"""Wrapper implementation for Azure Blob storage (WASB) remote path"""

import re
from dataclasses import dataclass
from functools import cached_property

from typing_extensions import override

from ..csppath import CspPath, register_path_class
from ...exceptions import InvalidProtocolPrefixError

# WASB path format: wasb[s]://<container>@<account_name>.blob.<endpoint_suffix>/<path_to_file>
WASB_URI_PATTERN = re.compile(
    r'^(?P<scheme>wasbs?)://(?P<container>[^@/]+)@(?P<account>[^./]+)\.blob\.(?P<suffix>[^/]+)(?P<path>/.*)?$',
    re.IGNORECASE)


@dataclass(frozen=True)
class WasbRoot:
    """The file system root of a WASB uri"""
    scheme: str
    container: str
    storage_account: str
    endpoint_suffix: str
    path: str = '/'

    @property
    def blob_endpoint(self) -> str:
        return f'{self.storage_account}.blob.{self.endpoint_suffix}'

    @property
    def blob_suffix(self) -> str:
        return f'blob.{self.endpoint_suffix}'


@register_path_class('wasb')
class WasbPath(CspPath):
    """Implementation for Azure Blob storage paths accessed through the WASB driver"""

    protocol_prefix: str = 'wasbs://'
    accepted_prefixes = ('wasbs://', 'wasb://')

    @override
    @classmethod
    def is_protocol_prefix(cls, value: str) -> bool:
        lowered = value.lower()
        return any(lowered.startswith(prefix) for prefix in cls.accepted_prefixes)

    @classmethod
    def parse_root(cls, uri: str) -> WasbRoot:
        """
        Extracts the file system root of a WASB uri.

        >>> WasbPath.parse_root('wasbs://jobs@account.blob.core.windows.net/path').storage_account
        'account'

        :param uri: the full WASB uri
        :return: the root that identifies the container and the storage account
        :raises InvalidProtocolPrefixError: if the uri does not follow the WASB format
        """
        matched = WASB_URI_PATTERN.match(uri.strip()) if uri else None
        if matched is None:
            raise InvalidProtocolPrefixError(
                f'"{uri}" is not a valid Azure Blob storage path. Expected format: '
                'wasbs://<container>@<account_name>.blob.core.windows.net/<path>')
        return WasbRoot(scheme=matched.group('scheme').lower(),
                        container=matched.group('container'),
                        storage_account=matched.group('account'),
                        endpoint_suffix=matched.group('suffix'),
                        path=matched.group('path') or '/')

    @cached_property
    def root(self) -> WasbRoot:
        return self.parse_root(self._fpath)

    @override
    @cached_property
    def no_scheme(self) -> str:
        # adlfs addresses blobs as <container>/<path>
        return f'{self.root.container}{self.root.path}'.rstrip('/')
