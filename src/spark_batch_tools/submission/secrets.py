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

"""Providers of the storage credentials. The providers are passed explicitly to the callers."""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

from spark_batch_tools.common.utilities import Utils
from spark_batch_tools.configuration.submit_model import SparkSubmitModel
from spark_batch_tools.enums import SparkSubmitStorageType
from spark_batch_tools.storagelib.wasb.wasbpath import WasbPath
from spark_batch_tools.utils.util import is_blank

# service name under which the blob storage keys are saved
BLOB_STORAGE_SERVICE = 'Spark Batch Tools Job Upload Storage Azure Blob - '


@runtime_checkable
class SecretProvider(Protocol):
    """Loads a password saved for a given service and user."""

    def load_password(self, service_name: str, user_name: str) -> Optional[str]:
        ...


@dataclass
class DictSecretProvider:
    """Serves passwords from an in-memory mapping keyed by (service name, user name)."""
    secrets: Dict[Tuple[str, str], str] = field(default_factory=dict)

    def save_password(self, service_name: str, user_name: str, password: str) -> None:
        self.secrets[(service_name, user_name)] = password

    def load_password(self, service_name: str, user_name: str) -> Optional[str]:
        return self.secrets.get((service_name, user_name))


@dataclass
class EnvSecretProvider:
    """
    Reads the passwords from environment variables named after the user. For example, the key of
    the storage account "acct" is read from SPARK_BATCH_TOOLS_STORAGE_KEY_ACCT.
    """
    env_prefix: str = 'STORAGE_KEY'

    def get_env_key(self, user_name: str) -> str:
        suffix = re.sub(r'[^0-9A-Za-z]', '_', user_name).upper()
        return Utils.find_full_tools_env_key(f'{self.env_prefix}_{suffix}')

    def load_password(self, service_name: str, user_name: str) -> Optional[str]:
        # the service name is implicit in the env-var prefix
        return Utils.get_sys_env_var(self.get_env_key(user_name))


def get_storage_account(submit_model: SparkSubmitModel) -> Optional[str]:
    """The storage account of the upload destination. Falls back to the account in the upload path."""
    storage_model = submit_model.job_upload_storage
    if not is_blank(storage_model.storage_account):
        return storage_model.storage_account
    if is_blank(storage_model.upload_path) or not WasbPath.is_protocol_prefix(storage_model.upload_path):
        return None
    return WasbPath.parse_root(storage_model.upload_path).storage_account


def resolve_storage_key(submit_model: SparkSubmitModel, provider: SecretProvider) -> SparkSubmitModel:
    """
    Fills the storage key of the submit model when it was not set by the user.
    Only the blob storage keys are looked up. The model is updated in place and returned.
    """
    storage_model = submit_model.job_upload_storage
    if not is_blank(storage_model.storage_key):
        return submit_model
    if storage_model.storage_account_type != SparkSubmitStorageType.BLOB:
        return submit_model
    storage_account = get_storage_account(submit_model)
    if storage_account is None:
        return submit_model
    storage_model.storage_key = provider.load_password(BLOB_STORAGE_SERVICE + storage_account,
                                                       storage_account)
    return submit_model
