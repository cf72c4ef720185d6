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

"""
Rules attached to each deployable storage backend, and the injection of the storage
credentials into the Spark configurations of a job.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from spark_batch_tools.configuration.submit_model import SparkSubmissionParameter
from spark_batch_tools.enums import SparkSubmitStorageType
from spark_batch_tools.storagelib.wasb.wasbpath import WasbPath, WasbRoot


@dataclass(frozen=True)
class StorageBackendRule:
    """
    Describes how a storage backend is handled by the submission pipeline:
    how the upload path is parsed, whether a live Spark compute is needed to deploy the
    artifacts, and how the credential property is named in the Spark configurations.
    """
    storage_type: SparkSubmitStorageType
    path_class: Type[WasbPath]
    conf_namespace: str
    requires_compute: bool = True

    def parse_fs_root(self, upload_path: str) -> WasbRoot:
        return self.path_class.parse_root(upload_path)

    def get_credential_conf_key(self, fs_root: WasbRoot) -> str:
        """
        The Spark property holding the credential of the file system root.
        i.e., spark.hadoop.fs.azure.account.key.<account>.blob.core.windows.net
        """
        return f'{self.conf_namespace}.{fs_root.storage_account}.{fs_root.blob_suffix}'


BLOB_STORAGE_RULE = StorageBackendRule(
    storage_type=SparkSubmitStorageType.BLOB,
    path_class=WasbPath,
    conf_namespace='spark.hadoop.fs.azure.account.key')


def inject_storage_credential(job_config: Dict[str, Any],
                              fs_root: WasbRoot,
                              credential: Optional[str],
                              rule: StorageBackendRule = BLOB_STORAGE_RULE) -> str:
    """
    Merges the storage credential into the Spark configurations of the job. An existing value of
    the same property is overwritten. The other properties are kept as they are.
    :param job_config: the job configurations. The Spark properties live under the "conf" entry.
    :param fs_root: the root of the upload destination.
    :param credential: the access key of the storage account.
    :param rule: the rule of the storage backend deploying the artifacts.
    :return: the name of the injected Spark property.
    """
    conf_key = rule.get_credential_conf_key(fs_root)
    spark_confs = job_config.get(SparkSubmissionParameter.conf_key)
    if spark_confs is None:
        spark_confs = {}
        job_config[SparkSubmissionParameter.conf_key] = spark_confs
    spark_confs[conf_key] = credential
    return conf_key
