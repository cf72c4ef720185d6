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

"""Add common helpers and utilities for unit-tests"""

import sys
from typing import Iterable, List, Optional
from unittest.mock import MagicMock

import pytest  # pylint: disable=import-error

from spark_batch_tools.compute.compute import SparkCompute
from spark_batch_tools.configuration.submit_model import SparkSubmitModel


def get_test_resources_path():
    # pylint: disable=import-outside-toplevel
    if sys.version_info < (3, 9):
        import importlib_resources
    else:
        import importlib.resources as importlib_resources
    pkg = importlib_resources.files('tests.spark_batch_tools_ut')
    return pkg / 'resources'


# valid submit config files
valid_submit_conf_files = ['submit_config_00.yaml', 'submit_config_01.yaml', 'submit_config_02.json']
# invalid submit config files
invalid_submit_conf_files = [
    # unknown field
    #  Error:1 validation error for SparkSubmitModel
    #  sparkPool
    #    Extra inputs are not permitted [type=extra_forbidden, input_value='C1', input_type=str]
    'submit_config_inv_00.yaml',
    # unknown storage type
    #  Error:1 validation error for SparkSubmitModel
    #  jobUploadStorage.storageAccountType
    #    Input should be 'blob', 'spark_interactive_session',... [type=enum, input_value='ftp', input_type=str]
    'submit_config_inv_01.yaml',
    # storage type is not a string
    #  Error:1 validation error for SparkSubmitModel
    #  jobUploadStorage.storageAccountType
    #    Input should be 'blob', 'spark_interactive_session',... [type=enum, input_value=1, input_type=int]
    'submit_config_inv_02.yaml'
]
# storage types without a deployment
unsupported_storage_types = ['spark_interactive_session', 'default_storage_account', 'adls_gen1',
                             'adls_gen2', 'adls_gen2_for_oauth', 'webhdfs', 'adla_account_default_storage']

scenario_upload_path = 'wasb://root@acct.blob.core.windows.net/path'
scenario_conf_key = 'spark.hadoop.fs.azure.account.key.acct.blob.core.windows.net'


def gen_submit_model(tenant_id: Optional[str] = 'T1',
                     spark_workspace: Optional[str] = 'W1',
                     spark_compute: Optional[str] = 'C1',
                     storage_type: str = 'blob',
                     upload_path: Optional[str] = scenario_upload_path,
                     storage_key: Optional[str] = 'KEY123',
                     spark_confs: Optional[dict] = None) -> SparkSubmitModel:
    return SparkSubmitModel(
        tenant_id=tenant_id,
        spark_workspace=spark_workspace,
        spark_compute=spark_compute,
        livy_uri='https://w1.dev.azuresynapse.net/livyApi',
        job_upload_storage={
            'storage_account_type': storage_type,
            'upload_path': upload_path,
            'storage_key': storage_key
        },
        submission_parameter={
            'name': 'word-count',
            'file': '/home/user/word-count.jar',
            'class_name': 'org.example.WordCount',
            'job_config': {'conf': dict(spark_confs or {})}
        })


class MockComputeInventory:  # pylint: disable=too-few-public-methods
    """Inventory returning a fixed list of computes and counting the lookups"""

    def __init__(self, computes: Iterable[SparkCompute] = ()):
        self.computes: List[SparkCompute] = list(computes)
        self.lookup_calls = []

    def find_compute(self, tenant_id: str, workspace_name: str, compute_name: str):
        self.lookup_calls.append((tenant_id, workspace_name, compute_name))
        return (c for c in self.computes if c.matches(tenant_id, workspace_name, compute_name))


def gen_deploy_factory(job_deploy=None) -> MagicMock:
    deploy_factory = MagicMock()
    deploy_factory.build_spark_batch_job_deploy.return_value = job_deploy if job_deploy else MagicMock()
    return deploy_factory


class SparkBatchToolsUT:  # pylint: disable=too-few-public-methods

    @pytest.fixture(autouse=True)
    def get_ut_data_dir(self):
        return get_test_resources_path()
