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

"""Test the storage paths and the injection of the storage credentials"""

import pytest  # pylint: disable=import-error

from spark_batch_tools.exceptions import InvalidProtocolPrefixError
from spark_batch_tools.storagelib import CspPath, LocalPath, WasbPath, WasbRoot
from spark_batch_tools.submission.credentials import BLOB_STORAGE_RULE, inject_storage_credential
from .conftest import SparkBatchToolsUT, scenario_conf_key, scenario_upload_path


class TestWasbPath(SparkBatchToolsUT):
    """
    Class testing the parsing of the Azure Blob storage paths
    """

    def test_parse_scenario_root(self):
        fs_root = WasbPath.parse_root(scenario_upload_path)
        assert fs_root == WasbRoot(scheme='wasb', container='root', storage_account='acct',
                                   endpoint_suffix='core.windows.net', path='/path')
        assert fs_root.blob_endpoint == 'acct.blob.core.windows.net'
        assert fs_root.blob_suffix == 'blob.core.windows.net'

    @pytest.mark.parametrize('uri,expected', [
        ('wasbs://jobs@acct01.blob.core.windows.net', ('wasbs', 'jobs', 'acct01', 'core.windows.net', '/')),
        ('WASBS://jobs@acct01.blob.core.chinacloudapi.cn/a/b/',
         ('wasbs', 'jobs', 'acct01', 'core.chinacloudapi.cn', '/a/b/')),
        ('wasb://root@acct.blob.core.usgovcloudapi.net/path/file.jar',
         ('wasb', 'root', 'acct', 'core.usgovcloudapi.net', '/path/file.jar')),
    ])
    def test_parse_root(self, uri, expected):
        fs_root = WasbPath.parse_root(uri)
        assert (fs_root.scheme, fs_root.container, fs_root.storage_account,
                fs_root.endpoint_suffix, fs_root.path) == expected

    @pytest.mark.parametrize('uri', [
        None,
        '',
        'abfss://root@acct.dfs.core.windows.net/path',
        'wasbs://acct.blob.core.windows.net/path',
        'wasbs://root@acct.dfs.core.windows.net/path',
        '/tmp/path',
    ])
    def test_invalid_root(self, uri):
        with pytest.raises(InvalidProtocolPrefixError):
            WasbPath.parse_root(uri)

    def test_protocol_prefix(self):
        assert WasbPath.is_protocol_prefix('wasb://root@acct.blob.core.windows.net/path')
        assert WasbPath.is_protocol_prefix('wasbs://root@acct.blob.core.windows.net/path')
        assert not WasbPath.is_protocol_prefix('file:///tmp/path')

    def test_local_path_dispatch(self, tmp_path):
        local_path = CspPath(str(tmp_path))
        assert isinstance(local_path, LocalPath)
        assert local_path.is_dir()
        assert local_path.to_str_format() == str(tmp_path)
        sub_path = local_path.create_sub_path('/SparkSubmission/C1')
        assert str(sub_path) == f'{local_path}/SparkSubmission/C1'
        assert not sub_path.exists()
        sub_path.create_dirs()
        assert sub_path.exists()


class TestCredentialInjection(SparkBatchToolsUT):
    """
    Class testing the merge of the storage credentials into the Spark configurations
    """

    fs_root = WasbPath.parse_root(scenario_upload_path)

    def test_conf_key(self):
        assert BLOB_STORAGE_RULE.get_credential_conf_key(self.fs_root) == scenario_conf_key
        sovereign_root = WasbPath.parse_root('wasbs://jobs@acct01.blob.core.chinacloudapi.cn/path')
        assert (BLOB_STORAGE_RULE.get_credential_conf_key(sovereign_root) ==
                'spark.hadoop.fs.azure.account.key.acct01.blob.core.chinacloudapi.cn')

    def test_inject_creates_conf(self):
        job_config = {'driverMemory': '4g'}
        conf_key = inject_storage_credential(job_config, self.fs_root, 'KEY123')
        assert conf_key == scenario_conf_key
        assert job_config == {'driverMemory': '4g', 'conf': {scenario_conf_key: 'KEY123'}}

    def test_inject_preserves_confs(self):
        spark_confs = {'spark.executor.memory': '4g'}
        job_config = {'conf': spark_confs}
        inject_storage_credential(job_config, self.fs_root, 'KEY123', BLOB_STORAGE_RULE)
        # merged in place
        assert job_config['conf'] is spark_confs
        assert spark_confs == {'spark.executor.memory': '4g', scenario_conf_key: 'KEY123'}

    def test_inject_overwrites(self):
        job_config = {'conf': {scenario_conf_key: 'OLD', 'spark.app.name': 'app'}}
        inject_storage_credential(job_config, self.fs_root, 'KEY123')
        inject_storage_credential(job_config, self.fs_root, 'KEY123')
        assert job_config['conf'] == {scenario_conf_key: 'KEY123', 'spark.app.name': 'app'}
