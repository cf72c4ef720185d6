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

"""Test the pipeline building the Spark batch jobs"""

from unittest.mock import MagicMock

import pytest  # pylint: disable=import-error

from spark_batch_tools.compute.compute import SparkCompute
from spark_batch_tools.enums import MessageInfoType, SparkSubmitStorageType
from spark_batch_tools.exceptions import (
    ComputeNotFoundError, ComputeResolutionError, ConfigurationIncompleteError, DeploymentFailureError,
    InvalidProtocolPrefixError, MissingUploadPathError, UnsupportedStorageBackendError
)
from spark_batch_tools.submission.credentials import BLOB_STORAGE_RULE
from spark_batch_tools.submission.event_sink import CollectingEventSink
from spark_batch_tools.submission.runner import SparkBatchRunner, storage_backend_registry
from .conftest import SparkBatchToolsUT, MockComputeInventory, gen_deploy_factory, gen_submit_model, \
    scenario_conf_key, unsupported_storage_types


class TestSparkBatchRunner(SparkBatchToolsUT):
    """
    Class testing the build of the Spark batch jobs
    """

    compute_h = SparkCompute(name='C1', workspace_name='W1', tenant_id='T1')

    def gen_runner(self, computes=None, deploy_factory=None):
        inventory = MockComputeInventory([self.compute_h] if computes is None else computes)
        deploy_factory = deploy_factory if deploy_factory is not None else gen_deploy_factory()
        return SparkBatchRunner.from_inventory(inventory, deploy_factory=deploy_factory), inventory, deploy_factory

    def test_registry_is_closed_to_blob(self):
        assert list(storage_backend_registry) == [SparkSubmitStorageType.BLOB]
        assert storage_backend_registry[SparkSubmitStorageType.BLOB] is BLOB_STORAGE_RULE

    def test_scenario_build_job(self):
        job_deploy = MagicMock(name='D')
        runner, inventory, deploy_factory = self.gen_runner(deploy_factory=gen_deploy_factory(job_deploy))
        event_sink = CollectingEventSink()
        submit_model = gen_submit_model()
        job = runner.build_spark_batch_job(submit_model, event_sink)
        assert job.configuration[scenario_conf_key] == 'KEY123'
        assert job.compute is self.compute_h
        assert job.job_deploy is job_deploy
        assert job.event_sink is event_sink
        assert inventory.lookup_calls == [('T1', 'W1', 'C1')]
        deploy_factory.build_spark_batch_job_deploy.assert_called_once_with(submit_model, self.compute_h, event_sink)
        assert job.submission.tenant_id == 'T1'
        assert job.submission.workspace_name == 'W1'
        assert job.submission.livy_uri == 'https://w1.dev.azuresynapse.net/livyApi'
        assert event_sink.get_messages(MessageInfoType.INFO) == ['Found Spark compute C1 @W1']

    def test_existing_confs_are_preserved(self):
        runner, _, _ = self.gen_runner()
        existing_confs = {'spark.executor.memory': '4g', 'spark.executor.cores': '2'}
        job = runner.build_spark_batch_job(gen_submit_model(spark_confs=existing_confs), CollectingEventSink())
        assert dict(job.configuration) == {**existing_confs, scenario_conf_key: 'KEY123'}

    def test_existing_credential_is_overwritten(self):
        runner, _, _ = self.gen_runner()
        submit_model = gen_submit_model(spark_confs={scenario_conf_key: 'OLD_KEY', 'spark.app.name': 'app'})
        job = runner.build_spark_batch_job(submit_model, CollectingEventSink())
        assert dict(job.configuration) == {scenario_conf_key: 'KEY123', 'spark.app.name': 'app'}

    def test_build_is_idempotent(self):
        runner, _, _ = self.gen_runner()
        job_01 = runner.build_spark_batch_job(gen_submit_model(spark_confs={'spark.app.name': 'app'}),
                                              CollectingEventSink())
        job_02 = runner.build_spark_batch_job(gen_submit_model(spark_confs={'spark.app.name': 'app'}),
                                              CollectingEventSink())
        assert dict(job_01.configuration) == dict(job_02.configuration)
        # same submit model built twice
        submit_model = gen_submit_model()
        job_03 = runner.build_spark_batch_job(submit_model, CollectingEventSink())
        job_04 = runner.build_spark_batch_job(submit_model, CollectingEventSink())
        assert dict(job_03.configuration) == dict(job_04.configuration)

    def test_job_configuration_is_read_only(self):
        runner, _, _ = self.gen_runner()
        submit_model = gen_submit_model()
        job = runner.build_spark_batch_job(submit_model, CollectingEventSink())
        with pytest.raises(TypeError):
            job.configuration['spark.app.name'] = 'app'  # type: ignore[index]
        # updating the submit model does not leak into the job
        submit_model.submission_parameter.get_spark_confs()['spark.app.name'] = 'app'
        assert 'spark.app.name' not in job.configuration

    def test_job_parameters_are_copies(self):
        runner, _, _ = self.gen_runner()
        job = runner.build_spark_batch_job(gen_submit_model(), CollectingEventSink())
        job.submission_parameter.job_config['conf'][scenario_conf_key] = 'OTHER_KEY'
        job.submission_parameter.args.append('extra')
        assert job.configuration[scenario_conf_key] == 'KEY123'
        assert 'extra' not in job.submission_parameter.args

    @pytest.mark.parametrize('missing_field', ['tenant_id', 'spark_workspace', 'spark_compute'])
    @pytest.mark.parametrize('missing_value', [None, '', '  '])
    def test_incomplete_configuration(self, missing_field, missing_value):
        runner, inventory, deploy_factory = self.gen_runner()
        submit_model = gen_submit_model(**{missing_field: missing_value})
        with pytest.raises(ConfigurationIncompleteError) as err:
            runner.build_spark_batch_job(submit_model, CollectingEventSink())
        assert inventory.lookup_calls == []
        deploy_factory.build_spark_batch_job_deploy.assert_not_called()
        assert f'{missing_field.replace("_id", " id").replace("_", " ")}: {missing_value}' in str(err.value)

    def test_incomplete_configuration_lists_seen_values(self):
        runner, _, _ = self.gen_runner()
        with pytest.raises(ConfigurationIncompleteError) as err:
            runner.build_spark_batch_job(gen_submit_model(spark_compute=None), CollectingEventSink())
        assert str(err.value) == ('Spark compute is not selected. spark compute: None, '
                                  'tenant id: T1, spark workspace: W1')

    @pytest.mark.parametrize('storage_type', unsupported_storage_types)
    def test_unsupported_storage_backend(self, storage_type):
        runner, inventory, deploy_factory = self.gen_runner()
        with pytest.raises(UnsupportedStorageBackendError) as err:
            runner.build_spark_batch_job(gen_submit_model(storage_type=storage_type), CollectingEventSink())
        assert storage_type in str(err.value)
        assert err.value.storage_type == SparkSubmitStorageType(storage_type)
        deploy_factory.build_spark_batch_job_deploy.assert_not_called()
        assert inventory.lookup_calls == []

    @pytest.mark.parametrize('upload_path', [None, '', '   '])
    def test_missing_upload_path(self, upload_path):
        runner, inventory, deploy_factory = self.gen_runner()
        # an unsupported storage type is not reported when the upload path is missing
        submit_model = gen_submit_model(upload_path=upload_path, storage_type='webhdfs')
        with pytest.raises(MissingUploadPathError):
            runner.build_spark_batch_job(submit_model, CollectingEventSink())
        assert inventory.lookup_calls == []
        deploy_factory.build_spark_batch_job_deploy.assert_not_called()

    def test_malformed_upload_path(self):
        runner, inventory, deploy_factory = self.gen_runner()
        submit_model = gen_submit_model(upload_path='abfss://root@acct.dfs.core.windows.net/path')
        with pytest.raises(InvalidProtocolPrefixError):
            runner.build_spark_batch_job(submit_model, CollectingEventSink())
        assert inventory.lookup_calls == []
        deploy_factory.build_spark_batch_job_deploy.assert_not_called()

    @pytest.mark.parametrize('coordinates', [('T1', 'W1', 'C9'), ('T9', 'W1', 'C1'), ('T1', 'W9', 'C1')])
    def test_compute_not_found(self, coordinates):
        tenant_id, workspace_name, compute_name = coordinates
        runner, inventory, deploy_factory = self.gen_runner()
        submit_model = gen_submit_model(tenant_id=tenant_id, spark_workspace=workspace_name,
                                        spark_compute=compute_name)
        with pytest.raises(ComputeNotFoundError) as err:
            runner.build_spark_batch_job(submit_model, CollectingEventSink())
        for field_value in coordinates:
            assert field_value in str(err.value)
        assert inventory.lookup_calls == [coordinates]
        deploy_factory.build_spark_batch_job_deploy.assert_not_called()

    def test_compute_lookup_fault(self):
        inventory = MagicMock()
        inventory.find_compute.side_effect = ConnectionError('connection reset')
        deploy_factory = gen_deploy_factory()
        runner = SparkBatchRunner.from_inventory(inventory, deploy_factory=deploy_factory)
        with pytest.raises(ComputeResolutionError) as err:
            runner.build_spark_batch_job(gen_submit_model(), CollectingEventSink())
        assert isinstance(err.value.__cause__, ConnectionError)
        # no retry
        inventory.find_compute.assert_called_once_with('T1', 'W1', 'C1')
        deploy_factory.build_spark_batch_job_deploy.assert_not_called()

    def test_deployment_failure_propagated(self):
        deploy_factory = gen_deploy_factory()
        deploy_error = DeploymentFailureError('container does not exist')
        deploy_factory.build_spark_batch_job_deploy.side_effect = deploy_error
        runner, _, _ = self.gen_runner(deploy_factory=deploy_factory)
        submit_model = gen_submit_model()
        with pytest.raises(DeploymentFailureError) as err:
            runner.build_spark_batch_job(submit_model, CollectingEventSink())
        assert err.value is deploy_error
        # no partial update of the spark configurations
        assert scenario_conf_key not in submit_model.submission_parameter.get_spark_confs()

    def test_first_match_wins(self):
        compute_dup = SparkCompute(name='C1', workspace_name='W1', tenant_id='T1', spark_version='3.4')
        runner, _, deploy_factory = self.gen_runner(computes=[self.compute_h, compute_dup])
        job = runner.build_spark_batch_job(gen_submit_model(), CollectingEventSink())
        assert job.compute is self.compute_h
        assert deploy_factory.build_spark_batch_job_deploy.call_args.args[1] is self.compute_h
