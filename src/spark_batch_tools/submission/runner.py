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
Turns a submit model into a Spark batch job ready to be submitted.

The pipeline validates the submit model, selects how the artifacts are deployed based on the
declared storage backend (resolving the Spark compute when the backend needs it), injects the
storage credential into the Spark configurations and builds the job. Every stage raises on
failure and no partial job is returned.
"""

from dataclasses import dataclass, field
from logging import Logger
from typing import Dict, Optional

from spark_batch_tools.common.utilities import ToolLogging
from spark_batch_tools.compute.compute import ComputeInventory, SparkCompute
from spark_batch_tools.compute.resolver import ComputeResolver
from spark_batch_tools.configuration.submit_model import SparkSubmitModel
from spark_batch_tools.enums import SparkSubmitStorageType
from spark_batch_tools.exceptions import (
    ConfigurationIncompleteError, MissingUploadPathError, UnsupportedStorageBackendError
)
from spark_batch_tools.storagelib.wasb.wasbpath import WasbRoot
from spark_batch_tools.submission.credentials import (
    BLOB_STORAGE_RULE, StorageBackendRule, inject_storage_credential
)
from spark_batch_tools.submission.deploy import (
    CspJobDeployFactory, DeploymentFactory, SparkBatchJobDeploy
)
from spark_batch_tools.submission.event_sink import EventSink
from spark_batch_tools.submission.job import SparkBatchJob, SubmissionTarget
from spark_batch_tools.utils.util import is_blank

# Closed set of the storage backends able to receive the job artifacts. Adding a backend requires
# a deployment factory and a credential rule for it.
storage_backend_registry: Dict[SparkSubmitStorageType, StorageBackendRule] = {
    SparkSubmitStorageType.BLOB: BLOB_STORAGE_RULE,
}


@dataclass(frozen=True)
class JobDeploySelection:
    """Outcome of the deployment strategy selection."""
    rule: StorageBackendRule
    fs_root: WasbRoot
    job_deploy: SparkBatchJobDeploy
    compute: Optional[SparkCompute] = None


@dataclass
class SparkBatchRunner:
    """
    Builds Spark batch jobs targeting the Spark computes of a workspace.

    The runner does not cache anything between two builds. The compute inventory and the
    deployment factory are the only collaborators, and they are owned by the caller.
    """
    compute_resolver: ComputeResolver
    deploy_factory: DeploymentFactory = field(default_factory=CspJobDeployFactory)
    logger: Logger = field(default=None, init=False)

    def __post_init__(self):
        self.logger = ToolLogging.get_and_setup_logger('spark.batch.tools.submission.runner')

    @classmethod
    def from_inventory(cls,
                       inventory: ComputeInventory,
                       deploy_factory: Optional[DeploymentFactory] = None,
                       timeout_secs: Optional[float] = None) -> 'SparkBatchRunner':
        if deploy_factory is None:
            deploy_factory = CspJobDeployFactory()
        return cls(compute_resolver=ComputeResolver(inventory, timeout_secs=timeout_secs),
                   deploy_factory=deploy_factory)

    def validate_submit_model(self, submit_model: SparkSubmitModel) -> None:
        """
        Checks that the submit model addresses a Spark compute. The error message lists the
        values found in the model, so the user can fix the run configuration.
        :raises ConfigurationIncompleteError: any of the tenant, workspace or compute is missing.
        """
        if any(is_blank(val) for val in (submit_model.spark_compute,
                                         submit_model.tenant_id,
                                         submit_model.spark_workspace)):
            err_msg = ('Spark compute is not selected. '
                       f'spark compute: {submit_model.spark_compute}, '
                       f'tenant id: {submit_model.tenant_id}, '
                       f'spark workspace: {submit_model.spark_workspace}')
            self.logger.warning(err_msg)
            raise ConfigurationIncompleteError(err_msg)

    def select_job_deploy(self, submit_model: SparkSubmitModel, event_sink: EventSink) -> JobDeploySelection:
        """
        Picks the deployment of the job artifacts from the storage backend of the submit model.
        :raises MissingUploadPathError: the submit model has no upload path.
        :raises UnsupportedStorageBackendError: no deployment is defined for the storage backend.
        :raises InvalidProtocolPrefixError: the upload path does not match the storage backend.
        :raises ComputeNotFoundError: the Spark compute does not exist.
        """
        storage_model = submit_model.job_upload_storage
        if is_blank(storage_model.upload_path):
            raise MissingUploadPathError('No uploading path set in the submit configuration')
        storage_type = storage_model.storage_account_type
        rule = storage_backend_registry.get(storage_type)
        if rule is None:
            raise UnsupportedStorageBackendError(storage_type)
        fs_root = rule.parse_fs_root(storage_model.upload_path)
        compute = None
        if rule.requires_compute:
            compute = self.compute_resolver.resolve(submit_model.tenant_id,
                                                    submit_model.spark_workspace,
                                                    submit_model.spark_compute)
            self.logger.debug('Resource resolved: %s', compute.title)
            event_sink.info(f'Found Spark compute {compute.title}')
        else:
            self.logger.debug('Resolution skipped for storage type %s', storage_type.value)
        job_deploy = self.deploy_factory.build_spark_batch_job_deploy(submit_model, compute, event_sink)
        self.logger.debug('Strategy selected for storage type %s', storage_type.value)
        return JobDeploySelection(rule=rule, fs_root=fs_root, job_deploy=job_deploy, compute=compute)

    def build_spark_batch_job(self, submit_model: SparkSubmitModel, event_sink: EventSink) -> SparkBatchJob:
        """
        Builds a Spark batch job from the submit model. The storage key is expected to be set on
        the submit model already (see resolve_storage_key).
        Note that the Spark configurations of the submit model are updated with the storage
        credential.
        :param submit_model: the batch job as defined by the user.
        :param event_sink: receives the progress messages.
        :return: the job ready to be submitted.
        """
        self.validate_submit_model(submit_model)
        self.logger.debug('Validated submit model of Spark compute %s', submit_model.spark_compute)
        selection = self.select_job_deploy(submit_model, event_sink)
        conf_key = inject_storage_credential(submit_model.submission_parameter.job_config,
                                             selection.fs_root,
                                             submit_model.job_upload_storage.storage_key,
                                             selection.rule)
        self.logger.debug('Credential injected as %s', conf_key)
        submission = SubmissionTarget(tenant_id=submit_model.tenant_id,
                                      workspace_name=submit_model.spark_workspace,
                                      livy_uri=submit_model.livy_uri)
        job = SparkBatchJob.build(submit_model.submission_parameter,
                                  submission,
                                  selection.job_deploy,
                                  event_sink,
                                  compute=selection.compute)
        self.logger.debug('Built Spark batch job for %s', submission.workspace_name)
        return job
