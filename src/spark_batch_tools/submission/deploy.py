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

"""Placement of the job artifacts at a location readable by the Spark compute."""

from dataclasses import dataclass, field
from logging import Logger
from typing import Optional, Protocol, Union, runtime_checkable

from spark_batch_tools.common.utilities import ToolLogging, Utils
from spark_batch_tools.compute.compute import SparkCompute
from spark_batch_tools.configuration.submit_model import SparkSubmitModel
from spark_batch_tools.exceptions import CspPathNotFoundException, DeploymentFailureError, SparkSubmitException
from spark_batch_tools.storagelib.cspfs import CspFs
from spark_batch_tools.storagelib.csppath import CspPath
from spark_batch_tools.storagelib.wasb.wasbfs import WasbFs
from spark_batch_tools.storagelib.wasb.wasbpath import WasbPath
from spark_batch_tools.submission.event_sink import EventSink
from spark_batch_tools.utils.util import is_blank


@runtime_checkable
class SparkBatchJobDeploy(Protocol):
    """Handle deploying the artifacts of a single job."""

    def deploy(self, artifact_path: Union[str, CspPath]) -> str:
        ...


@runtime_checkable
class DeploymentFactory(Protocol):
    """Builds the deployment handle of a job targeting a Spark compute."""

    def build_spark_batch_job_deploy(self,
                                     submit_model: SparkSubmitModel,
                                     compute: Optional[SparkCompute],
                                     event_sink: EventSink) -> SparkBatchJobDeploy:
        ...


@dataclass
class CspJobDeploy:
    """
    Copies the job artifacts to a folder of the upload storage. The folder is owned by a single job.
    """
    destination: CspPath
    event_sink: EventSink
    logger: Logger = field(default=None, init=False)

    def __post_init__(self):
        self.logger = ToolLogging.get_and_setup_logger('spark.batch.tools.submission.deploy')

    def deploy(self, artifact_path: Union[str, CspPath]) -> str:
        """
        Copies a single artifact into the destination folder.
        :param artifact_path: the artifact built on the local machine.
        :return: the full uri of the uploaded artifact.
        :raises DeploymentFailureError: if the artifact could not be copied.
        """
        try:
            src_path = CspPath(artifact_path)
            if not src_path.exists():
                raise CspPathNotFoundException(f'Artifact does not exist {src_path}')
            if not src_path.is_file():
                raise CspPathNotFoundException(f'Artifact is not a file {src_path}')
            dest_path = self.destination.create_sub_path(src_path.base_name())
            self.event_sink.info(f'Uploading {src_path.to_str_format()} to {dest_path}')
            self.destination.create_dirs()
            CspFs.copy_file(src_path, dest_path)
        except (SparkSubmitException, OSError) as ex:
            self.event_sink.error(f'Failed to upload {artifact_path}: {ex}')
            raise DeploymentFailureError(f'Failed to deploy the artifact [{artifact_path}] '
                                         f'to [{self.destination}]') from ex
        self.logger.debug('Uploaded artifact %s to %s', artifact_path, dest_path)
        self.event_sink.info(f'Uploaded to {dest_path}')
        return str(dest_path)


@dataclass
class CspJobDeployFactory:
    """
    Default deployment factory. The artifacts of each job are placed under
    <upload_path>/SparkSubmission/<compute_name>/<unique_id>/
    """
    submission_folder: str = 'SparkSubmission'

    def _get_fs_client(self, submit_model: SparkSubmitModel, upload_path: str) -> Optional[CspFs]:
        if not WasbPath.is_protocol_prefix(upload_path):
            # use the default client of the path class
            return None
        storage_model = submit_model.job_upload_storage
        storage_account = storage_model.storage_account
        if is_blank(storage_account):
            storage_account = WasbPath.parse_root(upload_path).storage_account
        return WasbFs.for_storage_account(storage_account, storage_model.storage_key)

    def build_spark_batch_job_deploy(self,
                                     submit_model: SparkSubmitModel,
                                     compute: Optional[SparkCompute],
                                     event_sink: EventSink) -> CspJobDeploy:
        upload_path = submit_model.job_upload_storage.upload_path
        if is_blank(upload_path):
            raise DeploymentFailureError('No uploading path set in the submit configuration')
        compute_folder = compute.name if compute is not None else 'default'
        job_folder = Utils.gen_uuid_with_ts(suffix_len=8)
        try:
            upload_root = CspPath(upload_path, self._get_fs_client(submit_model, upload_path))
            destination = upload_root.create_sub_path(f'{self.submission_folder}/{compute_folder}/{job_folder}')
        except (SparkSubmitException, AttributeError, ValueError, OSError) as ex:
            raise DeploymentFailureError(f'Failed to prepare the upload destination [{upload_path}]') from ex
        event_sink.info(f'The job artifacts will be uploaded to {destination}')
        return CspJobDeploy(destination=destination, event_sink=event_sink)
