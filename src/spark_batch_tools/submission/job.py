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

"""Representation of a Spark batch job ready to be submitted."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from spark_batch_tools.common.utilities import Utils
from spark_batch_tools.compute.compute import SparkCompute
from spark_batch_tools.configuration.submit_model import SparkSubmissionParameter
from spark_batch_tools.submission.deploy import SparkBatchJobDeploy
from spark_batch_tools.submission.event_sink import EventSink


@dataclass(frozen=True)
class SubmissionTarget:
    """Where the batch request is sent: the tenant, the workspace and the Livy endpoint."""
    tenant_id: str
    workspace_name: str
    livy_uri: Optional[str] = None


@dataclass(frozen=True)
class SparkBatchJob:
    """
    A submittable Spark batch job. The job owns a private copy of the submission parameters, so
    later changes to the submit model do not leak into it. The parameters are only handed out as
    copies and the Spark configurations as a read-only view.
    The execution and the monitoring of the job are handled by the submission clients.
    """
    _submission_parameter: SparkSubmissionParameter
    submission: SubmissionTarget
    job_deploy: SparkBatchJobDeploy
    event_sink: EventSink
    compute: Optional[SparkCompute] = None

    @classmethod
    def build(cls,
              submission_parameter: SparkSubmissionParameter,
              submission: SubmissionTarget,
              job_deploy: SparkBatchJobDeploy,
              event_sink: EventSink,
              compute: Optional[SparkCompute] = None) -> 'SparkBatchJob':
        return cls(_submission_parameter=submission_parameter.model_copy(deep=True),
                   submission=submission,
                   job_deploy=job_deploy,
                   event_sink=event_sink,
                   compute=compute)

    @property
    def submission_parameter(self) -> SparkSubmissionParameter:
        """Copy of the submission parameters of the job."""
        return self._submission_parameter.model_copy(deep=True)

    @property
    def configuration(self) -> Mapping[str, str]:
        """Read-only view of the Spark configurations of the job."""
        return MappingProxyType(self._submission_parameter.job_config.get(SparkSubmissionParameter.conf_key, {}))

    def get_masked_configuration(self) -> dict:
        return Utils.mask_sensitive_confs(dict(self.configuration))

    def get_summary(self) -> str:
        conf_lines = [f'\t{conf_k}={conf_v}' for conf_k, conf_v in sorted(self.get_masked_configuration().items())]
        compute_title = self.compute.title if self.compute is not None else 'N/A'
        return Utils.gen_multiline_str(
            f'Spark batch job: {self._submission_parameter.name or self._submission_parameter.file}',
            f'Tenant: {self.submission.tenant_id}',
            f'Workspace: {self.submission.workspace_name}',
            f'Spark compute: {compute_title}',
            f'Livy endpoint: {self.submission.livy_uri}',
            'Spark configurations:',
            conf_lines)
