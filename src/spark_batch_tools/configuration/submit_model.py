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

"""The submission model of a Spark batch job as defined by the user. This is the part of the
configuration that can be passed as an input to the CLI"""

import json
from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import AliasChoices, Field, ValidationError, field_validator

from spark_batch_tools.configuration.common import BaseConfig, SparkProperty
from spark_batch_tools.enums import SparkSubmitStorageType
from spark_batch_tools.exceptions import InvalidPropertiesSchema
from spark_batch_tools.storagelib.csppath import CspPathT
from spark_batch_tools.utils.propmanager import AbstractPropContainer


class JobUploadStorageModel(BaseConfig):
    """Where and how the job artifacts are uploaded before the submission."""
    storage_account_type: SparkSubmitStorageType = Field(
        default_factory=SparkSubmitStorageType.get_default,
        description='The storage backend used to upload the job artifacts.',
        validation_alias=AliasChoices('storage_account_type', 'storageAccountType'),
        examples=['blob', 'adls_gen2'])

    upload_path: Optional[str] = Field(
        default=None,
        description='The root uri where the job artifacts are uploaded.',
        validation_alias=AliasChoices('upload_path', 'uploadPath'),
        examples=['wasbs://jobs@account.blob.core.windows.net/SparkSubmission'])

    storage_account: Optional[str] = Field(
        default=None,
        description='The storage account name. Used to look up the access key when it is not set.',
        validation_alias=AliasChoices('storage_account', 'storageAccount'))

    storage_key: Optional[str] = Field(
        default=None,
        repr=False,
        description='The access key of the storage account.',
        validation_alias=AliasChoices('storage_key', 'storageKey'))


class SparkSubmissionParameter(BaseConfig):
    """The parameters sent to the Livy batch endpoint."""
    conf_key: ClassVar[str] = 'conf'

    name: Optional[str] = Field(
        default=None,
        description='The name of the Spark application.')

    file: Optional[str] = Field(
        default=None,
        description='The main artifact (jar or python file) of the job.',
        examples=['file:///home/user/spark-app.jar'])

    class_name: Optional[str] = Field(
        default=None,
        description='The main class of the application.',
        validation_alias=AliasChoices('class_name', 'className'))

    args: List[str] = Field(
        default_factory=list,
        description='The command line arguments of the application.')

    jars: List[str] = Field(
        default_factory=list,
        description='Reference jars to be used in the session.')

    files: List[str] = Field(
        default_factory=list,
        description='Reference files to be used in the session.')

    job_config: Dict[str, Any] = Field(
        default_factory=dict,
        description='The job configurations. The Spark properties are set under the "conf" entry.',
        validation_alias=AliasChoices('job_config', 'jobConfig'),
        examples=[{'driverMemory': '4g', 'conf': {'spark.executor.memory': '4g'}}])

    @field_validator('job_config', mode='before')
    @classmethod
    def normalize_spark_conf(cls, value: Any) -> Any:
        """Accept the Spark properties either as a mapping or as a list of name/value pairs."""
        if not isinstance(value, dict):
            return value
        spark_conf = value.get(cls.conf_key)
        if spark_conf is None:
            return value
        if isinstance(spark_conf, list):
            spark_conf = {prop.name: prop.value for prop in
                          (SparkProperty.model_validate(entry) for entry in spark_conf)}
        if not isinstance(spark_conf, dict):
            raise ValueError(f'Invalid Spark configurations: {spark_conf}')
        # a property without a value is left unset
        return {**value, cls.conf_key: {str(conf_k): str(conf_v) for conf_k, conf_v in spark_conf.items()
                                        if conf_v is not None}}

    def get_spark_confs(self) -> Dict[str, str]:
        """Returns the mutable Spark configurations of the job, creating the entry if missing."""
        return self.job_config.setdefault(self.conf_key, {})


class SparkSubmitModel(BaseConfig):
    """Main container for the user's defined batch job submission"""
    tenant_id: Optional[str] = Field(
        default=None,
        description='The tenant owning the workspace.',
        validation_alias=AliasChoices('tenant_id', 'tenantId'))

    spark_workspace: Optional[str] = Field(
        default=None,
        description='The name of the workspace hosting the Spark compute.',
        validation_alias=AliasChoices('spark_workspace', 'sparkWorkspace'))

    spark_compute: Optional[str] = Field(
        default=None,
        description='The name of the Spark compute running the job.',
        validation_alias=AliasChoices('spark_compute', 'sparkCompute'))

    livy_uri: Optional[str] = Field(
        default=None,
        description='The Livy endpoint receiving the batch submission.',
        validation_alias=AliasChoices('livy_uri', 'livyUri'),
        examples=['https://workspace.dev.azuresynapse.net/livyApi/versions/2019-11-01-preview/sparkPools/pool'])

    job_upload_storage: JobUploadStorageModel = Field(
        default_factory=JobUploadStorageModel,
        description='Configuration related to the upload of the job artifacts.',
        validation_alias=AliasChoices('job_upload_storage', 'jobUploadStorage'))

    submission_parameter: SparkSubmissionParameter = Field(
        default_factory=SparkSubmissionParameter,
        description='The parameters of the Spark batch job.',
        validation_alias=AliasChoices('submission_parameter', 'submissionParameter'))

    @classmethod
    def load_from_file(cls, file_path: Union[str, CspPathT]) -> Optional['SparkSubmitModel']:
        """Load the submission model from a JSON or YAML file"""
        prop_container = AbstractPropContainer.load_from_file(file_path)
        try:
            return cls(**prop_container.props)
        except ValidationError as e:
            raise InvalidPropertiesSchema(f'Invalid submission configuration [{file_path}]. ', e) from e

    @classmethod
    def get_schema(cls) -> str:
        """Returns a JSON schema of the submission model. This is useful for generating an API
        documentation of the model."""
        return json.dumps(cls.model_json_schema(), indent=2)
