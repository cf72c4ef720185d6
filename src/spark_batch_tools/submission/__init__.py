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

"""Pipeline building the Spark batch jobs from the submit models."""

from .credentials import BLOB_STORAGE_RULE, StorageBackendRule, inject_storage_credential
from .deploy import CspJobDeploy, CspJobDeployFactory, DeploymentFactory, SparkBatchJobDeploy
from .event_sink import CollectingEventSink, EventSink, LoggingEventSink
from .job import SparkBatchJob, SubmissionTarget
from .runner import SparkBatchRunner, storage_backend_registry
from .secrets import DictSecretProvider, EnvSecretProvider, SecretProvider, resolve_storage_key

__all__ = [
    'BLOB_STORAGE_RULE',
    'CollectingEventSink',
    'CspJobDeploy',
    'CspJobDeployFactory',
    'DeploymentFactory',
    'DictSecretProvider',
    'EnvSecretProvider',
    'EventSink',
    'LoggingEventSink',
    'SecretProvider',
    'SparkBatchJob',
    'SparkBatchJobDeploy',
    'SparkBatchRunner',
    'StorageBackendRule',
    'SubmissionTarget',
    'inject_storage_credential',
    'resolve_storage_key',
    'storage_backend_registry',
]
