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
Define some custom exceptions defined through the implementation.
This helps to catch specific behaviors when necessary
"""

from typing import Optional

from pydantic import ValidationError


class SparkSubmitException(Exception):
    """Base exception for all custom exceptions."""


#################################
# Storage path and file loading
#################################

class CspPathException(SparkSubmitException):
    """Base exception for errors raised by the storage path layer."""


class InvalidProtocolPrefixError(CspPathException, ValueError):
    pass


class FSMismatchError(CspPathException, ValueError):
    pass


class CspPathNotFoundException(CspPathException, ValueError):
    pass


class CspPathAttributeError(CspPathException, ValueError):
    pass


class JsonLoadException(CspPathException, ValueError):
    pass


class YamlLoadException(CspPathException, ValueError):
    pass


class InvalidPropertiesSchema(CspPathException, ValueError):
    """
    Defines a class to represent errors caused by invalid properties schema
    """
    def __init__(self, msg: str, pydantic_err: Optional[ValidationError] = None):
        if pydantic_err is None:
            self.message = msg
        else:
            content = [msg]
            for err_obj in pydantic_err.errors():
                field_loc = err_obj.get('loc')
                field_title = field_loc[0] if field_loc else ''
                single_err = [str(field_title), err_obj.get('type', ''), err_obj.get('msg', '')]
                content.append(str.join('. ', single_err))
            self.message = str.join('\n', content)
        super().__init__(self.message)


#################################
# Job submission pipeline
#################################

class ConfigurationIncompleteError(SparkSubmitException, ValueError):
    """The submit model lacks one of the fields needed to address a Spark compute."""


class MissingUploadPathError(SparkSubmitException, ValueError):
    """No destination was configured for the job artifacts."""


class ComputeNotFoundError(SparkSubmitException, LookupError):
    """
    The compute inventory has no Spark compute matching the requested coordinates.
    """
    def __init__(self, tenant_id: str, workspace_name: str, compute_name: str):
        self.tenant_id = tenant_id
        self.workspace_name = workspace_name
        self.compute_name = compute_name
        super().__init__(
            f'Can\'t find Spark compute ({workspace_name}:{compute_name}) at tenant {tenant_id}.')


class ComputeResolutionError(SparkSubmitException):
    """The compute lookup failed before it could report a result."""


class UnsupportedStorageBackendError(SparkSubmitException, ValueError):
    """The declared storage backend has no deployment implementation."""
    def __init__(self, storage_type, msg: Optional[str] = None):
        self.storage_type = storage_type
        if msg is None:
            type_label = getattr(storage_type, 'value', storage_type)
            msg = (f'Storage type [{type_label}] is not supported to upload the job artifacts. '
                   'Only Azure Blob storage (WASB) is supported currently.')
        super().__init__(msg)


class DeploymentFailureError(SparkSubmitException):
    """Raised by deployment factories and deployment handles."""
