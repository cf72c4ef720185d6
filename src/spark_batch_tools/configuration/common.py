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

"""Common types and definitions used by the configurations. This module is used by other
modules as well."""

from pydantic import BaseModel, Field


class BaseConfig(BaseModel, extra='forbid'):
    """
    BaseConfig class for Pydantic models that enforces the `extra = forbid`
    setting. This ensures that no extra keys are allowed in any model or
    subclass that inherits from this base class.

    This base class is meant to be inherited by other Pydantic models related
    to the submission configurations so that we can enforce a global rule.
    """


class SparkProperty(BaseConfig):
    """Represents a single Spark property with a name and value."""
    name: str = Field(
        description='Name of the Spark property, e.g., "spark.executor.memory".')
    value: str = Field(
        description='Value of the Spark property, e.g., "4g".')
