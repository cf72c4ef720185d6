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
Define the representation of the remote workspaces and the Spark computes they host, along with
the interface of the inventories able to list them.
"""

from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Tuple, Union, runtime_checkable

from spark_batch_tools.enums import ComputeState


@dataclass(frozen=True)
class SparkCompute:
    """
    A handle to a Spark compute (i.e., a Spark pool) hosted in a workspace.
    Instances are returned by the inventories and consumed by the deployment factories.
    """
    name: str
    workspace_name: str
    tenant_id: str
    subscription_id: Optional[str] = None
    state: ComputeState = ComputeState.RUNNING
    node_count: Optional[int] = None
    spark_version: Optional[str] = None

    def matches(self, tenant_id: str, workspace_name: str, compute_name: str) -> bool:
        return (self.workspace_name == workspace_name
                and self.tenant_id == tenant_id
                and self.name == compute_name)

    @property
    def title(self) -> str:
        return f'{self.name} @{self.workspace_name}'


@dataclass(frozen=True)
class SparkWorkspace:
    """A workspace owned by a tenant. Only running workspaces expose their computes."""
    name: str
    tenant_id: str
    subscription_id: Optional[str] = None
    state: ComputeState = ComputeState.RUNNING
    computes: Tuple[SparkCompute, ...] = field(default_factory=tuple)

    def is_running(self) -> bool:
        return self.state == ComputeState.RUNNING


ComputeLookupResult = Union[Iterable[SparkCompute], 'Future[Iterable[SparkCompute]]']


@runtime_checkable
class ComputeInventory(Protocol):
    """
    Interface of the collaborators listing the Spark computes. The returned sequence is finite
    and can be lazy; it may also be wrapped in a future when the lookup runs asynchronously.
    """

    def find_compute(self,
                     tenant_id: str,
                     workspace_name: str,
                     compute_name: str) -> ComputeLookupResult:
        ...
