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

"""Inventories listing the Spark computes of the workspaces visible to the user."""

import threading
from dataclasses import dataclass, field, replace
from itertools import chain
from logging import Logger
from typing import Iterable, Iterator, List, Optional, Protocol, Tuple, Union

from pydantic import AliasChoices, Field

from spark_batch_tools.common.utilities import ToolLogging
from spark_batch_tools.compute.compute import SparkCompute, SparkWorkspace
from spark_batch_tools.configuration.common import BaseConfig
from spark_batch_tools.enums import ComputeState
from spark_batch_tools.storagelib.csppath import CspPathT
from spark_batch_tools.utils.propmanager import AbstractPropContainer, PropValidatorSchema


class WorkspaceClient(Protocol):
    """Transport used by the compute manager to list the remote resources."""

    def list_workspaces(self) -> Iterable[SparkWorkspace]:
        ...

    def list_computes(self, workspace: SparkWorkspace) -> Iterable[SparkCompute]:
        ...


def _filter_computes(computes: Iterable[SparkCompute],
                     tenant_id: str,
                     workspace_name: str,
                     compute_name: str) -> Iterator[SparkCompute]:
    return (compute for compute in computes if compute.matches(tenant_id, workspace_name, compute_name))


@dataclass
class SparkComputeManager:
    """
    Keeps the workspaces and their Spark computes listed by a workspace client.

    The cached computes are looked up first. The remote inventory is only fetched when the cache
    does not hold the requested compute, and the consumer asks for more results.
    """
    client: WorkspaceClient
    _workspaces: Tuple[SparkWorkspace, ...] = field(default=(), init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    logger: Logger = field(default=None, init=False)

    def __post_init__(self):
        self.logger = ToolLogging.get_and_setup_logger('spark.batch.tools.compute.manager')

    def get_workspaces(self) -> Tuple[SparkWorkspace, ...]:
        with self._lock:
            self._workspaces = tuple(workspace for workspace in self._workspaces if workspace.is_running())
            return self._workspaces

    def get_clusters(self) -> List[SparkCompute]:
        return [compute for workspace in self.get_workspaces() for compute in workspace.computes]

    def clear(self) -> None:
        """Drops the cached workspaces. Called when the user signs out or changes subscriptions."""
        with self._lock:
            self._workspaces = ()

    def _fetch_workspace_computes(self, workspace: SparkWorkspace) -> SparkWorkspace:
        try:
            computes = tuple(self.client.list_computes(workspace))
        except Exception as ex:  # pylint: disable=broad-except
            self.logger.warning('Got exceptions when refreshing spark computes. Workspace: %s. %s',
                                workspace.name, ex)
            computes = ()
        return replace(workspace, computes=computes)

    def fetch_clusters(self) -> 'SparkComputeManager':
        """
        Lists the workspaces and the Spark computes of the running ones. A failure to list the
        computes of a single workspace is logged and that workspace is kept without computes.
        A failure to list the workspaces is propagated to the caller.
        """
        workspaces = [workspace for workspace in self.client.list_workspaces() if workspace.is_running()]
        self.logger.debug('Listed %d running workspaces', len(workspaces))
        refreshed = tuple(self._fetch_workspace_computes(workspace) for workspace in workspaces)
        with self._lock:
            self._workspaces = refreshed
        return self

    def refresh(self) -> 'SparkComputeManager':
        try:
            return self.fetch_clusters()
        except Exception as ex:  # pylint: disable=broad-except
            self.logger.warning('Got exceptions when refreshing workspaces. %s', ex)
            return self

    def _fetched_computes(self) -> Iterator[SparkCompute]:
        yield from self.fetch_clusters().get_clusters()

    def find_compute(self,
                     tenant_id: str,
                     workspace_name: str,
                     compute_name: str) -> Iterator[SparkCompute]:
        return _filter_computes(chain(self.get_clusters(), self._fetched_computes()),
                                tenant_id, workspace_name, compute_name)


class ComputeEntrySchema(BaseConfig):
    """A Spark compute entry of a static inventory file"""
    name: str
    spark_version: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('spark_version', 'sparkVersion'))
    node_count: Optional[int] = Field(
        default=None, validation_alias=AliasChoices('node_count', 'nodeCount'))
    state: ComputeState = ComputeState.RUNNING


class WorkspaceEntrySchema(BaseConfig):
    """A workspace entry of a static inventory file"""
    name: str
    tenant_id: str = Field(validation_alias=AliasChoices('tenant_id', 'tenantId'))
    subscription_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices('subscription_id', 'subscriptionId'))
    state: ComputeState = ComputeState.RUNNING
    computes: List[ComputeEntrySchema] = Field(default_factory=list)


class InventoryPropSchema(PropValidatorSchema):
    """Schema of the static inventory files"""
    workspaces: List[WorkspaceEntrySchema]


class InventoryPropContainer(AbstractPropContainer):
    schema_clzz = InventoryPropSchema


@dataclass
class StaticComputeInventory:
    """
    An inventory built from a fixed list of workspaces. Used to submit jobs offline and in tests.

    Example of a YAML inventory file:
    ```yaml
    workspaces:
      - name: workspace00
        tenantId: tenant00
        computes:
          - name: sparkpool00
            sparkVersion: '3.4'
    ```
    """
    workspaces: Tuple[SparkWorkspace, ...] = ()

    def list_workspaces(self) -> Iterable[SparkWorkspace]:
        return self.workspaces

    def list_computes(self, workspace: SparkWorkspace) -> Iterable[SparkCompute]:
        return workspace.computes

    def find_compute(self,
                     tenant_id: str,
                     workspace_name: str,
                     compute_name: str) -> Iterator[SparkCompute]:
        computes = chain.from_iterable(ws.computes for ws in self.workspaces if ws.is_running())
        return _filter_computes(computes, tenant_id, workspace_name, compute_name)

    @classmethod
    def load_from_file(cls, file_path: Union[str, CspPathT]) -> 'StaticComputeInventory':
        prop_container = InventoryPropContainer.load_from_file(file_path)
        schema = InventoryPropSchema(**prop_container.props)
        workspaces = []
        for ws_entry in schema.workspaces:
            computes = tuple(
                SparkCompute(name=c_entry.name,
                             workspace_name=ws_entry.name,
                             tenant_id=ws_entry.tenant_id,
                             subscription_id=ws_entry.subscription_id,
                             state=c_entry.state,
                             node_count=c_entry.node_count,
                             spark_version=c_entry.spark_version)
                for c_entry in ws_entry.computes)
            workspaces.append(SparkWorkspace(name=ws_entry.name,
                                             tenant_id=ws_entry.tenant_id,
                                             subscription_id=ws_entry.subscription_id,
                                             state=ws_entry.state,
                                             computes=computes))
        return cls(workspaces=tuple(workspaces))
