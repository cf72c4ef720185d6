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

"""Resolves the Spark compute targeted by a job."""

from concurrent.futures import Future
from dataclasses import dataclass, field
from logging import Logger
from typing import Optional

from spark_batch_tools.common.utilities import ToolLogging
from spark_batch_tools.compute.compute import ComputeInventory, SparkCompute
from spark_batch_tools.exceptions import ComputeNotFoundError, ComputeResolutionError


@dataclass
class ComputeResolver:
    """
    Blocking facade on top of a compute inventory.

    The contract is exactly one result or a not-found signal: the resolver waits for the
    first compute yielded by the inventory, or for the inventory to be exhausted. Only the first
    match is consumed; the remaining ones are never pulled from the inventory.
    timeout_secs bounds the wait on inventories answering with a Future. Iterables are
    consumed synchronously and are not bounded.
    """
    inventory: ComputeInventory
    timeout_secs: Optional[float] = None
    logger: Logger = field(default=None, init=False)

    def __post_init__(self):
        self.logger = ToolLogging.get_and_setup_logger('spark.batch.tools.compute.resolver')

    def _lookup(self, tenant_id: str, workspace_name: str, compute_name: str) -> Optional[SparkCompute]:
        found = self.inventory.find_compute(tenant_id, workspace_name, compute_name)
        if isinstance(found, Future):
            found = found.result(timeout=self.timeout_secs)
        if found is None:
            return None
        return next(iter(found), None)

    def resolve(self, tenant_id: str, workspace_name: str, compute_name: str) -> SparkCompute:
        """
        Look up a Spark compute by its coordinates.
        :param tenant_id: the tenant owning the workspace.
        :param workspace_name: the workspace hosting the compute.
        :param compute_name: the name of the Spark compute.
        :return: the first matching Spark compute.
        :raises ComputeNotFoundError: the inventory has no matching compute.
        :raises ComputeResolutionError: the lookup itself failed.
        """
        self.logger.debug('Looking up Spark compute (%s:%s) at tenant %s',
                          workspace_name, compute_name, tenant_id)
        try:
            compute = self._lookup(tenant_id, workspace_name, compute_name)
        except ComputeNotFoundError:
            raise
        except Exception as ex:  # pylint: disable=broad-except
            raise ComputeResolutionError(
                f'Failed to look up Spark compute ({workspace_name}:{compute_name}) '
                f'at tenant {tenant_id}: {ex}') from ex
        if compute is None:
            raise ComputeNotFoundError(tenant_id, workspace_name, compute_name)
        self.logger.debug('Resolved Spark compute %s', compute.title)
        return compute
