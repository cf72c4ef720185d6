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

"""CLI to build the Spark batch jobs submitted to the Spark computes of a workspace."""

from typing import Optional

import fire

from spark_batch_tools.common.utilities import ToolLogging, Utils
from spark_batch_tools.compute.manager import StaticComputeInventory
from spark_batch_tools.configuration.submit_model import SparkSubmitModel
from spark_batch_tools.exceptions import SparkSubmitException
from spark_batch_tools.submission.event_sink import CollectingEventSink
from spark_batch_tools.submission.runner import SparkBatchRunner
from spark_batch_tools.submission.secrets import EnvSecretProvider, resolve_storage_key
from spark_batch_tools.utils.util import init_environment


class SubmitCLI(object):  # pylint: disable=too-few-public-methods
    """CLI that validates a Spark batch job definition and builds the job targeting a Spark compute.

    The Spark computes are listed from an inventory file describing the workspaces of the tenant.
    """

    def build(self,
              config_file: str = None,
              inventory_file: str = None,
              verbose: bool = None) -> Optional[str]:
        """The build cmd resolves the Spark compute of a job and prepares its submission.

        The storage key of the upload destination is read from the submit configuration.
        When it is missing, it is read from the environment variable
        SPARK_BATCH_TOOLS_STORAGE_KEY_<STORAGE_ACCOUNT>.

        :param config_file: Path to a YAML or JSON file describing the Spark batch job.
        :param inventory_file: Path to a YAML or JSON file listing the workspaces and their Spark computes.
        :param verbose: True or False to enable verbosity of the script.
        :return: A summary of the job. Credentials are masked.
        """
        if verbose:
            ToolLogging.enable_debug_mode()
        init_environment('submit')
        logger = ToolLogging.get_and_setup_logger('spark.batch.tools.cmdli')
        if config_file is None or inventory_file is None:
            logger.error('Both the config_file and the inventory_file arguments are required.')
            return None
        try:
            submit_model = SparkSubmitModel.load_from_file(config_file)
            inventory = StaticComputeInventory.load_from_file(inventory_file)
            resolve_storage_key(submit_model, EnvSecretProvider())
            event_sink = CollectingEventSink()
            runner = SparkBatchRunner.from_inventory(inventory)
            job = runner.build_spark_batch_job(submit_model, event_sink)
        except (SparkSubmitException, ValueError) as ex:
            logger.error('Failed to build the Spark batch job: %s', ex)
            return None
        return Utils.gen_multiline_str(event_sink.get_messages(), job.get_summary())

    def schema(self) -> str:
        """Prints the JSON schema of the submit configuration files."""
        return SparkSubmitModel.get_schema()


def main():
    # Make Python Fire not use a pager when it prints a help text
    fire.core.Display = lambda lines, out: out.write('\n'.join(lines) + '\n')
    fire.Fire(SubmitCLI())


if __name__ == '__main__':
    main()
