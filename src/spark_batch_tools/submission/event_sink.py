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
Progress channels written by the submission pipeline. The pipeline only appends to a sink; the
messages are consumed by whatever reports the progress to the user.
"""

import logging
from dataclasses import dataclass, field
from logging import Logger
from typing import List, Tuple, Union

from spark_batch_tools.common.utilities import ToolLogging
from spark_batch_tools.enums import MessageInfoType

SinkMessage = Tuple[MessageInfoType, str]


def _to_message_type(category: Union[MessageInfoType, str]) -> MessageInfoType:
    if isinstance(category, MessageInfoType):
        return category
    return MessageInfoType.fromstring(category)


@dataclass
class EventSink:
    """Base class of the append-only progress channels."""

    def emit(self, category: Union[MessageInfoType, str], message: str) -> None:
        raise NotImplementedError

    def info(self, message: str) -> None:
        self.emit(MessageInfoType.INFO, message)

    def warning(self, message: str) -> None:
        self.emit(MessageInfoType.WARNING, message)

    def error(self, message: str) -> None:
        self.emit(MessageInfoType.ERROR, message)


@dataclass
class CollectingEventSink(EventSink):
    """Keeps the emitted messages in order. Used by the CLI summary and by the tests."""
    messages: List[SinkMessage] = field(default_factory=list)

    def emit(self, category: Union[MessageInfoType, str], message: str) -> None:
        self.messages.append((_to_message_type(category), message))

    def get_messages(self, category: MessageInfoType = None) -> List[str]:
        return [msg for msg_type, msg in self.messages if category is None or msg_type == category]


@dataclass
class LoggingEventSink(EventSink):
    """Forwards the messages to the tools logger."""
    logger: Logger = field(default=None, init=False)

    level_map = {
        MessageInfoType.INFO: logging.INFO,
        MessageInfoType.WARNING: logging.WARNING,
        MessageInfoType.ERROR: logging.ERROR,
        MessageInfoType.LOG: logging.DEBUG,
        MessageInfoType.HYPERLINK: logging.INFO,
    }

    def __post_init__(self):
        self.logger = ToolLogging.get_and_setup_logger('spark.batch.tools.events')

    def emit(self, category: Union[MessageInfoType, str], message: str) -> None:
        msg_type = _to_message_type(category)
        self.logger.log(self.level_map[msg_type], message)
