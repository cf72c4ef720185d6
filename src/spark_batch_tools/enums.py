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

"""Enumeration types commonly used through the batch submission implementations."""

from enum import Enum
from typing import Union, cast


class EnumeratedType(str, Enum):
    """Abstract representation of enumerated values"""

    @classmethod
    def get_default(cls) -> 'EnumeratedType':
        pass

    # Make enum case-insensitive by overriding the Enum's missing method
    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        value = value.lower()
        for member in cls:
            if member.lower() == value:
                return member
        return None

    @classmethod
    def tostring(cls, value: Union[Enum, str]) -> str:
        """Return the string representation of the state object attribute
        :param str value: the state object to turn into string
        :return: the uppercase string that represents the state object
        :rtype: str
        """
        value = cast(Enum, value)
        return str(value._value_).upper()  # pylint: disable=protected-access

    @classmethod
    def fromstring(cls, value: str) -> 'EnumeratedType':
        """Return the state object attribute that matches the given value
        :param str value: string to look up
        :return: the state object attribute that matches the string
        :rtype: EnumeratedType
        """
        attribute = getattr(cls, value.upper(), None)
        if attribute is None:
            # Call the enum constructor to call _missing_ in case no match
            try:
                return cls(value)
            except ValueError as exc:
                raise ValueError(f'{value} is not a valid {cls.__name__}') from exc
        return attribute


###############
# Storage Enums
###############


class SparkSubmitStorageType(EnumeratedType):
    """Represents the storage backends a job can declare to upload its artifacts"""
    BLOB = 'blob'
    SPARK_INTERACTIVE_SESSION = 'spark_interactive_session'
    DEFAULT_STORAGE_ACCOUNT = 'default_storage_account'
    ADLS_GEN1 = 'adls_gen1'
    ADLS_GEN2 = 'adls_gen2'
    ADLS_GEN2_FOR_OAUTH = 'adls_gen2_for_oauth'
    WEBHDFS = 'webhdfs'
    ADLA_ACCOUNT_DEFAULT_STORAGE = 'adla_account_default_storage'

    @classmethod
    def get_default(cls) -> 'SparkSubmitStorageType':
        return cls.BLOB

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        value = value.lower()
        # convert hyphens to underscores
        value = value.replace('-', '_')
        for member in cls:
            if member.value.lower() == value:
                return member
        return None


###############
# Message Enums
###############


class MessageInfoType(EnumeratedType):
    """Categories of the progress messages written to an event sink"""
    INFO = 'info'
    WARNING = 'warning'
    ERROR = 'error'
    LOG = 'log'
    HYPERLINK = 'hyperlink'

    @classmethod
    def get_default(cls) -> 'MessageInfoType':
        return cls.INFO


class ComputeState(EnumeratedType):
    """Lifecycle states reported for a workspace or a Spark compute"""
    RUNNING = 'running'
    PROVISIONING = 'provisioning'
    STOPPED = 'stopped'
    DELETING = 'deleting'
    FAILED = 'failed'
    UNKNOWN = 'unknown'

    @classmethod
    def get_default(cls) -> 'ComputeState':
        return cls.UNKNOWN

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        value = value.lower()
        for member in cls:
            if member.value == value:
                return member
        # remote services may report states this client does not know yet
        return cls.UNKNOWN
