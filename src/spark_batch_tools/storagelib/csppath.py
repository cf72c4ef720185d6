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
Abstract representation of a file path that can access local/URI values.
The implementation uses a dict registry to register an implementation per storage
protocol. The path representation is built on top of pyArrow FS API, so the job artifacts
can be copied to the upload destination without writing a full storage client.
"""

import abc
from collections import defaultdict
from functools import cached_property
from typing import Union, Type, TypeVar, Any, Dict, Callable, Optional, TYPE_CHECKING

from pyarrow.fs import FileType, FileSystem, FileInfo
from typing_extensions import Self

from ..exceptions import InvalidProtocolPrefixError, FSMismatchError
from ..utils.util import get_path_as_uri

if TYPE_CHECKING:
    from .cspfs import CspFs


class CspPathImplementation:
    """
    A metaclass implementation that describes the behavior of the path class
    """
    name: str
    _path_class: Type['CspPath'] = None
    _fs_class: Type['CspFs'] = None
    _fslib_class: Type['FileSystem'] = None

    @property
    def fs_class(self) -> Type['CspFs']:
        return self._fs_class

    @fs_class.setter
    def fs_class(self, clazz):
        self._fs_class = clazz

    @property
    def path_class(self) -> Type['CspPath']:
        return self._path_class

    @path_class.setter
    def path_class(self, clazz):
        self._path_class = clazz

    @property
    def fslib_class(self) -> Type['FileSystem']:
        return self._fslib_class

    @fslib_class.setter
    def fslib_class(self, clazz):
        self._fslib_class = clazz


path_impl_registry: Dict[str, CspPathImplementation] = defaultdict(CspPathImplementation)

T = TypeVar('T')
CspPathT = TypeVar('CspPathT', bound='CspPath')


def register_path_class(key: str) -> Callable[[Type[CspPathT]], Type[CspPathT]]:
    def decorator(cls: Type[CspPathT]) -> Type[CspPathT]:
        if not issubclass(cls, CspPath):
            raise TypeError('Only subclasses of CspPath can be registered.')
        path_impl_registry[key].path_class = cls
        cls._path_meta = path_impl_registry[key]  # pylint: disable=protected-access
        return cls

    return decorator


class CspPathMeta(abc.ABCMeta):
    """
    Class meta used to add hooks to the type of the CspPath as needed.
    This is used typically to dynamically assign any class type as subclass to CspPath.
    """

    def __call__(
            cls: Type[T], entry_path: Union[str, CspPathT], *args: Any, **kwargs: Any
    ) -> Union[T, CspPathT]:
        if not issubclass(cls, CspPath):
            raise TypeError(
                f'Only subclasses of {CspPath.__name__} can be instantiated from its meta class.'
            )
        if isinstance(entry_path, str):
            # convert the string to uri if it is not
            entry_path = get_path_as_uri(entry_path)
        # Dispatch to subclass if base CspPath
        if cls is CspPath:
            for path_clz_entry in path_impl_registry.values():
                path_class = path_clz_entry.path_class
                if path_class is not None and path_class.is_valid_csppath(
                        entry_path, raise_on_error=False
                ):
                    new_obj = object.__new__(path_class)
                    path_class.__init__(new_obj, entry_path, *args, **kwargs)
                    return new_obj
        new_obj = object.__new__(cls)
        cls.__init__(new_obj, entry_path, *args, **kwargs)  # type: ignore[type-var]
        return new_obj


class CspPath(metaclass=CspPathMeta):
    """
    Base class for storage systems, based on pyArrow's FileSystem. The class provides support for
    URI/local file path like "wasbs://", "file://".

    Instances represent an absolute path in a storage with filesystem path semantics, and for basic
    operations like streaming, and opening a file for read/write operations.

    Examples
    --------
    Create a new path subclass from a local path:

    >>> local_path = CspPath('/tmp/jobs/spark-app.jar')
    <spark_batch_tools.storagelib.local.localpath.LocalPath object at ...>

    Build the destination of an artifact:

    >>> dest = root_folder.create_sub_path('spark-app.jar')
    """
    protocol_prefix: str
    _path_meta: CspPathImplementation

    @classmethod
    def is_valid_csppath(cls, path: Union[str, 'CspPath'], raise_on_error: bool = False) -> bool:
        valid = cls.is_protocol_prefix(str(path))
        if raise_on_error and not valid:
            raise InvalidProtocolPrefixError(
                f'"{path}" is not a valid path since it does not start with "{cls.protocol_prefix}"'
            )
        return valid

    def __init__(
            self,
            entry_path: Union[str, Self],
            fs_obj: Optional['CspFs'] = None
    ) -> None:
        self.is_valid_csppath(entry_path, raise_on_error=True)
        self._fpath = str(entry_path)
        if fs_obj is None:
            if isinstance(entry_path, CspPath):
                fs_obj = entry_path.fs_obj
            else:
                fs_obj = self._path_meta.fs_class.get_default_client()
        if not isinstance(fs_obj, self._path_meta.fs_class):
            raise FSMismatchError(
                f'Client of type [{fs_obj.__class__}] is not valid for path of type '
                f'[{self.__class__}]; must be instance of [{self._path_meta.fs_class}], or '
                f'None to use default client for this path class.'
            )
        self.fs_obj = fs_obj

    def __str__(self) -> str:
        return self._fpath

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self._fpath!r})'

    @classmethod
    def is_protocol_prefix(cls, value: str) -> bool:
        return value.lower().startswith(cls.protocol_prefix.lower())

    @cached_property
    def no_scheme(self) -> str:
        """
        Get the path without the scheme. i.e., file:///path/to/file returns /path/to/file
        :return: the full url without scheme part.
        """
        return self._fpath[len(self.protocol_prefix):]

    def _pull_file_info(self) -> FileInfo:
        return self.fs_obj.get_file_info(self.no_scheme)

    @cached_property
    def file_info(self) -> FileInfo:
        return self._pull_file_info()

    def is_file(self):
        return self.file_info.is_file

    def is_dir(self):
        return self.file_info.type == FileType.Directory

    def exists(self) -> bool:
        f_info = self.file_info
        return f_info.type in [FileType.File, FileType.Directory]

    def base_name(self) -> str:
        return self.file_info.base_name

    def create_dirs(self):
        self.fs_obj.create_dir(self.no_scheme)
        # force the file information object to be retrieved again by invalidating the cached property
        if 'file_info' in self.__dict__:
            del self.__dict__['file_info']

    def open_input_stream(self):
        return self.fs_obj.open_input_stream(self.no_scheme)

    def create_sub_path(self, relative: str) -> 'CspPath':
        """
        Given a relative path, it will return a new CspPath object with the relative path appended to
        the current path. This is just for building a path, and it does not call mkdirs.
        The new path shares the file system client of the current path.
        For example,
        ```py
        root_folder = CspPath('wasbs://jobs@account.blob.core.windows.net/SparkSubmission')
        new_path = root_folder.create_sub_path('compute_00')
        print(new_path)
        >> wasbs://jobs@account.blob.core.windows.net/SparkSubmission/compute_00
        ```
        :param relative: A relative path to append to the current path.
        :return: A new path without creating the directory/file.
        """
        postfix = '/'
        sub_path = relative
        if relative.startswith('/'):
            sub_path = relative[1:]
        if self._fpath.endswith('/'):
            postfix = ''
        new_path = f'{self._fpath}{postfix}{sub_path}'
        return self.fs_obj.create_as_path(new_path)

    def to_str_format(self) -> str:
        """
        Returns the string representation of the path in a way compatible with
        the remaining functionalities in the code.
        This is useful for logging and debugging purposes.
        :return: The string representation of the path.
        """
        return str(self)
