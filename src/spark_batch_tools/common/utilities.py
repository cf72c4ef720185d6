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

"""Definition of global utilities and helpers methods."""

import datetime
import logging.config
import os
import secrets
import string
import threading
from typing import Optional


class Utils:
    """Utility class used to enclose common helpers and utilities."""

    # spark conf keys holding secrets. Values are never printed as is.
    sensitive_conf_markers = ('fs.azure.account.key', 'fs.azure.sas', 'password', 'secret')

    @classmethod
    def gen_random_string(cls, str_length: int) -> str:
        return ''.join(secrets.choice(string.hexdigits) for _ in range(str_length))

    @classmethod
    def gen_uuid_with_ts(cls, pref: str = None, suffix_len: int = 0) -> str:
        """
        Generate uuid in the form of YYYYmmddHHmmss
        :param pref:
        :param suffix_len:
        :return:
        """
        ts = datetime.datetime.now().astimezone().strftime('%Y%m%d%H%M%S')
        uuid_parts = [] if pref is None else [pref]
        uuid_parts.append(ts)
        if suffix_len > 0:
            uuid_parts.append(cls.gen_random_string(suffix_len))
        return Utils.gen_joined_str('_', uuid_parts)

    @classmethod
    def find_full_tools_env_key(cls, actual_key: str) -> str:
        return f'SPARK_BATCH_TOOLS_{actual_key}'

    @classmethod
    def get_sys_env_var(cls, k: str, def_val=None) -> Optional[str]:
        return os.environ.get(k, def_val)

    @classmethod
    def set_tools_env(cls, k: str, val):
        os.environ[cls.find_full_tools_env_key(k)] = str(val)

    @classmethod
    def get_or_set_tools_env(cls, k: str, default_val=None) -> Optional[str]:
        full_key = cls.find_full_tools_env_key(k)
        current_val = cls.get_sys_env_var(full_key, None)
        if current_val is None or (isinstance(current_val, str) and current_val == ''):
            if default_val is not None:
                cls.set_tools_env(k, default_val)
                return str(default_val)
        return current_val

    @classmethod
    def gen_joined_str(cls, join_elem: str, items) -> str:
        """
        Given a variable length of String arguments (or list), returns a single string
        :param items: the items to be concatenated together. it could be a hybrid of str and lists
        :param join_elem: the character to use as separator of the join
        :return: a single string joining the items
        """
        res_arr = []
        for item in list(filter(lambda i: i is not None, items)):
            if isinstance(item, list):
                # that's an array
                res_arr.extend(list(filter(lambda i: i is not None, item)))
            else:
                res_arr.append(item)
        return join_elem.join(res_arr)

    @classmethod
    def gen_multiline_str(cls, *items) -> str:
        return cls.gen_joined_str(join_elem='\n', items=items)

    @classmethod
    def is_sensitive_conf(cls, conf_key: str) -> bool:
        lowered = conf_key.lower()
        return any(marker in lowered for marker in cls.sensitive_conf_markers)

    @classmethod
    def mask_sensitive_confs(cls, confs: dict, mask: str = 'MY_ACCESS_KEY') -> dict:
        """
        Returns a copy of the spark configurations where credentials are replaced by a mask.
        Used before dumping configurations to the logs or to the console.
        """
        return {
            conf_k: (mask if cls.is_sensitive_conf(conf_k) else conf_v)
            for conf_k, conf_v in confs.items()
        }


class ToolLogging:
    """Holds global utilities used for logging."""

    _logging_lock = threading.Lock()
    _current_debug_state = None

    @classmethod
    def _ensure_configured(cls, debug_enabled: bool = False):
        with cls._logging_lock:
            if cls._current_debug_state == debug_enabled:
                return
            logging.config.dictConfig(cls.get_log_dict({'debug': debug_enabled}))
            cls._current_debug_state = debug_enabled

    @classmethod
    def get_log_dict(cls, args):
        return {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'simple': {
                    'format': '{asctime} {levelname} {run_id_tag} {name}: {message}',
                    'style': '{',
                    'datefmt': '%H:%M:%S',
                },
            },
            'filters': {
                'run_id': {
                    '()': 'spark_batch_tools.common.utilities.RunIdContextFilter'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'simple',
                    'level': 'DEBUG' if args.get('debug') else 'ERROR',
                    'filters': ['run_id']
                },
            },
            'root': {
                'handlers': ['console'],
                'level': 'DEBUG',
            },
        }

    @classmethod
    def enable_debug_mode(cls):
        Utils.set_tools_env('LOG_DEBUG', 'True')

    @classmethod
    def get_and_setup_logger(cls, type_label: str, debug_mode: bool = False):
        debug_env = Utils.get_or_set_tools_env('LOG_DEBUG', debug_mode)
        debug_enabled = str(debug_env).lower() == 'true'

        cls._ensure_configured(debug_enabled)

        logger = logging.getLogger(type_label)
        # the same logger is handed to every instance asking for a type_label. Rebind the
        # FileHandler so that a changed LOG_FILE is honored.
        cls._rebind_file_handler(logger, Utils.get_or_set_tools_env('LOG_FILE'))
        return logger

    @classmethod
    def _rebind_file_handler(cls, logger: logging.Logger, log_file: str) -> None:
        # Remove existing FileHandlers to avoid stale paths and duplicates
        for handler in list(logger.handlers):
            if isinstance(handler, logging.FileHandler):
                logger.removeHandler(handler)
                handler.close()
        if not log_file:
            return
        fh = logging.FileHandler(log_file)
        fh.setLevel(logging.DEBUG)
        fh.addFilter(RunIdContextFilter())
        formatter = logging.Formatter(
            '{asctime} {levelname} {run_id_tag} {name}: {message}',
            style='{',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        fh.setFormatter(formatter)
        logger.addHandler(fh)


class RunIdContextFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """
    Pulls RUN_ID from environment; if absent, the tag is omitted entirely.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        run_id = Utils.get_or_set_tools_env('RUN_ID')
        tag = f' [{run_id}]' if run_id else ''
        setattr(record, 'run_id_tag', tag)
        return True
