# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import os
import typing

import dacite

import ci.util

'''
Execution context. Filled upon invocation of cli_gen.py, read by submodules
'''

args = None # the parsed command line arguments
cfg = None # initialised upon importing this module

USER_CFG_FILE_NAME = '.registry-ingress.cfg'


@dataclasses.dataclass
class TerminalCfg:
    output_columns: typing.Optional[int] = None
    terminal_type: typing.Optional[str] = None


@dataclasses.dataclass
class KubeCfg:
    kubeconfig: typing.Optional[str] = None # path to a kubeconfig file
    kubectl_executable: typing.Optional[str] = None


@dataclasses.dataclass
class GlobalConfig:
    terminal: typing.Optional[TerminalCfg] = None
    kube: typing.Optional[KubeCfg] = None


def merge_cfgs(ctor, left, right):
    if not left or not right:
        return left or right # nothing to merge

    left_dict = dataclasses.asdict(left)

    # do not overwrite existing values w/ None
    def none_or_empty(v):
        if v is None or v == () or v == [] or v == '':
            return True
        return False

    right_dict = {k: v for k,v in dataclasses.asdict(right).items() if not none_or_empty(v)}
    if not right_dict:
        return left

    merged = ci.util.merge_dicts(left_dict, right_dict)

    return dacite.from_dict(
        data_class=ctor,
        data=merged,
        config=dacite.Config(cast=[int]),
    )


def merge_global_cfg(left: GlobalConfig, right: GlobalConfig):
    merged_cfg = GlobalConfig(
        terminal=merge_cfgs(TerminalCfg, left.terminal, right.terminal),
        kube=merge_cfgs(KubeCfg, left.kube, right.kube),
    )

    return merged_cfg


def _config_from_env():
    env = os.environ

    terminal_config = TerminalCfg(
        output_columns=int(columns) if (columns := env.get('COLUMNS', '')).isdigit() else None,
        terminal_type=env.get('TERM'),
    )

    if kubeconfig := env.get('KUBECONFIG'):
        kube_cfg = KubeCfg(kubeconfig=kubeconfig)
    else:
        kube_cfg = None

    return GlobalConfig(
        terminal=terminal_config,
        kube=kube_cfg,
    )


def _config_from_file(cfg_file_path: str):
    raw = ci.util.parse_yaml_file(cfg_file_path) or {}

    return dacite.from_dict(
        data_class=GlobalConfig,
        data=raw,
        config=dacite.Config(cast=[int]),
    )


def _config_from_user_home():
    cfg_file_path = os.path.join(os.path.expanduser('~'), USER_CFG_FILE_NAME)
    if not os.path.isfile(cfg_file_path):
        return None

    return _config_from_file(cfg_file_path)


def _config_from_parsed_argv():
    if not args:
        return None

    cfg_from_argv = None
    if cfg_file := getattr(args, 'cfg_file', None):
        cfg_from_argv = _config_from_file(ci.util.existing_file(cfg_file))

    if kubeconfig := getattr(args, 'kubeconfig', None):
        kube_cfg = KubeCfg(kubeconfig=kubeconfig)
        if cfg_from_argv:
            cfg_from_argv = merge_global_cfg(cfg_from_argv, GlobalConfig(kube=kube_cfg))
        else:
            cfg_from_argv = GlobalConfig(kube=kube_cfg)

    return cfg_from_argv


def load_config():
    global cfg
    cfg = GlobalConfig()

    additional_cfgs = (
        _config_from_user_home(),
        _config_from_env(),
        _config_from_parsed_argv(),
    )

    for additional_cfg in additional_cfgs:
        if not additional_cfg:
            continue

        cfg = merge_global_cfg(cfg, additional_cfg)

    return cfg


load_config()
