# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import types

import pytest

import ctx as examinee


@pytest.fixture
def clean_ctx(monkeypatch, tmp_path):
    monkeypatch.setattr(examinee, 'args', None)
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.delenv('KUBECONFIG', raising=False)
    monkeypatch.delenv('COLUMNS', raising=False)
    yield tmp_path
    examinee.load_config()


def test_merge_cfgs_does_not_overwrite_with_none():
    left = examinee.KubeCfg(kubeconfig='/left', kubectl_executable='kubectl-left')
    right = examinee.KubeCfg(kubeconfig=None, kubectl_executable='kubectl-right')

    merged = examinee.merge_cfgs(examinee.KubeCfg, left, right)

    assert merged == examinee.KubeCfg(kubeconfig='/left', kubectl_executable='kubectl-right')


def test_merge_cfgs_with_absent_side():
    cfg = examinee.KubeCfg(kubeconfig='/path')

    assert examinee.merge_cfgs(examinee.KubeCfg, None, cfg) is cfg
    assert examinee.merge_cfgs(examinee.KubeCfg, cfg, None) is cfg


def test_load_config_from_env(clean_ctx, monkeypatch):
    monkeypatch.setenv('KUBECONFIG', '/env/kubeconfig')
    monkeypatch.setenv('COLUMNS', '120')

    cfg = examinee.load_config()

    assert cfg.kube.kubeconfig == '/env/kubeconfig'
    assert cfg.terminal.output_columns == 120


def test_load_config_ignores_malformed_columns(clean_ctx, monkeypatch):
    monkeypatch.setenv('COLUMNS', 'wide')

    cfg = examinee.load_config()

    assert cfg.terminal.output_columns is None


def test_user_cfg_file_is_overruled_by_env(clean_ctx, monkeypatch):
    cfg_file = clean_ctx / examinee.USER_CFG_FILE_NAME
    cfg_file.write_text(
        'kube:\n'
        '  kubeconfig: /home/kubeconfig\n'
        '  kubectl_executable: /opt/bin/kubectl\n'
    )

    cfg = examinee.load_config()
    assert cfg.kube.kubeconfig == '/home/kubeconfig'
    assert cfg.kube.kubectl_executable == '/opt/bin/kubectl'

    monkeypatch.setenv('KUBECONFIG', '/env/kubeconfig')
    cfg = examinee.load_config()
    assert cfg.kube.kubeconfig == '/env/kubeconfig'
    assert cfg.kube.kubectl_executable == '/opt/bin/kubectl'


def test_parsed_argv_has_precedence(clean_ctx, monkeypatch):
    monkeypatch.setenv('KUBECONFIG', '/env/kubeconfig')
    cfg_file = clean_ctx / 'explicit.cfg'
    cfg_file.write_text('kube:\n  kubectl_executable: /explicit/kubectl\n')

    monkeypatch.setattr(
        examinee,
        'args',
        types.SimpleNamespace(cfg_file=str(cfg_file), kubeconfig='/argv/kubeconfig'),
    )

    cfg = examinee.load_config()

    assert cfg.kube.kubeconfig == '/argv/kubeconfig'
    assert cfg.kube.kubectl_executable == '/explicit/kubectl'
