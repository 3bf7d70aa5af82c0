# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import sys
import unittest

import pytest

from test._test_utils import capture_out

from ci.util import Failure
import ci.util as examinee


class UtilTest(unittest.TestCase):
    def test_fail(self):
        with capture_out() as (stdout, stderr):
            with self.assertRaises(Failure):
                examinee.fail(msg='foo bar')

        self.assertEqual('ERROR: foo bar', stderr.getvalue().strip())
        self.assertTrue(len(stdout.getvalue()) == 0)

    def test_not_empty(self):
        result = examinee.not_empty('foo')

        self.assertEqual('foo', result)

        forbidden = ['', None, [], ()]

        for value in forbidden:
            with capture_out() as (stdout, stderr):
                with self.assertRaises(Failure):
                    examinee.not_empty(value)
            self.assertIn('must not be empty', stderr.getvalue().strip())

    def test_not_none(self):
        self.assertEqual('', examinee.not_none(''))

        with capture_out():
            with self.assertRaises(Failure):
                examinee.not_none(None)

    def test_existing_file(self):
        existing_file = sys.executable

        result = examinee.existing_file(existing_file)

        self.assertEqual(existing_file, result)

        with capture_out() as (stdout, stderr):
            with self.assertRaises(Failure):
                examinee.existing_file('no such file, I hope')
        self.assertIn('not an existing file', stderr.getvalue().strip())

    def test_which(self):
        with capture_out() as (stdout, stderr):
            with self.assertRaises(Failure):
                examinee.which('no-such-executable-i-hope')
        self.assertIn('not found in PATH', stderr.getvalue())


def test_merge_dicts():
    base = {'a': 1, 'nested': {'x': 'base', 'y': 'base'}}
    other = {'b': 2, 'nested': {'y': 'other'}}

    merged = examinee.merge_dicts(base, other)

    assert merged == {'a': 1, 'b': 2, 'nested': {'x': 'base', 'y': 'other'}}
    # arguments must remain unmodified
    assert base == {'a': 1, 'nested': {'x': 'base', 'y': 'base'}}
    assert other == {'b': 2, 'nested': {'y': 'other'}}


def test_count_elements():
    assert examinee._count_elements('scalar') == 1
    assert examinee._count_elements([1, 2, {'a': 3}]) == 3

    with pytest.raises(ValueError):
        examinee._count_elements(list(range(20)), max_elements_count=10)


def test_parse_yaml_file(tmp_path):
    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text('kube:\n  kubeconfig: /some/path\n')

    assert examinee.parse_yaml_file(cfg_file) == {'kube': {'kubeconfig': '/some/path'}}


def test_cli_hint():
    hint = examinee.CliHint(short_flag='-d', help='a domain')

    assert hint.typehint is str
    assert hint.short_flag == '-d'
    assert hint.argparse_args == {'help': 'a domain'}
