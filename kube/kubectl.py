# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging
import os
import subprocess

from collections import namedtuple

from ensure import ensure_annotations

from ci.util import which

logger = logging.getLogger(__name__)

KubectlResult = namedtuple('KubectlResult', ['exit_code', 'stdout', 'stderr'])


def kubectl(
    *args: str,
    kubeconfig: str=None,
    executable: str=None,
) -> KubectlResult:
    '''runs kubectl with the given arguments and returns its exit code and captured output.

    A non-zero exit code is _not_ treated as an error; callers are expected to inspect
    the returned `KubectlResult`.
    '''
    kubectl_executable = which(executable or 'kubectl')

    env = os.environ.copy()
    if kubeconfig:
        env['KUBECONFIG'] = kubeconfig

    logger.debug(f'running {kubectl_executable} {" ".join(args)}')
    result = subprocess.run(
        [kubectl_executable, *args],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        universal_newlines=True,
        env=env,
    )

    return KubectlResult(
        exit_code=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


@ensure_annotations
def apply(manifest_path: str, **kwargs) -> KubectlResult:
    return kubectl('apply', '-f', manifest_path, **kwargs)
