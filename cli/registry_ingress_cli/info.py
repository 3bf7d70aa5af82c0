# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''print post-installation instructions'''

from ci.util import CliHint
import registry_ingress.install
import registry_ingress.manifest


def docker_registry_ingress(
    namespace: CliHint(
        short_flag='-n',
        help='The namespace where the registry is installed',
    )='<installed-namespace>',
    staging: bool=False,
):
    '''Show how to inspect an installed registry ingress and its certificate.'''
    if staging:
        issuer = registry_ingress.manifest.LETSENCRYPT_STAGING
    else:
        issuer = registry_ingress.manifest.LETSENCRYPT_PRODUCTION

    print(registry_ingress.install.info_msg(namespace=namespace, issuer_name=issuer.name))
