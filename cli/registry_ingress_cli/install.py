# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''install applications into the cluster selected by --kubeconfig (or KUBECONFIG)'''

import logging

from ci.util import CliHint, fail
import kube.ctx
import registry_ingress.install
import registry_ingress.manifest

logger = logging.getLogger(__name__)


def __add_module_command_args(parser):
    parser.add_argument('--kubeconfig', required=False)
    return parser


def docker_registry_ingress(
    domain: CliHint(short_flag='-d', help='Custom Ingress Domain')=None,
    email: CliHint(short_flag='-e', help='Letsencrypt Email')=None,
    ingress_class: CliHint(help='Ingress class to be used such as nginx or traefik')='nginx',
    max_size: CliHint(help='the max size for the ingress proxy')='200m',
    namespace: CliHint(
        short_flag='-n',
        help='The namespace where the registry is installed',
    )='default',
    staging: bool=False,
):
    '''Install registry ingress with TLS.

    Requires cert-manager 0.11.0 or higher installation in the cluster. Please set --domain
    to your custom domain and set --email to your email - this email is used by letsencrypt
    for domain expiry etc.

    example:
      registry-ingress install docker-registry-ingress --domain registry.example.com \\
        --email registry@example.com
    '''
    kube_ctx = kube.ctx.Ctx()

    try:
        registry_ingress.install.install_registry_ingress(
            domain=domain,
            email=email,
            ingress_class=ingress_class,
            namespace=namespace,
            max_size=max_size,
            staging=staging,
            api_versions=kube_ctx.api_versions,
            apply_manifest=kube_ctx.apply,
        )
    except (
        registry_ingress.install.ValidationError,
        registry_ingress.install.ApplyError,
        registry_ingress.manifest.ManifestRenderError,
        OSError,
    ) as e:
        fail(str(e))
