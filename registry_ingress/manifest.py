# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
renders the kubernetes manifest (an Ingress and a cert-manager Issuer) that exposes a
docker registry via TLS.

Two dialects of the Ingress are supported: `extensions/v1beta1` (removed in k8s 1.22) and
`networking.k8s.io/v1` (available since k8s 1.19). Which one is rendered depends on the API
versions served by the target cluster (see `IngressConfig.networking_v1`).
'''

import dataclasses
import logging
import os

from ensure import ensure_annotations
import mako.exceptions
import mako.lookup

import makoutil

logger = logging.getLogger(__name__)

resources_dir = os.path.join(os.path.abspath(os.path.dirname(__file__)), 'resources')
template_lookup = mako.lookup.TemplateLookup(
    directories=(resources_dir,),
    strict_undefined=True,
)

NETWORKING_V1_API_VERSION = 'networking.k8s.io/v1'

EXTENSIONS_TEMPLATE_NAME = 'ingress_extensions.yaml.mako'
NETWORKING_TEMPLATE_NAME = 'ingress_networking.yaml.mako'

INGRESS_NAME = 'docker-registry'
SERVICE_NAME = 'docker-registry'
SERVICE_PORT = 5000
TLS_SECRET_NAME = 'docker-registry'

NGINX_INGRESS_CLASS = 'nginx'
PROXY_BODY_SIZE_ANNOTATION = 'nginx.ingress.kubernetes.io/proxy-body-size'


class ManifestRenderError(RuntimeError):
    pass


@dataclasses.dataclass(frozen=True)
class AcmeIssuer:
    name: str
    server: str


LETSENCRYPT_PRODUCTION = AcmeIssuer(
    name='letsencrypt-prod-issuer',
    server='https://acme-v02.api.letsencrypt.org/directory',
)
LETSENCRYPT_STAGING = AcmeIssuer(
    name='letsencrypt-staging-issuer',
    server='https://acme-staging-v02.api.letsencrypt.org/directory',
)


@dataclasses.dataclass(frozen=True)
class IngressConfig:
    domain: str
    email: str
    ingress_class: str = NGINX_INGRESS_CLASS
    namespace: str = 'default'
    max_size: str = '200m'
    staging: bool = False
    networking_v1: bool = False # whether the cluster serves networking.k8s.io/v1

    def issuer(self) -> AcmeIssuer:
        if self.staging:
            return LETSENCRYPT_STAGING
        return LETSENCRYPT_PRODUCTION

    def proxy_body_size_annotation(self) -> str:
        '''
        returns the annotation limiting the request body size, or an empty str if the
        ingress class does not understand it (only nginx does)
        '''
        if self.ingress_class != NGINX_INGRESS_CLASS:
            return ''
        return f'{PROXY_BODY_SIZE_ANNOTATION}: {self.max_size}'

    def template_name(self) -> str:
        if self.networking_v1:
            return NETWORKING_TEMPLATE_NAME
        return EXTENSIONS_TEMPLATE_NAME


def template_args(config: IngressConfig) -> dict:
    issuer = config.issuer()
    return {
        'domain': config.domain,
        'email': config.email,
        'ingress_class': config.ingress_class,
        'namespace': config.namespace,
        'issuer_name': issuer.name,
        'issuer_server': issuer.server,
        'proxy_body_size_annotation': config.proxy_body_size_annotation(),
        'ingress_name': INGRESS_NAME,
        'service_name': SERVICE_NAME,
        'service_port': SERVICE_PORT,
        'tls_secret_name': TLS_SECRET_NAME,
    }


@ensure_annotations
def render(config: IngressConfig) -> bytes:
    template_name = config.template_name()

    try:
        with makoutil.template_lock:
            template = template_lookup.get_template(f'/{template_name}')
        rendered = template.render(**template_args(config))
    except (mako.exceptions.MakoException, NameError) as e:
        raise ManifestRenderError(f'failed to render {template_name}: {e}') from e

    logger.debug(f'rendered {template_name} for {config.domain}')
    return rendered.encode('utf-8')
