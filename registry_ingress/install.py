# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging
import os
import tempfile
import typing

import kube.kubectl
from registry_ingress.manifest import (
    IngressConfig,
    LETSENCRYPT_PRODUCTION,
    NETWORKING_V1_API_VERSION,
    render,
)

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = 'temp_registry_ingress.yaml'

REGISTRY_INGRESS_INFO_TEMPLATE = '''\
# You will need to ensure that your domain points to your cluster and is
# accessible through ports 80 and 443.
#
# This is used to validate your ownership of this domain by LetsEncrypt
# and then you can use https with your installation.

# Ingress to your domain has been installed for the Registry
# to see the ingress record run
kubectl get -n {namespace} ingress docker-registry

# Check the cert-manager logs with:
kubectl logs -n cert-manager deploy/cert-manager

# A cert-manager Issuer has been installed into the provided
# namespace - to see the resource run
kubectl describe -n {namespace} Issuer {issuer_name}

# To check the status of your certificate you can run
kubectl describe -n {namespace} Certificate docker-registry

# It may take a while to be issued by LetsEncrypt, in the meantime a
# self-signed cert will be installed'''

THANKS_FOR_USING = 'Thanks for using registry-ingress!'


def info_msg(
    namespace: str='<installed-namespace>',
    issuer_name: str=LETSENCRYPT_PRODUCTION.name,
) -> str:
    return REGISTRY_INGRESS_INFO_TEMPLATE.format(
        namespace=namespace,
        issuer_name=issuer_name,
    )


def install_msg(config: IngressConfig) -> str:
    return '\n'.join((
        '=======================================================================',
        '= Docker Registry Ingress and cert-manager Issuer have been installed =',
        '=======================================================================',
        '',
        info_msg(namespace=config.namespace, issuer_name=config.issuer().name),
        '',
        THANKS_FOR_USING,
    ))


class ValidationError(ValueError):
    pass


class ApplyError(RuntimeError):
    def __init__(self, exit_code: int, stderr: str):
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(
            'Unable to apply YAML files.\n'
            'Have you got the Registry running and cert-manager 0.11.0 or higher installed? '
            f'{stderr}'
        )


def validate(
    domain: str,
    email: str,
    ingress_class: str,
):
    if not email or not domain:
        raise ValidationError(
            'both --email and --domain flags should be set and not empty, please set these values'
        )
    if not ingress_class:
        raise ValidationError('--ingress-class must be set')


def write_manifest(manifest: bytes, manifest_dir: str=None) -> str:
    '''
    writes the given manifest to a well-known file name in the given directory (defaults to
    the system's temporary directory) and returns the path. The file is not removed.
    '''
    if not manifest_dir:
        manifest_dir = tempfile.gettempdir()

    manifest_path = os.path.join(manifest_dir, MANIFEST_FILE_NAME)
    with open(manifest_path, 'wb') as f:
        f.write(manifest)

    return manifest_path


def install_registry_ingress(
    domain: str,
    email: str,
    api_versions: typing.Callable[[], typing.Collection[str]],
    apply_manifest: typing.Callable[[str], kube.kubectl.KubectlResult],
    ingress_class: str='nginx',
    namespace: str='default',
    max_size: str='200m',
    staging: bool=False,
    manifest_dir: str=None,
) -> str:
    '''
    renders the registry ingress manifest for the cluster reachable via the passed
    collaborators, and applies it.

    @param api_versions: returns the API versions served by the target cluster
    @param apply_manifest: applies the manifest at the given path, returning kubectl's result
    @returns the path of the applied manifest
    '''
    validate(domain=domain, email=email, ingress_class=ingress_class)

    networking_v1 = NETWORKING_V1_API_VERSION in api_versions()
    logger.debug(f'{NETWORKING_V1_API_VERSION} available: {networking_v1}')

    config = IngressConfig(
        domain=domain,
        email=email,
        ingress_class=ingress_class,
        namespace=namespace,
        max_size=max_size,
        staging=staging,
        networking_v1=networking_v1,
    )

    try:
        manifest = render(config)
    except Exception:
        logger.error(
            'Unable to install the application. '
            'Could not build the templated yaml file for the resources'
        )
        raise

    try:
        manifest_path = write_manifest(manifest, manifest_dir=manifest_dir)
    except OSError:
        logger.error('Unable to save generated yaml file into the temporary directory')
        raise

    logger.info(f'applying {manifest_path} (issuer: {config.issuer().name})')
    try:
        result = apply_manifest(manifest_path)
    except Exception as e:
        logger.error(f'failed to run kubectl: {e}')
        raise

    if result.exit_code != 0:
        raise ApplyError(exit_code=result.exit_code, stderr=result.stderr)

    print(install_msg(config))

    return manifest_path
