# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import logging

import kubernetes.client
from kubernetes import config, client
from kubernetes.config.config_exception import ConfigException

from ci.util import ctx as global_ctx, fail, existing_file
import kube.kubectl

logger = logging.getLogger(__name__)


class Ctx:
    '''
    handles the execution context of kubernetes-api calls and kubectl invocations.
    Most prominently the retrieval of the 'kubeconfig' to use, which is
    either passed via CLI (--kubeconfig), configured in the user's cfg file, or
    passed via env var KUBECONFIG (in descending order of precedence).
    '''

    def __init__(self, kubeconfig_path: str=None):
        self._kubeconfig_path = kubeconfig_path

    def _kube_cfg(self):
        cfg = global_ctx().cfg
        if not cfg:
            return None
        return cfg.kube

    def kubeconfig_path(self):
        kubeconfig = self._kubeconfig_path

        if not kubeconfig and (kube_cfg := self._kube_cfg()):
            kubeconfig = kube_cfg.kubeconfig

        args = global_ctx().args
        if args and hasattr(args, 'kubeconfig') and args.kubeconfig:
            kubeconfig = args.kubeconfig

        if not kubeconfig:
            return None

        return existing_file(kubeconfig)

    def kubectl_executable(self):
        if (kube_cfg := self._kube_cfg()) and kube_cfg.kubectl_executable:
            return kube_cfg.kubectl_executable
        return 'kubectl'

    def get_kubecfg(self) -> kubernetes.client.ApiClient:
        kubeconfig = self.kubeconfig_path()
        if kubeconfig:
            return config.new_client_from_config(config_file=kubeconfig)

        # same lookup as kubectl: ~/.kube/config, then in-cluster service account
        try:
            return config.new_client_from_config()
        except ConfigException as ce:
            logger.debug(f'no default kubeconfig: {ce}')

        configuration = client.Configuration()
        try:
            config.load_incluster_config(client_configuration=configuration)
        except ConfigException as ce:
            logger.debug(f'not running in-cluster: {ce}')
            fail(
                'no kubeconfig found: pass --kubeconfig, set KUBECONFIG env var or '
                'create ~/.kube/config'
            )
        return client.ApiClient(configuration=configuration)

    def create_core_api(self):
        cfg = self.get_kubecfg()
        return client.CoreApi(cfg)

    def create_apis_api(self):
        cfg = self.get_kubecfg()
        return client.ApisApi(cfg)

    def api_versions(self) -> frozenset:
        '''
        returns the API versions served by the cluster, in the same notation as
        `kubectl api-versions` (e.g. `v1`, `apps/v1`, `networking.k8s.io/v1`)
        '''
        core_versions = self.create_core_api().get_api_versions()
        group_list = self.create_apis_api().get_api_versions()

        api_versions = set(core_versions.versions or ())
        for group in group_list.groups or ():
            for version in group.versions or ():
                api_versions.add(version.group_version)

        logger.debug(f'cluster serves {len(api_versions)} API versions')
        return frozenset(api_versions)

    def apply(self, manifest_path: str) -> kube.kubectl.KubectlResult:
        return kube.kubectl.apply(
            manifest_path,
            kubeconfig=self.kubeconfig_path(),
            executable=self.kubectl_executable(),
        )
