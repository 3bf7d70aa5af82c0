import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def requirements():
    with open(os.path.join(own_dir, 'requirements.txt')) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            yield line


def test_requirements():
    with open(os.path.join(own_dir, 'requirements.test.txt')) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            yield line


def modules():
    return [
        'ctx',
        'makoutil',
    ]


def packages():
    return [
        'ci',
        'kube',
        'registry_ingress',
        'registry_ingress_cli',
    ]


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='registry-ingress',
    version=version(),
    description='Installs a TLS-enabled Ingress and cert-manager Issuer for a Docker registry',
    python_requires='>=3.10',
    py_modules=modules(),
    packages=packages(),
    package_dir={
        'registry_ingress_cli': 'cli/registry_ingress_cli',
    },
    package_data={
        'registry_ingress': ['resources/*.mako'],
    },
    install_requires=list(requirements()),
    extras_require={
        'test': list(test_requirements()),
    },
    entry_points={
        'console_scripts': [
            'registry-ingress = registry_ingress_cli.cli_gen:main',
        ],
    },
)
