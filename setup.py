from setuptools import setup, find_packages
from pathlib import Path

package_name = 'flowrule-operator'
description = (
    'A Kubernetes Operator that publishes rate-limiting flow rules to Redis '
    'whenever a watched pod appears.'
)
author = 'Association of Universities for Research in Astronomy'
author_email = 'sqre-admin@lists.lsst.org'
license = 'MIT'
url = 'https://github.com/lsst-sqre/flowrule-operator'
pypi_classifiers = [
    'Development Status :: 4 - Beta',
    'License :: OSI Approved :: MIT License',
    'Programming Language :: Python :: 3.10'
]
keywords = ['lsst']
readme = Path(__file__).parent / 'README.rst'

# Core dependencies
install_requires = [
    'kopf>=1.37',
    'kubernetes>=29.0.0',
    'redis>=5.0.0',
    'structlog>=23.1.0',
    'typer>=0.12.0',
]

# Test dependencies
tests_require = [
    'pytest>=7.4',
]
tests_require += install_requires

# Optional dependencies (like for dev)
extras_require = {
    # For development environments
    'dev': tests_require,
    'test': tests_require,
}

setup(
    name=package_name,
    version='0.1.0',
    description=description,
    long_description=readme.read_text(),
    author=author,
    author_email=author_email,
    url=url,
    license=license,
    classifiers=pypi_classifiers,
    keywords=keywords,
    package_dir={'': 'src'},
    packages=find_packages('src', exclude=['docs', 'tests']),
    python_requires='>=3.10',
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        'console_scripts': [
            'flowrule-operator = flowruleoperator.cli:main',
        ],
    },
    include_package_data=True
)
