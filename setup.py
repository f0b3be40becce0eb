import os
import re

from setuptools import find_packages, setup


def get_version():
    with open(os.path.join(os.path.dirname(__file__), 'src', 'karyotrack', '__init__.py')) as fh:
        return re.search(r"__version__ = '([^']+)'", fh.read()).group(1)


VERSION = get_version()


def parse_md_readme():
    try:
        with open('README.md', 'r') as fh:
            return fh.read()
    except OSError:
        return ''


TEST_REQS = [
    'coverage>=4.2',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'braceexpand==0.1.2',
    'colour',
    'pandas>=1.1',
    'requests>=2.20',
    'snakemake>=6.1.1',
]

DEPLOY_REQS = ['twine', 'wheel']


setup(
    name='karyotrack',
    version='{}'.format(VERSION),
    package_dir={'': 'src'},
    packages=find_packages('src', exclude=['tests']),
    package_data={'karyotrack': ['schemas/*.json']},
    include_package_data=True,
    description='Annotation ingestion and layout for chromosome ideograms',
    long_description=parse_md_readme(),
    long_description_content_type='text/markdown',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS + DEPLOY_REQS,
        'deploy': DEPLOY_REQS,
    },
    tests_require=TEST_REQS,
    python_requires='>=3.7',
    test_suite='tests',
    entry_points={'console_scripts': ['karyotrack = karyotrack.main:main']},
)
