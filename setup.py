# -*- coding: utf-8 -*-
import os
import subprocess
import warnings

from setuptools import setup


def get_revision():
    # XXX: Use annotated (or signed) tags with names void of '-' to mark releases
    try:
        tag = subprocess.check_output([
            'git', 'describe', '--long', '--dirty=-dev0'
        ]).decode('utf-8')[:-1].split('-')
        rev = []
        if tag[1] != '0':
            rev.append(tag[1])
        if len(tag) > 3:
            rev.append(tag[3])
        return '.'.join(rev)
    except (subprocess.CalledProcessError, FileNotFoundError):
        warnings.warn("Revision number couldn't be determined")
        return None


def get_version(version_file):
    ver_ns = {}
    with open(version_file) as file:
        exec(file.read(), ver_ns)
    rev = get_revision()
    return ver_ns["__version__"] if not rev else ''.join((ver_ns["__version__"], 'rc', rev))


SRC = 'src'
NAME = 'landscape_rg'

version = get_version(os.path.join(SRC, NAME, '_version.py'))

with open('README.md', 'r') as fp:
    readme = fp.read()

requires = ['Pillow>=9.1', 'numpy', 'opensimplex>=0.4', 'scipy', 'structlog']
extras = {'test': ['pytest']}

# IDEA: use `setup.cfg`

setup(
    name=NAME,
    version=version,
    packages=[NAME],
    package_dir={'': SRC},
    python_requires='>=3.9',
    license='GPLv3',
    platforms=['Linux'],
    author='Ákos Sülyi',
    author_email='sulyi.gbox@gmail.com',
    description='Generates terrain, zones, rivers and roads then places houses, paddies and trees',
    long_description=readme,
    long_description_content_type='text/markdown',
    install_requires=requires,
    extras_require=extras
)
