# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

from setuptools import setup, find_packages
import re

with open('README.rst', 'rb') as f:
    install = f.read().decode('utf-8')

with open('CHANGELOG.rst', 'rb') as f:
    changelog = f.read().decode('utf-8')

with open('pfcore/_version.py', 'rb') as f:
    version = re.search(r'__version__ = "(.*)"', f.read().decode('utf-8')).group(1)

classifiers = [
    'Development Status :: 4 - Beta',
    'Environment :: Console',
    'Intended Audience :: Developers',
    'Intended Audience :: Education',
    'Intended Audience :: Science/Research',
    'License :: OSI Approved :: BSD License',
    'Natural Language :: English',
    'Operating System :: OS Independent',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3']

long_description = '\n\n'.join((install, changelog))

setup(
    name='pfcore',
    version=version,
    author='Leon Thurner, Alexander Scheidler',
    author_email='leon.thurner@iee.fraunhofer.de, alexander.scheidler@iee.fraunhofer.de',
    description='Power flow solution engine with reusable sparse factorizations.',
    long_description=long_description,
    long_description_content_type='text/x-rst',
    url='http://www.pandapower.org',
    license='BSD',
    python_requires='>=3.9',
    install_requires=["pandas>=1.0",
                      "scipy",
                      "numpy",
                      "numba"],
    extras_require={
        "test": ["pytest", "pytest-xdist"]},
    packages=find_packages(include=["pfcore", "pfcore.*"]),
    include_package_data=True,
    classifiers=classifiers
)
