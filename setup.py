# -*- coding: utf-8 -*-
from setuptools import setup, find_packages

long_description = "Streaming technical analysis indicators for Python 3, one value at a time"

setup(
    name = "pandas_ta_stream",
    packages = find_packages(include=["pandas_ta_stream", "pandas_ta_stream.*"]),
    version = "0.1.0",
    description=long_description,
    long_description=long_description,
    url = "https://github.com/glar1900/pandas-ta-stateful",
    keywords = ['technical analysis', 'python3', 'pandas', 'streaming'],
    license="The MIT License (MIT)",
    classifiers = [
        'Programming Language :: Python :: 3.8',
        'Development Status :: 3 - Alpha',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Intended Audience :: Developers',
        'Intended Audience :: Financial and Insurance Industry',
        'Topic :: Office/Business :: Financial :: Investment',
    ],
    python_requires='>=3.8',
    install_requires=['pandas'],

    # List additional groups of dependencies here (e.g. development dependencies).
    # You can install these using the following syntax, for example:
    # $ pip install -e .[dev,test]
    extras_require = {
        'dev': ['numpy', 'pytest', 'jupyterlab'],
        'test': ['numpy', 'pytest'],
    },
)
