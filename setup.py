#!/usr/bin/python3
# Setup file for bgit
# Copyright (C) 2026 The bgit Authors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

from setuptools import setup

setup(
    package_data={"bgit": ["py.typed"]},
)
