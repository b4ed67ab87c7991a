#!/usr/bin/env python3
"""Test runner script for running pytest programmatically."""

import sys

import pytest

sys.exit(pytest.main(["tests/", "-v", "--cov=gpeople_connector"]))
