# SPDX-License-Identifier: Apache-2.0
"""
JSON Schema Conformance Harness Tests

Unit tests for the harness modules plus the pytest-driven suite runner in
tests/suite.
"""
