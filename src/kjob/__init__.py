# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

"""Run one Kubernetes Job from a template, wait for it, and reap it."""

__version__ = "0.1.0"
