# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Integration tests for whole resolution passes over shader projects."""
