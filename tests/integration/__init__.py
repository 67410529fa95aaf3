# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Integration tests running the harness end to end."""
