# SPDX-License-Identifier: Apache-2.0
"""popglobe: interactive globe and map of world demographic statistics."""

__version__ = "0.1.0"
