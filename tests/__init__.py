# -*- coding: ascii -*-
"""Test package for nounicode."""
