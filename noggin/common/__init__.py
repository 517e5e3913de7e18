# -*- coding: utf-8 -*-
"""
noggin/common
~~~~~~~~~~~~~

Common code in noggin.
"""
