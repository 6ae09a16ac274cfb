"""Flower shop order alerts backend.

Regular package so ``app`` never resolves to an unrelated namespace package
installed in site-packages.
"""
