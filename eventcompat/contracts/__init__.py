"""Contracts package.

Public event contracts: CloudEvent type identifiers, their legacy (v1)
counterparts, and strict structured-mode envelope validation.
"""
