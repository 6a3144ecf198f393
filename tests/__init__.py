"""
policy-authorization test suite.

This package contains tests for:
- Subject resolution and pre-check coercion
- Policy base class and rule lookup
- Policy registry
- Ability evaluation
- AbilityFactory
- End-to-end scenarios
"""
