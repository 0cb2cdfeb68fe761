"""
Test suite for txn-group-core

Contains:
- tests/unit/          : Unit tests for codec, digests, assignment, verification,
                         segmentation and conformance vectors
"""
