"""
Tests for canonical JSON output and fingerprints.

These tests verify:
- Equivalent expressions produce byte-for-byte identical JSON
- Fingerprints follow equivalence
- Expressions load back from JSON documents
"""

import json

import pytest

from endorsement_policy.codec.canonicalizer import (
    canonicalize_json,
    expression_from_json,
    policy_fingerprint,
    to_canonical_dict,
    to_canonical_json_pretty,
    to_canonical_json_string,
)
from endorsement_policy.core.errors import ValidationError
from endorsement_policy.domain.expression import And, AtLeast, Or
from tests.conftest import org


class TestCanonicalizeJson:
    """Test key ordering of plain JSON objects."""

    @pytest.mark.anyio
    async def test_sorts_nested_keys(self):
        result = canonicalize_json({"z": {"b": 1, "a": 2}, "a": [{"y": 1, "x": 2}]})

        assert list(result.keys()) == ["a", "z"]
        assert list(result["z"].keys()) == ["a", "b"]
        assert list(result["a"][0].keys()) == ["x", "y"]

    @pytest.mark.anyio
    async def test_preserves_list_order(self):
        assert canonicalize_json([3, 1, 2]) == [3, 1, 2]


class TestCanonicalExpression:
    """Test canonical forms of expressions."""

    @pytest.mark.anyio
    async def test_principal_string(self):
        assert (
            to_canonical_json_string(org(1))
            == '{"kind":"PRINCIPAL","msp_id":"ORG1","role":"PEER"}'
        )

    @pytest.mark.anyio
    async def test_children_sorted(self):
        result = to_canonical_dict(Or([org(2), org(1)]))
        assert [child["msp_id"] for child in result["children"]] == ["ORG1", "ORG2"]

    @pytest.mark.anyio
    async def test_threshold_included(self, two_of_three):
        assert to_canonical_dict(two_of_three)["threshold"] == 2

    @pytest.mark.anyio
    async def test_reordered_trees_identical(self):
        left = And([org(1), Or([org(3), org(4)]), AtLeast([org(5), org(6)], 1)])
        right = And([AtLeast([org(6), org(5)], 1), Or([org(4), org(3)]), org(1)])

        assert to_canonical_json_string(left) == to_canonical_json_string(right)

    @pytest.mark.anyio
    async def test_pretty_is_indented_json(self, nested_policy):
        pretty = to_canonical_json_pretty(nested_policy)

        assert "\n" in pretty
        assert json.loads(pretty) == to_canonical_dict(nested_policy)


class TestFingerprint:
    """Test policy fingerprints."""

    @pytest.mark.anyio
    async def test_format(self, nested_policy):
        fingerprint = policy_fingerprint(nested_policy)

        assert fingerprint.startswith("sha256:")
        assert len(fingerprint) == len("sha256:") + 64

    @pytest.mark.anyio
    async def test_equivalent_policies_share_fingerprint(self, p1, p2):
        assert policy_fingerprint(And([p1, p2])) == policy_fingerprint(And([p2, p1]))

    @pytest.mark.anyio
    async def test_different_policies_differ(self, p1, p2):
        assert policy_fingerprint(And([p1, p2])) != policy_fingerprint(Or([p1, p2]))


class TestExpressionFromJson:
    """Test loading expressions from JSON."""

    @pytest.mark.anyio
    async def test_canonical_string_round_trip(self, nested_policy):
        assert expression_from_json(to_canonical_json_string(nested_policy)) == nested_policy

    @pytest.mark.anyio
    async def test_from_dict(self, two_of_three):
        assert expression_from_json(to_canonical_dict(two_of_three)) == two_of_three

    @pytest.mark.anyio
    async def test_invalid_document(self):
        with pytest.raises(ValidationError) as exc_info:
            expression_from_json('{"kind": "AT_LEAST", "children": []}')

        assert exc_info.value.details["errors"]

    @pytest.mark.anyio
    async def test_not_json(self):
        with pytest.raises(ValidationError):
            expression_from_json("not json")
