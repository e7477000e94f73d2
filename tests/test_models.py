"""
Tests for IAM record types.
"""

import dataclasses

import pytest

from iam2cfn.iam.models import GroupRecord, Inventory, PolicyRecord, ResourceKind, Tag


class TestResourceKind:
    """Test ResourceKind values and resource types."""

    def test_choices(self):
        assert ResourceKind.choices() == ("groups", "policies", "roles")

    @pytest.mark.parametrize(
        "kind, resource_type",
        [
            (ResourceKind.GROUPS, "AWS::IAM::Group"),
            (ResourceKind.POLICIES, "AWS::IAM::ManagedPolicy"),
            (ResourceKind.ROLES, "AWS::IAM::Role"),
        ],
    )
    def test_resource_type(self, kind, resource_type):
        """Test every kind maps to its CloudFormation type."""
        assert kind.resource_type == resource_type

    def test_from_cli_value(self):
        """Test kinds are looked up by their CLI value."""
        assert ResourceKind("roles") is ResourceKind.ROLES
        with pytest.raises(ValueError):
            ResourceKind("users")


class TestRecords:
    """Test record construction."""

    def test_records_are_frozen(self):
        """Test records cannot be changed after construction."""
        group = GroupRecord(name="Admins", path="/")
        with pytest.raises(dataclasses.FrozenInstanceError):
            group.name = "Other"

    def test_policy_defaults(self):
        """Test inline policies only need a name and document."""
        policy = PolicyRecord(name="inline", policy_document="{}")

        assert policy.description is None
        assert policy.path == "/"
        assert policy.tags == ()

    def test_inventory_iteration(self):
        """Test an inventory iterates its records in order."""
        records = (GroupRecord("b", "/"), GroupRecord("a", "/"))
        inventory = Inventory(ResourceKind.GROUPS, records)

        assert len(inventory) == 2
        assert [r.name for r in inventory] == ["b", "a"]

    def test_tags_compare_by_value(self):
        assert Tag("k", "v") == Tag("k", "v")
