#!/usr/bin/env python3
"""
Testing property overrides on synthesized resources.
"""
import pytest

from edgesite.exceptions import OverrideError
from edgesite.fn import GetAtt
from edgesite.overrides import PropertyDeletion, PropertyOverride, apply_overrides


def synthesized():
    return {
        "DistributionConfig": {
            "Origins": [
                {
                    "Id": "SiteOrigin",
                    "S3OriginConfig": {"OriginAccessIdentity": "some-identity"},
                    "CustomOriginConfig": {"OriginProtocolPolicy": "https-only"},
                }
            ],
            "Enabled": True,
        }
    }


def test_override_sets_value_through_list_index():
    """Numeric parts index into lists, values are rendered."""
    properties = apply_overrides(
        synthesized(),
        [
            PropertyOverride(
                "DistributionConfig.Origins.0.OriginAccessControlId",
                GetAtt("OAC", "Id"),
            ),
            PropertyOverride(
                "DistributionConfig.Origins.0.S3OriginConfig.OriginAccessIdentity", ""
            ),
        ],
        "Distribution",
    )
    origin = properties["DistributionConfig"]["Origins"][0]
    assert origin["OriginAccessControlId"] == {"Fn::GetAtt": ["OAC", "Id"]}
    assert origin["S3OriginConfig"] == {"OriginAccessIdentity": ""}


def test_override_creates_missing_dicts():
    """Assignment creates the dictionaries on its way."""
    properties = apply_overrides(
        {}, [PropertyOverride("Logging.Bucket", "logs")], "Distribution"
    )
    assert properties == {"Logging": {"Bucket": "logs"}}


def test_deletion():
    """Deleting removes the key, deleting something missing is fine."""
    properties = apply_overrides(
        synthesized(),
        [
            PropertyDeletion("DistributionConfig.Origins.0.CustomOriginConfig"),
            PropertyDeletion("DistributionConfig.Origins.0.CustomOriginConfig"),
            PropertyDeletion("DistributionConfig.Logging.Bucket"),
        ],
        "Distribution",
    )
    origin = properties["DistributionConfig"]["Origins"][0]
    assert "CustomOriginConfig" not in origin
    assert "Logging" not in properties["DistributionConfig"]


def test_deletion_of_list_item():
    properties = apply_overrides(
        synthesized(), [PropertyDeletion("DistributionConfig.Origins.0")], "Dist"
    )
    assert properties["DistributionConfig"]["Origins"] == []


@pytest.mark.parametrize(
    "override",
    [
        PropertyOverride("", "value"),
        PropertyOverride("DistributionConfig..Enabled", False),
        PropertyOverride("DistributionConfig.Origins.1.Id", "second"),
        PropertyOverride("DistributionConfig.Origins.first.Id", "first"),
        PropertyOverride("DistributionConfig.Enabled.Really", True),
        PropertyDeletion("DistributionConfig.Origins.3"),
    ],
)
def test_malformed_overrides(override):
    """Anything that does not fit the synthesized shape is refused."""
    with pytest.raises(OverrideError) as err:
        apply_overrides(synthesized(), [override], "Distribution")
    assert err.value.logical_name == "Distribution"
    assert err.value.path == override.path


def test_override_references():
    assert PropertyOverride("A.B", GetAtt("OAC", "Id")).references() == {"OAC"}
    assert PropertyOverride("A.B", "").references() == set()
    assert PropertyDeletion("A.B").references() == set()
