"""Tests for the target health query and the instance address resolver."""

import logging

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from resource_discovery import (
    HealthState,
    InstanceAddressResolver,
    TargetHealthQuery,
    build_target_group_arn,
)

TG_ARN = "arn:aws:elasticloadbalancing:ap-southeast-1:197542431507:targetgroup/web/123"


def client_error(code, operation):
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)


def test_build_target_group_arn():
    assert build_target_group_arn("ap-southeast-1", "197542431507", "targetgroup/web/123") == TG_ARN


class TestTargetHealthQuery:
    def test_parses_target_health(self, mock_session, aws_clients):
        aws_clients["elbv2"].describe_target_health.return_value = {
            "TargetHealthDescriptions": [
                {
                    "Target": {"Id": "i-0001", "Port": 80},
                    "HealthCheckPort": "80",
                    "TargetHealth": {"State": "healthy"},
                },
                {
                    "Target": {"Id": "i-0002", "Port": 80},
                    "TargetHealth": {
                        "State": "unhealthy",
                        "Reason": "Target.ResponseCodeMismatch",
                        "Description": "Health checks failed with these codes: [502]",
                    },
                },
                {"Target": {"Id": "i-0003"}, "TargetHealth": {"State": "something-new"}},
            ]
        }

        records = TargetHealthQuery(mock_session).describe(TG_ARN)

        aws_clients["elbv2"].describe_target_health.assert_called_once_with(TargetGroupArn=TG_ARN)
        assert [r.target_id for r in records] == ["i-0001", "i-0002", "i-0003"]
        assert [r.state for r in records] == [
            HealthState.HEALTHY,
            HealthState.UNHEALTHY,
            HealthState.UNKNOWN,
        ]
        assert [r.is_unhealthy for r in records] == [False, True, False]
        assert records[1].reason == "Target.ResponseCodeMismatch"
        assert records[0].port == 80

    def test_draining_is_not_unhealthy(self, mock_session, aws_clients):
        aws_clients["elbv2"].describe_target_health.return_value = {
            "TargetHealthDescriptions": [
                {"Target": {"Id": "i-0001"}, "TargetHealth": {"State": "unhealthy.draining"}}
            ]
        }
        (record,) = TargetHealthQuery(mock_session).describe(TG_ARN)
        assert record.state is HealthState.UNHEALTHY_DRAINING
        assert not record.is_unhealthy

    @pytest.mark.parametrize(
        "code", ["TargetGroupNotFound", "InvalidTarget", "HealthUnavailable", "AccessDenied"]
    )
    def test_client_errors_yield_no_records(self, mock_session, aws_clients, caplog, code):
        caplog.set_level(logging.ERROR)
        aws_clients["elbv2"].describe_target_health.side_effect = client_error(
            code, "DescribeTargetHealth"
        )

        assert TargetHealthQuery(mock_session).describe(TG_ARN) == []
        assert code in caplog.text

    def test_transport_errors_yield_no_records(self, mock_session, aws_clients):
        aws_clients["elbv2"].describe_target_health.side_effect = EndpointConnectionError(
            endpoint_url="https://elasticloadbalancing.ap-southeast-1.amazonaws.com"
        )
        assert TargetHealthQuery(mock_session).describe(TG_ARN) == []


class TestInstanceAddressResolver:
    def test_returns_private_ip(self, mock_session, aws_clients):
        aws_clients["ec2"].describe_instances.return_value = {
            "Reservations": [
                {"Instances": [{"InstanceId": "i-0001", "PrivateIpAddress": "10.0.0.5"}]}
            ]
        }

        assert InstanceAddressResolver(mock_session).resolve("i-0001") == "10.0.0.5"
        aws_clients["ec2"].describe_instances.assert_called_once_with(InstanceIds=["i-0001"])

    @pytest.mark.parametrize(
        "response",
        [
            {"Reservations": []},
            {},
            {"Reservations": [{"Instances": []}]},
            {"Reservations": [{"Instances": [{"InstanceId": "i-0001", "State": {"Name": "terminated"}}]}]},
        ],
    )
    def test_missing_data_returns_empty(self, mock_session, aws_clients, response):
        aws_clients["ec2"].describe_instances.return_value = response
        assert InstanceAddressResolver(mock_session).resolve("i-0001") == ""

    def test_api_error_returns_empty(self, mock_session, aws_clients, caplog):
        caplog.set_level(logging.ERROR)
        aws_clients["ec2"].describe_instances.side_effect = client_error(
            "InvalidInstanceID.NotFound", "DescribeInstances"
        )

        assert InstanceAddressResolver(mock_session).resolve("i-0001") == ""
        assert "i-0001" in caplog.text
