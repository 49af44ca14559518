import logging
from unittest.mock import MagicMock

import pytest


def task_definition_response(containers, volumes=None, family="ecscompose-nginx--staging"):
    return {
        "taskDefinition": {
            "family": family,
            "revision": 7,
            "containerDefinitions": containers,
            "volumes": volumes or [],
        }
    }


@pytest.fixture
def fake_ecs():
    """ECS client for a cluster of three instances and a two-container task."""
    ecs = MagicMock()
    ecs.describe_task_definition.return_value = task_definition_response(
        containers=[
            {
                "name": "web",
                "image": "nginx:1.25",
                "environment": [
                    {"name": "HOME", "value": "/home/x"},
                    {"name": "MODE", "value": "staging"},
                ],
                "mountPoints": [{"sourceVolume": "data", "containerPath": "/var/data"}],
            },
            {"name": "sidecar", "image": "busybox"},
        ],
        volumes=[{"name": "data", "host": {"sourcePath": "/opt/data"}}],
    )
    ecs.get_paginator.return_value.paginate.return_value = [
        {"containerInstanceArns": ["arn:ci/1", "arn:ci/3"]},
        {"containerInstanceArns": ["arn:ci/9"]},
    ]
    ecs.describe_container_instances.side_effect = lambda cluster, containerInstances: {
        "containerInstances": [
            {
                "containerInstanceArn": containerInstances[0],
                "ec2InstanceId": "i-" + containerInstances[0].split("/")[-1],
            }
        ]
    }
    return ecs


@pytest.fixture
def fake_ec2():
    ec2 = MagicMock()
    ec2.describe_instances.side_effect = lambda InstanceIds: {
        "Reservations": [
            {
                "Instances": [
                    {
                        "InstanceId": InstanceIds[0],
                        "Tags": [{"Key": "Name", "Value": "prod-" + InstanceIds[0][2:]}],
                    }
                ]
            }
        ]
    }
    return ec2


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("ecsrun")
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)
