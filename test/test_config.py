import json
import os

import pytest

from chalicelib.utils.boto_clients import get_boto_region

# set by the lambda runtime, deployment fails if a stage sets them
lambda_reserved_keys = {
    'AWS_REGION', 'AWS_DEFAULT_REGION', 'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY', 'AWS_SESSION_TOKEN',
    'AWS_EXECUTION_ENV', 'AWS_LAMBDA_FUNCTION_NAME', 'AWS_LAMBDA_FUNCTION_MEMORY_SIZE',
    'AWS_LAMBDA_FUNCTION_VERSION', 'AWS_LAMBDA_LOG_GROUP_NAME', 'AWS_LAMBDA_LOG_STREAM_NAME',
    'AWS_LAMBDA_RUNTIME_API', 'LAMBDA_TASK_ROOT', 'LAMBDA_RUNTIME_DIR', '_HANDLER', '_X_AMZN_TRACE_ID'
}

chalice_config_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.chalice', 'config.json')


def get_stages():
    with open(chalice_config_path) as config_file:
        return json.load(config_file)['stages']


@pytest.mark.parametrize('stage', sorted(get_stages()))
def test_stage_has_no_lambda_reserved_variables(stage):
    environment_variables = get_stages()[stage].get('environment_variables', {})

    assert lambda_reserved_keys.isdisjoint(environment_variables)
    assert 'GEN_TABLE_NAME' in environment_variables
    assert 'ACCESS_TOKEN_SECRET' in environment_variables


def test_boto_region(monkeypatch):
    monkeypatch.delenv('DYNAMODB_REGION', raising=False)
    monkeypatch.delenv('AWS_REGION', raising=False)
    assert get_boto_region() == 'eu-central-1'

    monkeypatch.setenv('AWS_REGION', 'us-east-1')
    assert get_boto_region() == 'us-east-1'

    monkeypatch.setenv('DYNAMODB_REGION', 'eu-west-1')
    assert get_boto_region() == 'eu-west-1'
