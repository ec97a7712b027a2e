import os
from typing import Optional

import boto3

from botocore.config import Config


def get_boto_region() -> str:
    """
    DYNAMODB_REGION overrides the region lambda provides in AWS_REGION
    """
    return os.environ.get('DYNAMODB_REGION') or os.environ.get('AWS_REGION') or 'eu-central-1'


main_boto_region = get_boto_region()
aws_config_ddb = Config(retries={'max_attempts': 1, 'mode': 'standard'}, region_name=main_boto_region)


def dynamodb_resource(endpoint_url: Optional[str] = None):
    """
    DynamoDB Resource.
    Resources represent an object-oriented interface to AWS services.
    endpoint_url is set for DynamoDB Local
    """
    if endpoint_url:
        return boto3.resource('dynamodb', endpoint_url=endpoint_url, config=aws_config_ddb)
    return boto3.resource('dynamodb', config=aws_config_ddb)
