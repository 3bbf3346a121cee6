import json
import boto3
import os
import logging

logger = logging.getLogger()
logger.setLevel(logging.INFO)

codedeploy = boto3.client('codedeploy')
lambda_client = boto3.client('lambda')

# Honeypot-filled submission: the handler answers 200 without sending email
SMOKE_TEST_BODY = 'name=Deploy+Check&email=deploy-check%40example.com&_gotcha=pre-traffic'


def _invoke(target_function, test_event):
    response = lambda_client.invoke(
        FunctionName=target_function,
        InvocationType='RequestResponse',
        Payload=json.dumps(test_event)
    )

    response_payload = json.loads(response['Payload'].read())
    logger.info(f"Test response: {json.dumps(response_payload)}")

    if response.get('FunctionError'):
        raise Exception(f"Function returned error: {response_payload}")

    if response.get('StatusCode') != 200:
        raise Exception(f"Unexpected status code: {response.get('StatusCode')}")

    return response_payload


def lambda_handler(event, context):
    """
    Pre-traffic hook for CodeDeploy.
    Runs smoke tests against the new version before shifting traffic to it.
    """
    logger.info(f"Pre-traffic hook triggered: {json.dumps(event)}")

    deployment_id = event['DeploymentId']
    lifecycle_event_hook_execution_id = event['LifecycleEventHookExecutionId']

    try:
        target_function = os.environ.get('TARGET_FUNCTION')

        logger.info(f"Running smoke tests on {target_function}")

        # Test 1: CORS preflight
        preflight = _invoke(target_function, {
            'requestContext': {'http': {'method': 'OPTIONS'}},
            'headers': {'origin': 'https://www.dorolabs.eu'}
        })
        if preflight.get('statusCode') != 204:
            raise Exception(f"Preflight returned {preflight.get('statusCode')}, expected 204")

        # Test 2: honeypot submission (exercises the POST path without delivery)
        submission = _invoke(target_function, {
            'requestContext': {'http': {'method': 'POST'}},
            'headers': {'content-type': 'application/x-www-form-urlencoded'},
            'body': SMOKE_TEST_BODY,
            'isBase64Encoded': False
        })
        body = json.loads(submission.get('body') or '{}')
        if submission.get('statusCode') != 200 or body.get('success') is not True:
            raise Exception(f"Invalid submission response: {submission}")

        logger.info("Pre-traffic validation passed")

        # Report success
        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Succeeded'
        )

        return {
            'statusCode': 200,
            'body': json.dumps('Pre-traffic validation succeeded')
        }

    except Exception as e:
        logger.error(f"Pre-traffic validation failed: {str(e)}", exc_info=True)

        # Report failure - this will prevent deployment
        codedeploy.put_lifecycle_event_hook_execution_status(
            deploymentId=deployment_id,
            lifecycleEventHookExecutionId=lifecycle_event_hook_execution_id,
            status='Failed'
        )

        return {
            'statusCode': 500,
            'body': json.dumps(f'Pre-traffic validation failed: {str(e)}')
        }
