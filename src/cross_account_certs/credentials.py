"""Cross-account role assumption for the DNS account."""

from __future__ import annotations

import logging
from typing import Any, Callable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import AuthorizationError


logger = logging.getLogger(__name__)

DEFAULT_SESSION_NAME = "LambdaRoute53Session"

_CREDENTIAL_FIELDS = ("AccessKeyId", "SecretAccessKey", "SessionToken")


def assume_role(
    sts_client: Any,
    role_arn: str,
    session_name: str = DEFAULT_SESSION_NAME,
    client_factory: Callable[..., Any] = boto3.client,
) -> Any:
    """Return a Route 53 client acting with the temporary credentials of `role_arn`."""

    if not role_arn:
        raise AuthorizationError("CrossAccountRoleArn is required", stage="assume-role")

    try:
        response = sts_client.assume_role(RoleArn=role_arn, RoleSessionName=session_name)
    except (ClientError, BotoCoreError) as exc:
        logger.error("Assuming %s failed: %s", role_arn, exc)
        raise AuthorizationError(f"Could not assume role: {exc}", stage="assume-role", arn=role_arn) from exc

    credentials = response.get("Credentials") or {}
    missing = [name for name in _CREDENTIAL_FIELDS if not credentials.get(name)]
    if missing:
        raise AuthorizationError(
            f"AssumeRole returned incomplete credentials, missing {', '.join(missing)}",
            stage="assume-role",
            arn=role_arn,
        )

    logger.info("Assumed role %s as session %s", role_arn, session_name)
    return client_factory(
        "route53",
        aws_access_key_id=credentials["AccessKeyId"],
        aws_secret_access_key=credentials["SecretAccessKey"],
        aws_session_token=credentials["SessionToken"],
    )
