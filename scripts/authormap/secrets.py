"""Access token lookup in AWS Secrets Manager or GCP Secret Manager.

``ADO_PAT`` may hold the token itself or a reference to it:

  aws-secret://NAME            whole SecretString
  aws-secret://NAME#KEY        one key of a JSON SecretString
  gcp-secret://NAME            latest version, project from GCP_PROJECT_ID
  gcp-secret://projects/...    full resource name of a secret version
"""

from __future__ import annotations

import json
import logging
import os

logger = logging.getLogger("authormap.secrets")


def resolve_secret(value: str) -> str:
    """Return the token a reference points at, or ``value`` unchanged."""
    scheme, sep, ref = value.partition("://")
    if not sep or scheme not in _RESOLVERS:
        return value
    logger.debug("Resolving access token from %s", scheme)
    return _RESOLVERS[scheme](ref)


def _from_aws(ref: str) -> str:
    import boto3

    name, _, key = ref.partition("#")
    client = boto3.client("secretsmanager", region_name=os.environ.get("AWS_REGION", "us-east-1"))
    secret = client.get_secret_value(SecretId=name)["SecretString"]
    return str(json.loads(secret)[key]) if key else secret


def _from_gcp(ref: str) -> str:
    from google.cloud import secretmanager

    if not ref.startswith("projects/"):
        project = os.environ.get("GCP_PROJECT_ID", "")
        if not project:
            raise ValueError(f"GCP_PROJECT_ID is required to resolve gcp-secret://{ref}")
        ref = f"projects/{project}/secrets/{ref}/versions/latest"

    client = secretmanager.SecretManagerServiceClient()
    return client.access_secret_version(request={"name": ref}).payload.data.decode("utf-8")


_RESOLVERS = {
    "aws-secret": _from_aws,
    "gcp-secret": _from_gcp,
}
