"""HTTP client that pushes artifacts to Bridge deployment endpoints."""

from __future__ import annotations

import logging
from typing import Any, Callable

import requests
from requests.auth import HTTPBasicAuth

from rep_deployer.domain.entities import DeploymentTarget, UploadedFile
from rep_deployer.domain.errors import DeployError
from rep_deployer.infrastructure.identity_provider import acquire_token

logger = logging.getLogger(__name__)

UPLOAD_FIELD_NAME = "uploadFile"
ERROR_BODY_LIMIT = 2000

# Service-management flags understood by the Bridge. They are sent verbatim
# on every deployment and are not configurable. ``stopTimeout`` is the time
# the target allows the running service to stop; it is unrelated to the
# client-side request timeout.
DEPLOYMENT_QUERY_PARAMS: dict[str, str] = {
    "overwrite": "true",
    "overwritePrefs": "false",
    "startup": "false",
    "preserveNodeModules": "false",
    "npmInstall": "false",
    "runScripts": "false",
    "stopTimeout": "10",
    "allowKill": "false",
}

TokenProvider = Callable[..., str]


def _parse_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class BridgeClient:
    """Deploy uploaded artifacts to targets using their configured auth flow."""

    def __init__(
        self,
        *,
        request_timeout: float,
        token_timeout: float,
        token_provider: TokenProvider = acquire_token,
    ) -> None:
        self.request_timeout = request_timeout
        self.token_timeout = token_timeout
        self._token_provider = token_provider

    def deploy_to_target(self, uploaded_file: UploadedFile, target: DeploymentTarget) -> Any:
        """Deploy ``uploaded_file`` to ``target``, fetching a token when needed.

        Raises :class:`~rep_deployer.domain.errors.AuthError` when the token
        cannot be obtained and :class:`DeployError` when the upload fails.
        """

        token = None
        if target.uses_oauth():
            token = self._token_provider(target, timeout=self.token_timeout)
        return self.deploy(uploaded_file, target, token=token)

    def deploy(
        self,
        uploaded_file: UploadedFile,
        target: DeploymentTarget,
        *,
        token: str | None = None,
    ) -> Any:
        """POST ``uploaded_file`` to the deployment endpoint of ``target``."""

        headers = {"accept": "application/json"}
        auth = None
        if target.uses_oauth():
            if not token:
                raise DeployError(f"No access token available for {target.name}")
            headers["Authorization"] = f"Bearer {token}"
        else:
            auth = HTTPBasicAuth(target.username, target.password)

        url = target.deployment_url
        logger.info(
            "Deploying %s to %s (%s)", uploaded_file.original_name, target.name, url
        )
        try:
            artifact = open(uploaded_file.storage_path, "rb")
        except OSError as exc:
            logger.error(
                "Cannot read stored artifact %s: %s", uploaded_file.storage_path, exc
            )
            raise DeployError(f"Cannot read uploaded file: {exc}") from exc

        with artifact:
            try:
                response = requests.post(
                    url,
                    params=DEPLOYMENT_QUERY_PARAMS,
                    files={UPLOAD_FIELD_NAME: (uploaded_file.original_name, artifact)},
                    headers=headers,
                    auth=auth,
                    verify=target.verify_certificates,
                    timeout=self.request_timeout,
                )
            except requests.exceptions.RequestException as exc:
                raise self._transport_error(target, exc) from exc

        if not response.ok:
            body = response.text[:ERROR_BODY_LIMIT]
            logger.error(
                "Deployment of %s to %s failed with status %s: %s",
                uploaded_file.original_name,
                target.name,
                response.status_code,
                body,
            )
            message = f"Request failed with status code {response.status_code}"
            if body:
                message = f"{message}: {body}"
            raise DeployError(message, status_code=response.status_code, body=body)

        return _parse_body(response)

    def _transport_error(
        self, target: DeploymentTarget, exc: requests.exceptions.RequestException
    ) -> DeployError:
        if isinstance(exc, requests.exceptions.Timeout):
            logger.error("Deployment to %s timed out", target.name)
            return DeployError(
                f"Deployment to {target.name} timed out after {self.request_timeout:g}s"
            )
        logger.error("Deployment to %s failed: %s", target.name, exc)
        return DeployError(f"Failed to connect to {target.name}: {exc}")


__all__ = ["BridgeClient", "DEPLOYMENT_QUERY_PARAMS", "UPLOAD_FIELD_NAME"]
