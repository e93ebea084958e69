"""
Flickr REST API client.

One request per call, no retry: a failure is classified and raised, and the
caller decides whether it is fatal. Every call goes through `call`, which
adds the API key and the JSON format parameters.

Failure classes:
- TransportError: connection/timeout errors, non-200 status, `stat: fail`
- DecodeError: body is not JSON, or does not match the expected payload
"""

import httpx
from typing import Any, Dict, Type, TypeVar
from pydantic import BaseModel, ValidationError
from core.exceptions import DecodeError, TransportError
import logging

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.flickr.com/services/rest/"

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class FlickrClient:
    """
    Thin wrapper over httpx for the Flickr REST endpoint.

    The API key is given explicitly; the HTTP client is owned by the caller
    so one connection pool can serve a whole run.

    Attributes:
        api_key: Flickr API key sent with every call
        api_url: REST endpoint URL
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        api_url: str = DEFAULT_API_URL
    ):
        self.http = http_client
        self.api_key = api_key
        self.api_url = api_url

    async def call(self, method: str, **params: Any) -> Dict[str, Any]:
        """
        Call one API method and return the decoded JSON object.

        Raises:
            TransportError: For network errors, HTTP errors and `stat: fail`
            DecodeError: If the body is not a JSON object
        """
        query = {
            "method": method,
            "api_key": self.api_key,
            "format": "json",
            "nojsoncallback": 1,
        }
        query.update({k: v for k, v in params.items() if v is not None})

        logger.debug(f"Calling {method} with {params}")

        try:
            response = await self.http.get(self.api_url, params=query)
        except httpx.HTTPError as e:
            raise TransportError(
                f"Request to {method} failed",
                context={"method": method},
                original_exception=e
            )

        if response.status_code != 200:
            raise TransportError(
                f"Unexpected HTTP status from {method}",
                context={
                    "method": method,
                    "status_code": response.status_code,
                    "response_body": response.text[:500]
                }
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Response from {method} is not JSON",
                context={"method": method, "response_body": response.text[:500]},
                original_exception=e
            )

        if not isinstance(data, dict):
            raise DecodeError(
                f"Response from {method} is not a JSON object",
                context={"method": method, "response_body": response.text[:500]}
            )

        if data.get("stat") == "fail":
            raise TransportError(
                f"Flickr rejected {method}: {data.get('message', 'no message')}",
                context={"method": method, "flickr_code": data.get("code")}
            )

        return data

    async def call_and_decode(self, method: str, payload: Type[PayloadT], **params: Any) -> PayloadT:
        """Call a method and validate the body against a payload model"""
        data = await self.call(method, **params)
        try:
            return payload.model_validate(data)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected payload from {method}",
                context={"method": method, "errors": e.error_count()},
                original_exception=e
            )
